"""
Order status workflow.

The four statuses are flat and mutually exclusive. Which transitions are
legal is decided by the Order service; here we only restrict the set of
values a client may ask for and shape the listing filter.
"""

import math
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from supply_gateway.errors import LocalValidationError

INVALID_ORDER_MESSAGE = "Provide a valid item name and a quantity of at least 1."
MAX_EXACT_FLOAT = 2 ** 53


class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    CANCELLED = "CANCELLED"


class StatusFilter(Enum):
    """Listing filter. ALL is local only and never sent downstream."""

    ALL = "ALL"
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    CANCELLED = "CANCELLED"

    @property
    def status(self) -> Optional[OrderStatus]:
        if self is StatusFilter.ALL:
            return None
        return OrderStatus(self.value)

    def query_params(self) -> Dict[str, str]:
        if self is StatusFilter.ALL:
            return {}
        return {"status": self.value}


def allowed_statuses() -> str:
    return ", ".join(s.value for s in OrderStatus)


def parse_status(value: Any) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    if not isinstance(value, str):
        raise LocalValidationError(f"Status must be one of: {allowed_statuses()}.")
    try:
        return OrderStatus(value)
    except ValueError:
        raise LocalValidationError(
            f"Invalid status '{value}'. Allowed: {allowed_statuses()}."
        ) from None


def parse_filter(value: Any) -> StatusFilter:
    """None, "" and "ALL" select everything; otherwise a status literal (any case)."""
    if isinstance(value, StatusFilter):
        return value
    if isinstance(value, OrderStatus):
        return StatusFilter(value.value)
    if value is None:
        return StatusFilter.ALL
    if not isinstance(value, str):
        raise LocalValidationError("Status filter must be a string.")
    value = value.strip().upper()
    if not value:
        return StatusFilter.ALL
    try:
        return StatusFilter(value)
    except ValueError:
        raise LocalValidationError(
            f"Invalid status filter '{value}'. Allowed: ALL, {allowed_statuses()}."
        ) from None


def parse_quantity(value: Any) -> int:
    # bool is an int subclass; True is not a quantity
    if isinstance(value, bool):
        raise LocalValidationError(INVALID_ORDER_MESSAGE)

    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                raise LocalValidationError(INVALID_ORDER_MESSAGE) from None

    if isinstance(value, int):
        quantity = value
    elif isinstance(value, float):
        # past 2**53 a float no longer names one integer
        if not math.isfinite(value) or not value.is_integer() or abs(value) > MAX_EXACT_FLOAT:
            raise LocalValidationError(INVALID_ORDER_MESSAGE)
        quantity = int(value)
    else:
        raise LocalValidationError(INVALID_ORDER_MESSAGE)

    if quantity < 1:
        raise LocalValidationError(INVALID_ORDER_MESSAGE)
    return quantity


def validate_new_order(item_name: Any, quantity: Any) -> Tuple[str, int]:
    """Pre-flight check for a create request. Returns (trimmed name, quantity)."""
    if not isinstance(item_name, str) or not item_name.strip():
        raise LocalValidationError(INVALID_ORDER_MESSAGE)
    return item_name.strip(), parse_quantity(quantity)


def parse_order_id(value: Any) -> int:
    if isinstance(value, bool):
        raise LocalValidationError("Order id must be an integer.")
    try:
        return int(str(value).strip())
    except ValueError:
        raise LocalValidationError("Order id must be an integer.") from None
