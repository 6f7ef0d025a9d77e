"""
Order console: the calling layer in front of the gateway.

Holds the session, the displayed order list, draft statuses and the active
filter. Order operations are refused locally when nobody is logged in, and a
401/403 from the gateway ends the session.

Listings carry a sequence number. Only the most recently issued listing may
replace the displayed orders, so a slow, older response can't overwrite a
newer one.
"""

import functools
import itertools
import logging
from typing import Any, Dict, List, Optional

import requests

from supply_gateway.client.session import Session, SessionState
from supply_gateway.errors import (
    GATEWAY_UNAVAILABLE,
    GatewayError,
    LocalValidationError,
    SessionExpired,
    SessionMissing,
    UpstreamRejected,
    UpstreamUnavailable,
)
from supply_gateway.schemas import SupplyOrder, TokenOut
from supply_gateway.workflow import (
    OrderStatus,
    StatusFilter,
    parse_filter,
    parse_order_id,
    parse_status,
    validate_new_order,
)

logger = logging.getLogger(__name__)

AUTH_REJECTION_STATUSES = (401, 403)


def _records_error(fn):
    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        self.last_error = None
        try:
            return fn(self, *args, **kwargs)
        except GatewayError as e:
            self.last_error = e.message
            raise
    return wrapper


def _error_message(r, default: str) -> str:
    try:
        body = r.json()
    except ValueError:
        return default
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        return body["error"]
    return default


class OrderConsole:
    def __init__(self, base_url: str, state: SessionState,
                 http: Optional[requests.Session] = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.state = state
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

        self.orders: List[SupplyOrder] = []
        self.drafts: Dict[int, OrderStatus] = {}
        self.status_filter = StatusFilter.ALL
        self.last_error: Optional[str] = None

        self._sequence = itertools.count(1)
        self._latest = 0

    # ---------------- Session ----------------

    def start(self) -> bool:
        """Pick up a stored session and try a first listing with it."""
        if not self.state.restore():
            return False
        try:
            self.load_orders(StatusFilter.ALL)
        except GatewayError as e:
            logger.warning(f"Initial listing failed: {e.message}")
        return self.state.is_authenticated

    @_records_error
    def login(self, username: str, password: str) -> Session:
        r = self._send("POST", "/auth/login", json={"username": username, "password": password})
        if not 200 <= r.status_code < 300:
            raise UpstreamRejected(_error_message(r, "Login failed."), r.status_code)

        try:
            token = TokenOut.model_validate(r.json())
            session = Session(token.token, token.token_type, token.expires_in_seconds)
        except ValueError:
            raise UpstreamRejected("Unexpected login response.", r.status_code) from None

        self._reset_view()
        self.state.login(session)
        self.load_orders(StatusFilter.ALL)
        return session

    def logout(self):
        self.state.logout()
        self._reset_view()
        self.last_error = None

    # ---------------- Orders ----------------

    @_records_error
    def load_orders(self, status_filter: Any = None) -> List[SupplyOrder]:
        session = self._require_session()
        wanted = self.status_filter if status_filter is None else parse_filter(status_filter)

        seq = next(self._sequence)
        self._latest = seq
        self.status_filter = wanted

        r = self._send("GET", "/api/orders", session=session, params=wanted.query_params())
        self._check(r, "Failed to load orders.")
        try:
            orders = [SupplyOrder.model_validate(o) for o in r.json()]
        except (ValueError, TypeError):
            raise UpstreamRejected("Unexpected order listing.", r.status_code) from None

        if seq != self._latest:
            logger.info(f"Discarding stale listing #{seq} (latest is #{self._latest})")
            return self.orders

        self.orders = orders
        self.drafts = {o.id: o.status for o in orders}
        return orders

    @_records_error
    def create_order(self, item_name: Any, quantity: Any) -> SupplyOrder:
        session = self._require_session()
        name, qty = validate_new_order(item_name, quantity)

        r = self._send("POST", "/api/orders", session=session, json={"itemName": name, "quantity": qty})
        self._check(r, "Could not create order.")
        created = self._parse_order(r)
        logger.info(f"Created order #{created.id} ({name} x{qty})")

        self._refresh()
        return created

    @_records_error
    def update_status(self, order_id: Any, status: Any) -> SupplyOrder:
        session = self._require_session()
        oid = parse_order_id(order_id)
        next_status = parse_status(status)

        r = self._send("PATCH", f"/api/orders/{oid}/status", session=session,
                       json={"status": next_status.value})
        self._check(r, "Could not update order status.")
        updated = self._parse_order(r)
        logger.info(f"Order #{oid} is now {updated.status.value}")

        self._refresh()
        return updated

    def set_draft(self, order_id: Any, status: Any):
        self.drafts[parse_order_id(order_id)] = parse_status(status)

    @_records_error
    def save_draft(self, order_id: Any) -> SupplyOrder:
        oid = parse_order_id(order_id)
        status = self.drafts.get(oid)
        if status is None:
            raise LocalValidationError(f"No status selected for order #{oid}.")
        return self.update_status(oid, status)

    # ---------------- Helpers ----------------

    def _refresh(self):
        # the mutation already went through; a failed reload is only reported
        try:
            self.load_orders()
        except GatewayError as e:
            logger.warning(f"Reload after change failed: {e.message}")

    def _require_session(self) -> Session:
        session = self.state.session
        if session is None:
            raise SessionMissing()
        return session

    def _send(self, method: str, path: str, *, session: Optional[Session] = None, **kwargs):
        headers = {"Cache-Control": "no-cache"}
        if session is not None:
            headers["Authorization"] = session.authorization
        try:
            return self.http.request(method, f"{self.base_url}{path}", headers=headers,
                                     timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Gateway unreachable: {method} {path} ({e.__class__.__name__})")
            raise UpstreamUnavailable(GATEWAY_UNAVAILABLE) from e

    def _check(self, r, default_message: str):
        if 200 <= r.status_code < 300:
            return
        if r.status_code in AUTH_REJECTION_STATUSES:
            self.state.session_expired()
            self._reset_view()
            raise SessionExpired(r.status_code)
        message = _error_message(r, default_message)
        if r.status_code == 502:
            raise UpstreamUnavailable(message)
        raise UpstreamRejected(message, r.status_code)

    def _parse_order(self, r) -> SupplyOrder:
        try:
            return SupplyOrder.model_validate(r.json())
        except ValueError:
            raise UpstreamRejected("Unexpected order payload.", r.status_code) from None

    def _reset_view(self):
        self.orders = []
        self.drafts = {}
        self.status_filter = StatusFilter.ALL
        # anything still in flight belongs to the previous view
        self._latest = next(self._sequence)
