"""
Demo Order service: in-memory supply orders behind a bearer JWT check.
Stands in for the real Order collaborator when running locally or in tests.
"""

import itertools
import logging
import threading
from datetime import datetime, timezone

from fastapi import FastAPI, Header
from fastapi.responses import JSONResponse

from supply_gateway.config import Settings, get_settings
from supply_gateway.schemas import StatusUpdate
from supply_gateway.security import bearer_subject
from supply_gateway.workflow import OrderStatus

logger = logging.getLogger(__name__)

VALID_STATUSES = {s.value for s in OrderStatus}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={"timestamp": _now(), "status": status, "error": message},
    )


def create_order_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    orders: dict[int, dict] = {}
    ids = itertools.count(1)
    lock = threading.Lock()

    app = FastAPI(title="Order Service Mock")

    def authenticated(authorization: str | None) -> bool:
        return bearer_subject(authorization, settings.jwt_secret, settings.jwt_algorithm) is not None

    @app.get("/api/orders")
    def list_orders(status: str | None = None, authorization: str = Header(None)):
        if not authenticated(authorization):
            return _error(401, "Unauthorized")
        with lock:
            rows = [dict(o) for o in sorted(orders.values(), key=lambda o: o["id"])]
        if status:
            rows = [o for o in rows if o["status"] == status.upper()]
        return rows

    @app.post("/api/orders", status_code=201)
    def create_order(payload: dict, authorization: str = Header(None)):
        if not authenticated(authorization):
            return _error(401, "Unauthorized")

        item_name = payload.get("itemName")
        quantity = payload.get("quantity")
        problems = []
        if not isinstance(item_name, str) or not item_name.strip():
            problems.append("itemName: Item name must not be blank")
        if quantity is None:
            problems.append("quantity: Quantity is required")
        elif isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            problems.append("quantity: Quantity must be at least 1")
        if problems:
            return _error(400, " | ".join(problems))

        with lock:
            order_id = next(ids)
            ts = _now()
            order = {
                "id": order_id,
                "itemName": item_name,
                "quantity": quantity,
                "status": OrderStatus.PENDING.value,
                "createdAt": ts,
                "updatedAt": ts,
            }
            orders[order_id] = order

        logger.info(f"ORDER_PLACED id={order_id} item='{item_name}' qty={quantity}")
        return order

    @app.get("/api/orders/{order_id}")
    def get_order(order_id: int, authorization: str = Header(None)):
        if not authenticated(authorization):
            return _error(401, "Unauthorized")
        with lock:
            order = orders.get(order_id)
            order = dict(order) if order is not None else None
        if order is None:
            return _error(404, f"Order not found with id: {order_id}")
        return order

    @app.patch("/api/orders/{order_id}/status")
    def update_status(order_id: int, body: StatusUpdate, authorization: str = Header(None)):
        if not authenticated(authorization):
            return _error(401, "Unauthorized")

        new_status = body.status.upper()
        if new_status not in VALID_STATUSES:
            return _error(400, f"Invalid status '{body.status}'. Allowed: {sorted(VALID_STATUSES)}")

        with lock:
            order = orders.get(order_id)
            if order is None:
                return _error(404, f"Order not found with id: {order_id}")
            old_status = order["status"]
            order["status"] = new_status
            order["updatedAt"] = max(_now(), order["createdAt"])

        logger.info(f"ORDER_STATUS_UPDATE id={order_id} status: {old_status} -> {new_status}")
        return order

    @app.get("/health")
    def health():
        return {"ok": True}

    return app
