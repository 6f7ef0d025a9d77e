import json
import logging

from fastapi import APIRouter, Depends

from supply_gateway.deps import forwarded_authorization, get_order_upstream
from supply_gateway.schemas import FAILURE_RESPONSES
from supply_gateway.upstream import Upstream, relay
from supply_gateway.workflow import parse_filter, parse_order_id, parse_status, validate_new_order

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"], responses=FAILURE_RESPONSES)

NO_STORE = {"Cache-Control": "no-store"}


def _json(body: dict) -> bytes:
    return json.dumps(body).encode("utf-8")


@router.get("")
@router.get("/")
def list_orders(status: str | None = None,
                authorization: str | None = Depends(forwarded_authorization),
                orders: Upstream = Depends(get_order_upstream)):
    status_filter = parse_filter(status)
    r = orders.send(
        "GET",
        "/api/orders",
        params=status_filter.query_params(),
        authorization=authorization,
        # order statuses move often; never let anything in between answer from cache
        headers={"Cache-Control": "no-cache"},
    )
    return relay(r, extra_headers=NO_STORE)


@router.post("")
@router.post("/")
def create_order(payload: dict,
                 authorization: str | None = Depends(forwarded_authorization),
                 orders: Upstream = Depends(get_order_upstream)):
    item_name, quantity = validate_new_order(payload.get("itemName"), payload.get("quantity"))
    logger.info(f"Creating order: item='{item_name}', quantity={quantity}")

    r = orders.send(
        "POST",
        "/api/orders",
        body=_json({"itemName": item_name, "quantity": quantity}),
        authorization=authorization,
    )
    return relay(r)


@router.get("/{order_id}")
def get_order(order_id: str,
              authorization: str | None = Depends(forwarded_authorization),
              orders: Upstream = Depends(get_order_upstream)):
    oid = parse_order_id(order_id)
    r = orders.send(
        "GET",
        f"/api/orders/{oid}",
        authorization=authorization,
        headers={"Cache-Control": "no-cache"},
    )
    return relay(r, extra_headers=NO_STORE)


@router.patch("/{order_id}/status")
def update_status(order_id: str, payload: dict,
                  authorization: str | None = Depends(forwarded_authorization),
                  orders: Upstream = Depends(get_order_upstream)):
    oid = parse_order_id(order_id)
    next_status = parse_status(payload.get("status"))
    logger.info(f"Order id={oid}: requesting status {next_status.value}")

    r = orders.send(
        "PATCH",
        f"/api/orders/{oid}/status",
        body=_json({"status": next_status.value}),
        authorization=authorization,
    )
    return relay(r)
