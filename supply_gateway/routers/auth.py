import json

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from supply_gateway.deps import get_auth_upstream
from supply_gateway.errors import LocalValidationError
from supply_gateway.schemas import FAILURE_RESPONSES
from supply_gateway.upstream import Upstream, relay

router = APIRouter(prefix="/auth", tags=["auth"], responses=FAILURE_RESPONSES)


@router.post("/login")
async def login(request: Request, auth: Upstream = Depends(get_auth_upstream)):
    """
    Client -> gateway -> Auth service
    body: { "username": "...", "password": "..." }  (forwarded byte-for-byte)
    """
    payload = await request.body()
    try:
        json.loads(payload)
    except ValueError:
        raise LocalValidationError("Request body must be valid JSON.") from None

    r = await run_in_threadpool(auth.send, "POST", "/auth/login", body=payload)
    return relay(r)
