import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from supply_gateway.config import get_settings
from supply_gateway.errors import GatewayError, failure_envelope
from supply_gateway.logging_config import configure_logging
from supply_gateway.routers.auth import router as auth_router
from supply_gateway.routers.orders import router as orders_router

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Supply Order Gateway")

app.include_router(auth_router)
app.include_router(orders_router)

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=settings.cors_origin_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return failure_envelope(exc.message, exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # malformed JSON or a body that is not an object
    errors = "; ".join(err.get("msg", "invalid") for err in exc.errors())
    logger.warning(f"{request.method} {request.url.path} malformed request: {errors}")
    return failure_envelope(f"Malformed request: {errors}", 400)


@app.get("/health")
def health():
    return {"ok": True}
