"""
Demo Auth service: one configured user, HS256 tokens.
Stands in for the real Auth collaborator when running locally or in tests.
"""

import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from supply_gateway.config import Settings, get_settings
from supply_gateway.schemas import LoginReq, TokenOut
from supply_gateway.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def create_auth_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    users = {settings.demo_username: hash_password(settings.demo_password)}

    app = FastAPI(title="Auth Service Mock")

    @app.exception_handler(HTTPException)
    async def error_body(request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.post("/auth/login", response_model=TokenOut, response_model_by_alias=True)
    def login(body: LoginReq):
        password_hash = users.get(body.username)
        if password_hash is None or not verify_password(body.password, password_hash):
            logger.warning(f"Rejected login for '{body.username}'")
            raise HTTPException(status_code=401, detail="Invalid username or password.")

        token = create_access_token(
            subject=body.username,
            secret=settings.jwt_secret,
            alg=settings.jwt_algorithm,
            expires_seconds=settings.jwt_ttl_seconds,
        )
        logger.info(f"Issued token for '{body.username}'")
        return TokenOut(token=token, token_type="Bearer", expires_in_seconds=settings.jwt_ttl_seconds)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app
