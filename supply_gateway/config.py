import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel


class Settings(BaseModel):
    auth_service_url: str = "http://localhost:8081"
    order_service_url: str = "http://localhost:8080"
    upstream_timeout_seconds: float = 10.0
    cors_origin_regex: str = r"^http://.*:3000$"

    # console side
    gateway_url: str = "http://localhost:8082"
    session_file: Path = Path.home() / ".supply-console" / "session.json"

    log_level: str = "INFO"

    # demo collaborators
    jwt_secret: str = "change-me-demo-secret-change-me-demo-secret"
    jwt_algorithm: str = "HS256"
    jwt_ttl_seconds: int = 3600
    demo_username: str = "admin"
    demo_password: str = "admin123"

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            auth_service_url=os.getenv("AUTH_SERVICE_URL", defaults.auth_service_url).rstrip("/"),
            order_service_url=os.getenv("ORDER_SERVICE_URL", defaults.order_service_url).rstrip("/"),
            upstream_timeout_seconds=float(
                os.getenv("UPSTREAM_TIMEOUT_SECONDS", str(defaults.upstream_timeout_seconds))
            ),
            cors_origin_regex=os.getenv("CORS_ORIGIN_REGEX", defaults.cors_origin_regex),
            gateway_url=os.getenv("GATEWAY_URL", defaults.gateway_url).rstrip("/"),
            session_file=Path(os.getenv("SESSION_FILE", str(defaults.session_file))).expanduser(),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
            jwt_secret=os.getenv("JWT_SECRET", defaults.jwt_secret),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", defaults.jwt_algorithm),
            jwt_ttl_seconds=int(os.getenv("JWT_TTL_SECONDS", str(defaults.jwt_ttl_seconds))),
            demo_username=os.getenv("DEMO_USERNAME", defaults.demo_username),
            demo_password=os.getenv("DEMO_PASSWORD", defaults.demo_password),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
