from functools import lru_cache

import requests
from fastapi import Depends, Header

from supply_gateway.config import Settings, get_settings
from supply_gateway.errors import AUTH_UNAVAILABLE, ORDER_UNAVAILABLE
from supply_gateway.upstream import Upstream


@lru_cache
def _http_session() -> requests.Session:
    return requests.Session()


def get_http() -> requests.Session:
    return _http_session()


def get_auth_upstream(settings: Settings = Depends(get_settings),
                      http: requests.Session = Depends(get_http)) -> Upstream:
    return Upstream("auth-service", settings.auth_service_url, AUTH_UNAVAILABLE,
                    http=http, timeout=settings.upstream_timeout_seconds)


def get_order_upstream(settings: Settings = Depends(get_settings),
                       http: requests.Session = Depends(get_http)) -> Upstream:
    return Upstream("order-service", settings.order_service_url, ORDER_UNAVAILABLE,
                    http=http, timeout=settings.upstream_timeout_seconds)


def forwarded_authorization(authorization: str = Header(None)) -> str | None:
    # passed through untouched; the Order service decides whether it is valid
    if not authorization or not authorization.strip():
        return None
    return authorization.strip()
