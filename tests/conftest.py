"""Pytest configuration and shared fakes."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import pytest
from fastapi.testclient import TestClient

from supply_gateway.config import Settings, get_settings
from supply_gateway.deps import get_http
from supply_gateway.main import app
from supply_gateway.mocks.auth_service import create_auth_app
from supply_gateway.mocks.order_service import create_order_app

AUTH_URL = "http://auth.test"
ORDERS_URL = "http://orders.test"


def pytest_configure() -> None:
    logging.getLogger("httpx").setLevel(logging.WARNING)


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None,
                 content_type: str | None = "application/json", raw: bytes | None = None):
        self.status_code = status_code
        if raw is not None:
            self.content = raw
        elif body is None:
            self.content = b""
        else:
            self.content = json.dumps(body).encode("utf-8")
        self.headers = {"content-type": content_type} if content_type else {}

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def json(self):
        return json.loads(self.content)


@dataclass
class Call:
    method: str
    url: str
    kwargs: dict

    @property
    def headers(self) -> dict:
        return self.kwargs.get("headers") or {}

    @property
    def params(self) -> dict:
        return self.kwargs.get("params") or {}

    def json_body(self):
        if "json" in self.kwargs:
            return self.kwargs["json"]
        return json.loads(self.kwargs["data"])


@dataclass
class FakeHttp:
    """Stands in for requests.Session: records calls, replays canned answers."""

    responses: list = field(default_factory=lambda: [FakeResponse(200, [])])
    error: Exception | None = None
    calls: list = field(default_factory=list)
    on_request: Any = None

    def request(self, method, url, **kwargs):
        self.calls.append(Call(method, url, kwargs))
        if self.on_request is not None:
            self.on_request(method, url, kwargs)
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


class AppTransport:
    """Routes gateway -> collaborator calls into in-process FastAPI apps."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.calls = []

    def request(self, method, url, params=None, data=None, headers=None, timeout=None):
        self.calls.append(Call(method, url, {"params": params, "data": data, "headers": headers}))
        for prefix, client in self.routes.items():
            if url.startswith(prefix):
                return client.request(method, url[len(prefix):], params=params,
                                      content=data, headers=headers)
        raise AssertionError(f"no route for {url}")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        auth_service_url=AUTH_URL,
        order_service_url=ORDERS_URL,
        gateway_url="http://testserver",
        session_file=tmp_path / "session.json",
        jwt_secret="test-secret-test-secret-test-secret",
        demo_username="admin",
        demo_password="admin123",
    )


@pytest.fixture
def fake_http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture
def gateway(settings, fake_http):
    """Gateway whose upstream calls land in ``fake_http``."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http] = lambda: fake_http
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def live_gateway(settings):
    """Gateway wired to the demo Auth and Order services, all in process."""
    transport = AppTransport({
        AUTH_URL: TestClient(create_auth_app(settings)),
        ORDERS_URL: TestClient(create_order_app(settings)),
    })
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http] = lambda: transport
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
