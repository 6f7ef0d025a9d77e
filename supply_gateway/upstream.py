"""
Outbound relay to the Auth and Order collaborators.

Responses are relayed as they come: status code, raw body and content type.
Only transport failures are translated, into UpstreamUnavailable (502).
"""

import logging
from typing import Dict, Optional

import requests
from fastapi import Response

from supply_gateway.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/json"


class Upstream:
    """One collaborator reachable at ``base_url``."""

    def __init__(self, name: str, base_url: str, unavailable_message: str,
                 http: Optional[requests.Session] = None, timeout: float = 10.0):
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.unavailable_message = unavailable_message
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def send(self, method: str, path: str, *, body: Optional[bytes] = None,
             params: Optional[Dict[str, str]] = None,
             authorization: Optional[str] = None,
             headers: Optional[Dict[str, str]] = None):
        out_headers = dict(headers or {})
        if body is not None:
            out_headers["Content-Type"] = "application/json"
        if authorization:
            out_headers["Authorization"] = authorization

        url = self.url(path)
        try:
            r = self.http.request(
                method,
                url,
                params=params or None,
                data=body,
                headers=out_headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{self.name} unreachable: {method} {url} ({e.__class__.__name__}: {e})")
            raise UpstreamUnavailable(self.unavailable_message) from e

        logger.info(f"{method} {url} -> {r.status_code}")
        return r


def relay(r, extra_headers: Optional[Dict[str, str]] = None) -> Response:
    """Hand the upstream answer back to the client unchanged."""
    content_type = r.headers.get("content-type") or DEFAULT_CONTENT_TYPE
    # set as a raw header; media_type would append a charset to text/* types
    headers = dict(extra_headers or {})
    headers["content-type"] = content_type
    return Response(content=r.content, status_code=r.status_code, headers=headers)
