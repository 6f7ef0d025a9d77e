"""
Error taxonomy shared by the gateway routes and the console.

Every error here is terminal: nothing is retried internally, the caller
decides whether to try again.
"""

from fastapi.responses import JSONResponse

AUTH_UNAVAILABLE = "Auth service unavailable."
ORDER_UNAVAILABLE = "Order service unavailable."
GATEWAY_UNAVAILABLE = "Gateway unavailable."
SESSION_EXPIRED = "Session expired. Please log in again."
SESSION_MISSING = "Not logged in. Please log in first."


class GatewayError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class LocalValidationError(GatewayError):
    """Malformed client input, rejected before any network call."""

    status_code = 400


class UpstreamUnavailable(GatewayError):
    """Transport failure reaching a collaborator (or the gateway)."""

    status_code = 502


class UpstreamRejected(GatewayError):
    """A non-2xx answer relayed from upstream."""

    def __init__(self, message: str, status_code: int, body: str | None = None):
        super().__init__(message, status_code)
        self.body = body


class SessionExpired(UpstreamRejected):
    def __init__(self, status_code: int = 401, body: str | None = None):
        super().__init__(SESSION_EXPIRED, status_code, body)


class SessionMissing(GatewayError):
    status_code = 401

    def __init__(self, message: str = SESSION_MISSING):
        super().__init__(message)


def failure_envelope(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})
