"""Error taxonomy and the JSON rendering of proxy failures."""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ProxyError(Exception):
    """Base exception for all proxy errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        code: str,
        message: Optional[str] = None,
        detail: Any = None,
        user: Optional[dict[str, Any]] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.detail = detail
        self.user = user
        super().__init__(message or code)

    def to_body(self) -> dict[str, Any]:
        """Render the flat error body the browser client consumes."""
        body: dict[str, Any] = {"error": self.code}
        if self.message is not None:
            body["message"] = self.message
        if self.detail is not None:
            body["detail"] = self.detail
        if self.user is not None:
            body["user"] = self.user
        return body


class ValidationError(ProxyError):
    """Raised when a request is missing or has malformed fields."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(ProxyError):
    """Raised for bad, rejected, or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(ProxyError):
    """Raised when the upstream answered but the resource does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, code: str = "NOT_FOUND", message: Optional[str] = None) -> None:
        super().__init__(code, message)


class UpstreamError(ProxyError):
    """Raised when the platform returns a non-2xx or malformed response."""

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(
        self,
        code: str = "UPSTREAM_ERROR",
        message: Optional[str] = None,
        detail: Any = None,
    ) -> None:
        super().__init__(code, message, detail)


class UpstreamUnreachableError(UpstreamError):
    """Raised when the platform could not be reached at all."""

    def __init__(self, message: str = "Upstream platform is unreachable") -> None:
        super().__init__("UPSTREAM_UNREACHABLE", message)


async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "INVALID_REQUEST", "detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    # pydantic error contexts may hold exception instances
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


def register_error_handlers(app: FastAPI) -> None:
    """Install the proxy's exception handlers on an application."""
    app.add_exception_handler(ProxyError, proxy_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
