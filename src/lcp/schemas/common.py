"""Common Pydantic schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., examples=["COOKIE_INVALID"])
    message: Optional[str] = None
    detail: Any = None
    user: Optional[dict[str, Any]] = None


class HealthResponse(BaseModel):
    ok: bool = True


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}
