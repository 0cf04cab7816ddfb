"""Browser session cookie handling."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request, Response

from lcp.config import Settings
from lcp.dependencies import get_app_settings, get_session_store
from lcp.errors import AuthError
from lcp.models import SessionRecord
from lcp.services.session_store import SessionStore


@dataclass
class CurrentSession:
    """Session id from the browser cookie and the record it maps to."""

    session_id: str
    record: SessionRecord


def get_session_id(
    request: Request, settings: Settings = Depends(get_app_settings)
) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name)


def get_optional_session(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
) -> Optional[CurrentSession]:
    """Resolve the browser cookie; unknown ids count as signed out."""
    record = store.get(session_id)
    if session_id is None or record is None:
        return None
    return CurrentSession(session_id=session_id, record=record)


def require_session(
    current: Optional[CurrentSession] = Depends(get_optional_session),
) -> CurrentSession:
    """Require an authenticated browser session."""
    if current is None:
        raise AuthError("NOT_AUTHENTICATED")
    return current


def issue_session_cookie(response: Response, session_id: str, settings: Settings) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        session_id,
        max_age=settings.session_cookie_max_age,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(settings.session_cookie_name, path="/")
