"""Cookie sign-in, profile refresh and logout endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from lcp.auth import (
    CurrentSession,
    clear_session_cookie,
    get_session_id,
    issue_session_cookie,
    require_session,
)
from lcp.config import Settings
from lcp.dependencies import get_app_settings, get_auth_service, get_session_store
from lcp.errors import AuthError
from lcp.schemas.auth import CookieSignIn, MeResponse, OkResponse, SignInResponse
from lcp.schemas.common import ERROR_RESPONSES
from lcp.services.auth import AuthService
from lcp.services.session_store import SessionStore

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("/cookie", response_model=SignInResponse, response_model_exclude_unset=True)
async def sign_in_with_cookie(
    payload: CookieSignIn,
    response: Response,
    previous_id: Optional[str] = Depends(get_session_id),
    service: AuthService = Depends(get_auth_service),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings),
) -> SignInResponse:
    """Exchange a pasted browser cookie for a proxy session."""
    record, result = await service.sign_in_with_cookie(payload.cookie, payload.domain)

    store.delete(previous_id)
    session_id = store.create(record)
    issue_session_cookie(response, session_id, settings)

    return SignInResponse(user=result.user, emailNotVerified=result.email_not_verified)


@router.get("/me", response_model=MeResponse, response_model_exclude_unset=True)
async def me(
    current: CurrentSession = Depends(require_session),
    service: AuthService = Depends(get_auth_service),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings),
):
    """Re-validate the session against the platform."""
    try:
        user = await service.refresh(current.record)
    except AuthError as exc:
        store.delete(current.session_id)
        expired = JSONResponse(status_code=exc.status_code, content=exc.to_body())
        clear_session_cookie(expired, settings)
        return expired

    store.update(current.session_id, current.record)
    return MeResponse(user=user)


@router.post("/logout", response_model=OkResponse)
async def logout(
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings),
) -> OkResponse:
    """Forget the session; succeeds whether or not one existed."""
    store.delete(session_id)
    clear_session_cookie(response, settings)
    return OkResponse()
