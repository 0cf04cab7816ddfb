"""Cookie sign-in and user status refresh."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from lcp.clients.graphql import QueryFallbackResolver
from lcp.clients.queries import USER_STATUS
from lcp.config import Settings, get_settings
from lcp.errors import AuthError, UpstreamUnreachableError, ValidationError
from lcp.models import DomainVariant, SessionRecord
from lcp.schemas.auth import UserProfile

logger = logging.getLogger(__name__)

CSRF_COOKIE = "csrftoken"
SESSION_COOKIE = "LEETCODE_SESSION"

COOKIE_INVALID_MESSAGE = (
    "The cookie must contain both csrftoken and LEETCODE_SESSION. Copy the "
    "Cookie request header from the browser's Network panel."
)
NOT_SIGNED_IN_MESSAGE = (
    "No signed-in state detected. Make sure the cookie was copied from a "
    "request to the same domain you selected (leetcode.com and leetcode.cn "
    "cookies are not interchangeable) and that it contains csrftoken and "
    "LEETCODE_SESSION."
)


def extract_cookie_value(cookie: str, name: str) -> Optional[str]:
    """Return the value of ``name=value`` in a raw Cookie header, if present."""
    pattern = re.compile(rf"(?:^|;\s*){re.escape(name)}=([^;]+)", re.IGNORECASE)
    match = pattern.search(cookie or "")
    return match.group(1) if match else None


def _coerce_verified(value: Any) -> Optional[bool]:
    # unknown must stay unknown; False would trigger the unverified warning
    if isinstance(value, bool) or value is None:
        return value
    return bool(value)


def normalize_user(domain: str, user_status: Optional[Dict[str, Any]]) -> Optional[UserProfile]:
    """Map a ``userStatus`` payload to the shared profile shape."""
    if not user_status:
        return None

    common = {
        "name": user_status.get("name"),
        "is_signed_in": bool(user_status.get("is_signed_in")),
        "is_premium": bool(user_status.get("is_premium")),
        "is_verified": _coerce_verified(user_status.get("is_verified")),
    }

    if DomainVariant.of(domain) is DomainVariant.secondary:
        return UserProfile(
            id=None,
            session_id=None,
            slug=user_status.get("slug"),
            real_name=user_status.get("real_name"),
            **common,
        )

    return UserProfile(
        id=user_status.get("id"),
        session_id=user_status.get("session_id"),
        **common,
    )


@dataclass
class SignInResult:
    """Profile returned after a successful sign-in."""

    user: UserProfile
    email_not_verified: bool


class AuthService:
    """Validates pasted cookies and keeps cached profiles fresh."""

    def __init__(self, resolver: QueryFallbackResolver, settings: Optional[Settings] = None):
        self.resolver = resolver
        self.settings = settings or get_settings()

    async def sign_in_with_cookie(
        self, raw_cookie: Optional[str], domain: Optional[str] = None
    ) -> Tuple[SessionRecord, SignInResult]:
        """Validate a cookie against the platform and build a session record.

        The caller persists the returned record; nothing is stored here.
        """
        cookie = (raw_cookie or "").strip()
        domain = (domain or "").strip() or self.settings.primary_domain

        if not cookie:
            raise ValidationError("COOKIE_REQUIRED")

        csrf_token = extract_cookie_value(cookie, CSRF_COOKIE)
        platform_session = extract_cookie_value(cookie, SESSION_COOKIE)
        if not csrf_token or not platform_session:
            raise ValidationError("COOKIE_INVALID", COOKIE_INVALID_MESSAGE)

        record = SessionRecord(
            domain=domain,
            raw_cookie=cookie,
            csrf_token=csrf_token,
            preferred_language_header=self.settings.localized_accept_language,
        )

        result = await self.resolver.graphql(record, USER_STATUS[record.variant])
        if not result.ok:
            logger.warning("Sign-in on %s failed: %s", domain, result.error)
            raise AuthError("AUTH_FAILED", detail=result.to_detail())

        user = normalize_user(domain, (result.data or {}).get("userStatus"))
        if user is None or not user.is_signed_in:
            logger.info("Cookie for %s is not signed in", domain)
            raise AuthError(
                "NOT_SIGNED_IN",
                NOT_SIGNED_IN_MESSAGE,
                user=user.model_dump(exclude_unset=True) if user else None,
            )

        record.cached_user = user
        logger.info("Signed in on %s as %s", domain, user.name)
        return record, SignInResult(user=user, email_not_verified=user.is_verified is False)

    async def refresh(self, record: SessionRecord) -> Optional[UserProfile]:
        """Re-run the user status query; any failure means the session expired."""
        try:
            result = await self.resolver.graphql(record, USER_STATUS[record.variant])
        except UpstreamUnreachableError:
            logger.info("User status refresh on %s failed: unreachable", record.domain)
            raise AuthError("SESSION_EXPIRED")
        if not result.ok:
            logger.info("User status refresh on %s failed: %s", record.domain, result.error)
            raise AuthError("SESSION_EXPIRED")

        record.cached_user = normalize_user(record.domain, (result.data or {}).get("userStatus"))
        return record.cached_user
