"""HTTP client for the judging platform's private API."""

import json
import logging
from dataclasses import dataclass
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from lcp.config import Settings, get_settings
from lcp.errors import UpstreamUnreachableError
from lcp.models import SessionRecord

logger = logging.getLogger(__name__)


class _RejectAllCookies(DefaultCookiePolicy):
    """Keep upstream Set-Cookie headers out of the shared client jar."""

    def set_ok(self, cookie, request):  # noqa: ANN001
        return False


@dataclass
class UpstreamResponse:
    """Status and body of one upstream round trip."""

    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Decode the body, raising ``ValueError`` if it is not JSON."""
        return json.loads(self.text)

    def parsed(self) -> Any:
        """JSON body when parseable, raw text otherwise."""
        if not self.text:
            return None
        try:
            return self.json()
        except ValueError:
            return self.text


class UpstreamClient:
    """Client issuing authenticated requests on behalf of a session."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.timeout = httpx.Timeout(self.settings.upstream_timeout)
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            transport=transport,
            cookies=CookieJar(policy=_RejectAllCookies()),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def domain_for(self, session: Optional[SessionRecord]) -> str:
        if session and session.domain:
            return session.domain
        return self.settings.primary_domain

    def build_url(self, session: Optional[SessionRecord], path: str) -> str:
        if path.startswith("http"):
            return path
        return f"https://{self.domain_for(session)}{path}"

    def build_headers(
        self,
        session: Optional[SessionRecord],
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Headers:
        """Merge caller headers with session credentials and domain defaults."""
        domain = self.domain_for(session)
        merged = httpx.Headers(headers or {})

        if session and session.raw_cookie:
            merged["cookie"] = session.raw_cookie
        if session and session.csrf_token:
            merged["x-csrftoken"] = session.csrf_token
        if session and session.preferred_language_header and "accept-language" not in merged:
            merged["accept-language"] = session.preferred_language_header
        if "referer" not in merged:
            merged["referer"] = f"https://{domain}/"
        if "origin" not in merged:
            merged["origin"] = f"https://{domain}"
        if "user-agent" not in merged:
            merged["user-agent"] = self.settings.user_agent

        return merged

    async def request(
        self,
        session: Optional[SessionRecord],
        path: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> UpstreamResponse:
        """Send one request; non-2xx answers come back as data, not exceptions."""
        url = self.build_url(session, path)
        try:
            response = await self._client.request(
                method,
                url,
                headers=self.build_headers(session, headers),
                json=json,
                params=params,
            )
        except httpx.TransportError as exc:
            logger.warning("%s %s unreachable: %s", method, url, exc.__class__.__name__)
            raise UpstreamUnreachableError() from exc

        logger.debug("%s %s -> %d", method, url, response.status_code)
        return UpstreamResponse(status_code=response.status_code, text=response.text)

    async def submit(
        self,
        session: SessionRecord,
        title_slug: str,
        question_id: str,
        lang: str,
        typed_code: str,
    ) -> UpstreamResponse:
        """Post a solution to the judge."""
        slug = quote(title_slug, safe="")
        return await self.request(
            session,
            f"/problems/{slug}/submit/",
            method="POST",
            headers={
                "content-type": "application/json",
                "x-requested-with": "XMLHttpRequest",
                "referer": f"https://{self.domain_for(session)}/problems/{slug}/",
            },
            json={"lang": lang, "question_id": question_id, "typed_code": typed_code},
        )

    async def check_submission(
        self,
        session: SessionRecord,
        submission_id: int,
        title_slug: Optional[str] = None,
    ) -> UpstreamResponse:
        """Fetch the current judging status of a submission."""
        domain = self.domain_for(session)
        sid = quote(str(submission_id), safe="")
        if title_slug:
            referer = f"https://{domain}/problems/{quote(title_slug, safe='')}/submissions/"
        else:
            referer = f"https://{domain}/submissions/detail/{sid}/"

        return await self.request(
            session,
            f"/submissions/detail/{sid}/check/",
            headers={"x-requested-with": "XMLHttpRequest", "referer": referer},
        )
