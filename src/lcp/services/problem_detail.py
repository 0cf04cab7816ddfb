"""Single problem lookup with localized content back-fill."""

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from lcp.clients.graphql import GraphQLResult, QueryFallbackResolver
from lcp.clients.queries import QUESTION_DETAIL
from lcp.config import Settings, get_settings
from lcp.errors import NotFoundError, UpstreamError, UpstreamUnreachableError, ValidationError
from lcp.models import SessionRecord
from lcp.schemas.problems import ProblemDetail

logger = logging.getLogger(__name__)


def fill_localized_content(
    question: Dict[str, Any], secondary_question: Optional[Dict[str, Any]]
) -> Dict[str, Any]:
    """Fill missing localized title/content from a secondary-domain question.

    The secondary domain's localized fields win over its plain ones; fields
    the primary question already carries are left untouched.
    """
    if not secondary_question:
        return question

    filled = dict(question)
    if not filled.get("translated_title"):
        filled["translated_title"] = (
            secondary_question.get("translated_title")
            or secondary_question.get("title")
            or filled.get("translated_title")
        )
    if not filled.get("translated_content"):
        filled["translated_content"] = (
            secondary_question.get("translated_content")
            or secondary_question.get("content")
            or filled.get("translated_content")
        )
    return filled


def to_detail(question: Dict[str, Any]) -> ProblemDetail:
    """Validate an upstream question; shapes we cannot read become a 502."""
    data = dict(question)
    for key in ("testcase_list", "topic_tags", "code_snippets"):
        data[key] = data.get(key) or []
    data["is_paid_only"] = bool(data.get("is_paid_only"))
    data["code_snippets"] = [
        {**snippet, "code": snippet.get("code") or ""} if isinstance(snippet, dict) else snippet
        for snippet in data["code_snippets"]
    ]
    try:
        return ProblemDetail.model_validate(data)
    except PydanticValidationError as exc:
        logger.warning("Unreadable question payload: %d schema errors", exc.error_count())
        raise UpstreamError(
            message="Unexpected question shape",
            detail={"ok": False, "error": "INVALID_SHAPE", "raw": question},
        ) from exc


class ProblemDetailService:
    """Fetches problem content for the editor."""

    def __init__(self, resolver: QueryFallbackResolver, settings: Optional[Settings] = None):
        self.resolver = resolver
        self.settings = settings or get_settings()

    async def fetch_question(
        self, session: Optional[SessionRecord], slug: str
    ) -> GraphQLResult:
        """Raw question lookup, trying each known schema variant."""
        return await self.resolver.query_with_fallback(
            session, QUESTION_DETAIL, {"titleSlug": slug}
        )

    async def detail(self, session: SessionRecord, slug: Optional[str]) -> ProblemDetail:
        slug = (slug or "").strip()
        if not slug:
            raise ValidationError("SLUG_REQUIRED")

        result = await self.fetch_question(session, slug)
        if not result.ok:
            raise UpstreamError(detail=result.to_detail())

        question = (result.data or {}).get("question")
        if not question:
            raise NotFoundError()

        missing_localized = not question.get("translated_title") and not question.get(
            "translated_content"
        )
        if missing_localized and not session.is_secondary:
            question = await self._enrich_from_secondary(question, slug)

        return to_detail(question)

    async def _enrich_from_secondary(self, question: Dict[str, Any], slug: str) -> Dict[str, Any]:
        public = SessionRecord.anonymous(
            self.settings.secondary_domain, self.settings.localized_accept_language
        )
        try:
            result = await self.fetch_question(public, slug)
        except UpstreamUnreachableError:
            logger.warning("%s unreachable, serving %s untranslated", public.domain, slug)
            return question
        secondary_question = (result.data or {}).get("question") if result.ok else None
        if not secondary_question:
            logger.debug("No %s question for %s", self.settings.secondary_domain, slug)
            return question
        return fill_localized_content(question, secondary_question)
