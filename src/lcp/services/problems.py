"""Problem catalog aggregation across GraphQL, REST and the secondary domain."""

import logging
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

from lcp.clients.graphql import QueryFallbackResolver
from lcp.clients.queries import PROBLEMSET_LIST
from lcp.clients.upstream import UpstreamClient
from lcp.config import Settings, get_settings
from lcp.errors import UpstreamError, UpstreamUnreachableError
from lcp.models import SessionRecord
from lcp.schemas.problems import ProblemListItem

logger = logging.getLogger(__name__)

LOCALIZED_LANGS = {"zh", "zh-cn", "cn"}

REST_DIFFICULTY = {
    1: "Easy",
    2: "Medium",
    3: "Hard",
}
KNOWN_DIFFICULTIES = {"Easy", "Medium", "Hard"}


def wants_localized(lang: Optional[str]) -> bool:
    return str(lang or "").strip().lower() in LOCALIZED_LANGS


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number:  # NaN
        return None
    return number


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def acceptance_rate(accepted: Any, submitted: Any) -> Optional[float]:
    """Percentage of accepted submissions.

    None when either count is missing or nothing was submitted.
    """
    total = _to_float(submitted)
    accepted = _to_float(accepted)
    if accepted is None or not total or total <= 0:
        return None
    return 100 * accepted / total


def item_from_graphql(node: Dict[str, Any]) -> ProblemListItem:
    difficulty = node.get("difficulty")
    return ProblemListItem(
        id=_to_int(node.get("id")),
        frontendId=str(node.get("frontendId") if node.get("frontendId") is not None else ""),
        title=node.get("title") or "",
        titleZh=node.get("titleZh") or None,
        titleSlug=node.get("titleSlug") or "",
        paidOnly=bool(node.get("paidOnly")),
        difficulty=difficulty if difficulty in KNOWN_DIFFICULTIES else "Unknown",
        status=node.get("status") or None,
        acRate=_to_float(node.get("acRate")),
    )


def item_from_rest(pair: Dict[str, Any]) -> ProblemListItem:
    stat = pair.get("stat") or {}
    level = (pair.get("difficulty") or {}).get("level")
    frontend_id = stat.get("frontend_question_id")
    return ProblemListItem(
        id=_to_int(stat.get("question_id")),
        frontendId=str(frontend_id) if frontend_id is not None else "",
        title=stat.get("question__title") or "",
        titleZh=None,
        titleSlug=stat.get("question__title_slug") or "",
        paidOnly=bool(pair.get("paid_only")),
        difficulty=REST_DIFFICULTY.get(level, "Unknown"),
        status=pair.get("status") or None,
        acRate=acceptance_rate(stat.get("total_acs"), stat.get("total_submitted")),
    )


def filter_items(items: Iterable[ProblemListItem], query: str) -> List[ProblemListItem]:
    """Substring match on title, slug or frontend id."""
    query = query.strip().lower()
    if not query:
        return list(items)
    return [
        item
        for item in items
        if query in item.title.lower()
        or query in item.titleSlug.lower()
        or query in item.frontendId
    ]


def fill_localized_titles(
    items: List[ProblemListItem], secondary_items: Iterable[ProblemListItem]
) -> List[ProblemListItem]:
    """Copy localized titles by slug into items that lack one.

    Titles that are already present are never replaced.
    """
    by_slug = {
        item.titleSlug: item.titleZh
        for item in secondary_items
        if item.titleSlug and item.titleZh
    }
    filled = []
    for item in items:
        if not item.titleZh and by_slug.get(item.titleSlug):
            item = item.model_copy(update={"titleZh": by_slug[item.titleSlug]})
        filled.append(item)
    return filled


class ProblemListAggregator:
    """Builds the problem catalog for a session."""

    def __init__(
        self,
        upstream: UpstreamClient,
        resolver: QueryFallbackResolver,
        settings: Optional[Settings] = None,
    ):
        self.upstream = upstream
        self.resolver = resolver
        self.settings = settings or get_settings()

    async def list(
        self,
        session: SessionRecord,
        search_text: Optional[str] = None,
        category: Optional[str] = None,
        lang: Optional[str] = None,
    ) -> List[ProblemListItem]:
        """List problems, preferring the localized GraphQL catalog when asked."""
        query = (search_text or "").strip().lower()
        category = (category or "").strip() or self.settings.default_category

        if wants_localized(lang):
            session.preferred_language_header = self.settings.localized_accept_language
            items = await self._graphql_catalog(session, query, category)
            if items:
                if not session.is_secondary and any(
                    not item.titleZh and item.titleSlug for item in items
                ):
                    items = await self._enrich_from_secondary(items, query, category)
                return items
            logger.info("GraphQL catalog empty or failed, falling back to REST")

        return await self._rest_catalog(session, query, category)

    def _variables(self, query: str, category: str) -> Dict[str, Any]:
        return {
            "categorySlug": None if category == self.settings.default_category else category,
            "limit": self.settings.problem_list_limit,
            "skip": 0,
            "filters": {"searchKeywords": query} if query else {},
        }

    async def _graphql_catalog(
        self, session: SessionRecord, query: str, category: str
    ) -> List[ProblemListItem]:
        result = await self.resolver.query_with_fallback(
            session, PROBLEMSET_LIST, self._variables(query, category)
        )
        if not result.ok:
            return []
        questions = ((result.data or {}).get("problemsetQuestionList") or {}).get("questions")
        if not isinstance(questions, list):
            return []
        return [item_from_graphql(node) for node in questions if isinstance(node, dict)]

    async def _enrich_from_secondary(
        self, items: List[ProblemListItem], query: str, category: str
    ) -> List[ProblemListItem]:
        public = SessionRecord.anonymous(
            self.settings.secondary_domain, self.settings.localized_accept_language
        )
        try:
            secondary_items = await self._graphql_catalog(public, query, category)
        except UpstreamUnreachableError:
            logger.warning("%s unreachable, serving titles untranslated", public.domain)
            return items
        if not secondary_items:
            return items

        filled = fill_localized_titles(items, secondary_items)
        logger.debug(
            "Filled %d localized titles from %s",
            sum(1 for before, after in zip(items, filled) if before.titleZh != after.titleZh),
            self.settings.secondary_domain,
        )
        return filled

    async def _rest_catalog(
        self, session: SessionRecord, query: str, category: str
    ) -> List[ProblemListItem]:
        response = await self.upstream.request(
            session, f"/api/problems/{quote(category, safe='')}/"
        )
        if not response.ok:
            raise UpstreamError(
                detail={"status": response.status_code, "raw": response.text}
            )

        try:
            payload = response.json()
        except ValueError:
            raise UpstreamError(
                detail={"status": response.status_code, "error": "INVALID_JSON", "raw": response.text}
            )

        pairs = payload.get("stat_status_pairs") if isinstance(payload, dict) else None
        items = [item_from_rest(pair) for pair in pairs or [] if isinstance(pair, dict)]
        return filter_items(items, query)
