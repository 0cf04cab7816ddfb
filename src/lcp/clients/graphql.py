"""GraphQL execution with ordered query-shape fallback."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union

from lcp.clients.upstream import UpstreamClient
from lcp.models import SessionRecord

logger = logging.getLogger(__name__)

GRAPHQL_PATH = "/graphql/"


@dataclass(frozen=True)
class QueryVariant:
    """One concrete shape of a query family."""

    name: str
    query: str


@dataclass
class GraphQLResult:
    """Outcome of a single GraphQL attempt."""

    ok: bool
    status: int
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    raw: Any = None

    def to_detail(self) -> Dict[str, Any]:
        """Diagnostic payload surfaced to the browser on failure."""
        return {"ok": self.ok, "status": self.status, "error": self.error, "raw": self.raw}


class QueryFallbackResolver:
    """Run GraphQL documents, trying alternate shapes when one is rejected."""

    def __init__(self, upstream: UpstreamClient):
        self.upstream = upstream

    async def graphql(
        self,
        session: Optional[SessionRecord],
        query: Union[QueryVariant, str],
        variables: Optional[Dict[str, Any]] = None,
    ) -> GraphQLResult:
        """Execute one document and classify the response."""
        document = query.query if isinstance(query, QueryVariant) else query
        response = await self.upstream.request(
            session,
            GRAPHQL_PATH,
            method="POST",
            headers={"content-type": "application/json"},
            json={"query": document, "variables": variables or {}},
        )

        try:
            payload = response.json()
        except ValueError:
            return GraphQLResult(
                ok=False, status=response.status_code, error="INVALID_JSON", raw=response.text
            )

        if not response.ok:
            return GraphQLResult(
                ok=False, status=response.status_code, error="HTTP_ERROR", raw=payload
            )

        if not isinstance(payload, dict):
            return GraphQLResult(
                ok=False, status=response.status_code, error="INVALID_JSON", raw=payload
            )

        if payload.get("errors"):
            return GraphQLResult(
                ok=False, status=response.status_code, error="GRAPHQL_ERROR", raw=payload
            )

        return GraphQLResult(ok=True, status=response.status_code, data=payload.get("data") or {})

    async def query_with_fallback(
        self,
        session: Optional[SessionRecord],
        variants: Sequence[Union[QueryVariant, str]],
        variables: Optional[Dict[str, Any]] = None,
    ) -> GraphQLResult:
        """Try each variant in order with identical variables.

        Returns the first success. When every variant fails, the last
        failure is returned since it reflects the most recent attempt.
        """
        if not variants:
            raise ValueError("at least one query variant is required")

        result: Optional[GraphQLResult] = None
        for index, variant in enumerate(variants):
            result = await self.graphql(session, variant, variables)
            if result.ok:
                return result
            if index + 1 < len(variants):
                logger.info(
                    "GraphQL variant %s failed with %s, trying next shape",
                    _variant_name(variant),
                    result.error,
                )

        assert result is not None
        return result


def _variant_name(variant: Union[QueryVariant, str]) -> str:
    if isinstance(variant, QueryVariant):
        return variant.name
    return "<inline>"
