"""FastAPI dependency providers for upstream clients and services."""

from fastapi import Depends, Request

from lcp.clients.graphql import QueryFallbackResolver
from lcp.clients.upstream import UpstreamClient
from lcp.config import Settings
from lcp.services.auth import AuthService
from lcp.services.problem_detail import ProblemDetailService
from lcp.services.problems import ProblemListAggregator
from lcp.services.session_store import SessionStore
from lcp.services.submissions import SubmissionTracker


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_session_store(request: Request) -> SessionStore:
    """Session store owned by the running application."""
    return request.app.state.session_store


def get_upstream(request: Request) -> UpstreamClient:
    return request.app.state.upstream


def get_resolver(upstream: UpstreamClient = Depends(get_upstream)) -> QueryFallbackResolver:
    return QueryFallbackResolver(upstream)


def get_auth_service(
    resolver: QueryFallbackResolver = Depends(get_resolver),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    return AuthService(resolver, settings)


def get_problem_list(
    upstream: UpstreamClient = Depends(get_upstream),
    resolver: QueryFallbackResolver = Depends(get_resolver),
    settings: Settings = Depends(get_app_settings),
) -> ProblemListAggregator:
    return ProblemListAggregator(upstream, resolver, settings)


def get_problem_detail(
    resolver: QueryFallbackResolver = Depends(get_resolver),
    settings: Settings = Depends(get_app_settings),
) -> ProblemDetailService:
    return ProblemDetailService(resolver, settings)


def get_submission_tracker(
    upstream: UpstreamClient = Depends(get_upstream),
    problems: ProblemDetailService = Depends(get_problem_detail),
) -> SubmissionTracker:
    return SubmissionTracker(upstream, problems)
