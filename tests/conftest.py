"""
Pytest configuration and shared fixtures for the proxy test suite.
"""

import os

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app
os.environ["LCP_ENVIRONMENT"] = "test"
os.environ["LCP_LOG_LEVEL"] = "WARNING"

from lcp.clients.graphql import QueryFallbackResolver  # noqa: E402
from lcp.clients.upstream import UpstreamClient  # noqa: E402
from lcp.config import get_settings  # noqa: E402
from lcp.models import SessionRecord  # noqa: E402
from lcp.server import create_app  # noqa: E402
from lcp.services.session_store import InMemorySessionStore  # noqa: E402
from tests.fakes import TEST_COOKIE, FakeUpstream  # noqa: E402

settings = get_settings()


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def upstream_client(fake_upstream) -> UpstreamClient:
    return UpstreamClient(settings, transport=fake_upstream.transport())


@pytest.fixture
def resolver(upstream_client) -> QueryFallbackResolver:
    return QueryFallbackResolver(upstream_client)


@pytest.fixture
def primary_session() -> SessionRecord:
    return SessionRecord(
        domain="leetcode.com",
        raw_cookie=TEST_COOKIE,
        csrf_token="abc",
        preferred_language_header=settings.localized_accept_language,
    )


@pytest.fixture
def secondary_session() -> SessionRecord:
    return SessionRecord(
        domain="leetcode.cn",
        raw_cookie=TEST_COOKIE,
        csrf_token="abc",
        preferred_language_header=settings.localized_accept_language,
    )


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def app(store, fake_upstream):
    """Create test app instance wired to the fake upstream."""
    return create_app(settings=settings, session_store=store, transport=fake_upstream.transport())


@pytest.fixture
def client(app):
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_client(client, store, primary_session):
    """Create a client whose browser cookie maps to a primary-domain session."""
    session_id = store.create(primary_session)
    client.cookies.set(settings.session_cookie_name, session_id)
    return client
