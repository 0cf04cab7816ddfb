import httpx
import pytest
from lcp.config import get_settings
from lcp.errors import AuthError, ValidationError
from lcp.services.auth import AuthService, extract_cookie_value, normalize_user

from tests.fakes import TEST_COOKIE, user_status

settings = get_settings()


@pytest.fixture
def service(resolver) -> AuthService:
    return AuthService(resolver, settings)


def test_extract_cookie_value() -> None:
    cookie = "foo=1; csrftoken=abc; LEETCODE_SESSION=xyz.123"

    assert extract_cookie_value(cookie, "csrftoken") == "abc"
    assert extract_cookie_value(cookie, "leetcode_session") == "xyz.123"
    assert extract_cookie_value(cookie, "missing") is None
    assert extract_cookie_value("xcsrftoken=abc", "csrftoken") is None


@pytest.mark.parametrize(
    "cookie",
    [
        "csrftoken=abc",
        "LEETCODE_SESSION=xyz",
        "csrftoken=; LEETCODE_SESSION=xyz",
        "some random text",
    ],
)
@pytest.mark.asyncio
async def test_cookie_missing_token_fails_without_network(service, fake_upstream, cookie):
    with pytest.raises(ValidationError) as exc_info:
        await service.sign_in_with_cookie(cookie, "leetcode.com")

    assert exc_info.value.code == "COOKIE_INVALID"
    assert fake_upstream.requests == []


@pytest.mark.asyncio
async def test_empty_cookie_is_required(service, fake_upstream):
    with pytest.raises(ValidationError) as exc_info:
        await service.sign_in_with_cookie("   ", "leetcode.com")

    assert exc_info.value.code == "COOKIE_REQUIRED"
    assert fake_upstream.requests == []


@pytest.mark.asyncio
async def test_sign_in_unverified_email(service, fake_upstream):
    fake_upstream.graphql("leetcode.com", "activeSessionId", user_status(is_verified=False))

    record, result = await service.sign_in_with_cookie(TEST_COOKIE, "leetcode.com")

    assert result.email_not_verified is True
    assert result.user.is_signed_in is True
    assert record.csrf_token == "abc"
    assert record.raw_cookie == TEST_COOKIE
    assert record.cached_user == result.user
    assert fake_upstream.requests[0].headers["x-csrftoken"] == "abc"


@pytest.mark.asyncio
async def test_unknown_verification_is_not_unverified(service, fake_upstream):
    fake_upstream.graphql("leetcode.com", "activeSessionId", user_status(is_verified=None))

    _, result = await service.sign_in_with_cookie(TEST_COOKIE, "leetcode.com")

    assert result.user.is_verified is None
    assert result.email_not_verified is False


@pytest.mark.asyncio
async def test_not_signed_in_returns_partial_profile(service, fake_upstream):
    fake_upstream.graphql(
        "leetcode.com", "activeSessionId", user_status(is_signed_in=False, name=None, id=None)
    )

    with pytest.raises(AuthError) as exc_info:
        await service.sign_in_with_cookie(TEST_COOKIE, "leetcode.com")

    assert exc_info.value.code == "NOT_SIGNED_IN"
    assert exc_info.value.user["is_signed_in"] is False
    assert "slug" not in exc_info.value.user


@pytest.mark.asyncio
async def test_failed_query_is_auth_failed(service, fake_upstream):
    fake_upstream.graphql(
        "leetcode.com", "userStatus", httpx.Response(403, json={"detail": "csrf"})
    )

    with pytest.raises(AuthError) as exc_info:
        await service.sign_in_with_cookie(TEST_COOKIE, "leetcode.com")

    assert exc_info.value.code == "AUTH_FAILED"
    assert exc_info.value.detail["status"] == 403
    assert exc_info.value.detail["error"] == "HTTP_ERROR"


@pytest.mark.asyncio
async def test_secondary_domain_uses_its_own_query_shape(service, fake_upstream):
    fake_upstream.graphql(
        "leetcode.cn",
        "realName",
        {
            "data": {
                "userStatus": {
                    "slug": "alice-cn",
                    "name": "alice",
                    "real_name": "Alice",
                    "is_signed_in": True,
                    "is_premium": True,
                    "is_verified": True,
                }
            }
        },
    )

    record, result = await service.sign_in_with_cookie(TEST_COOKIE, "leetcode.cn")

    assert record.is_secondary
    assert result.user.slug == "alice-cn"
    assert result.user.real_name == "Alice"
    assert result.user.id is None
    assert "activeSessionId" not in fake_upstream.requests[0].content.decode()


@pytest.mark.asyncio
async def test_blank_domain_defaults_to_primary(service, fake_upstream):
    fake_upstream.graphql("leetcode.com", "userStatus", user_status())

    record, _ = await service.sign_in_with_cookie(TEST_COOKIE, "")

    assert record.domain == "leetcode.com"


@pytest.mark.asyncio
async def test_refresh_failure_is_session_expired(service, fake_upstream, primary_session):
    fake_upstream.graphql("leetcode.com", "userStatus", {"errors": [{"message": "nope"}]})

    with pytest.raises(AuthError) as exc_info:
        await service.refresh(primary_session)

    assert exc_info.value.code == "SESSION_EXPIRED"


@pytest.mark.asyncio
async def test_unreachable_refresh_is_session_expired(service, fake_upstream, primary_session):
    fake_upstream.unreachable("leetcode.com")

    with pytest.raises(AuthError) as exc_info:
        await service.refresh(primary_session)

    assert exc_info.value.code == "SESSION_EXPIRED"


@pytest.mark.asyncio
async def test_refresh_updates_cached_user(service, fake_upstream, primary_session):
    fake_upstream.graphql("leetcode.com", "userStatus", user_status(name="bob"))

    user = await service.refresh(primary_session)

    assert user.name == "bob"
    assert primary_session.cached_user is user


def test_normalize_user_primary_omits_secondary_fields() -> None:
    user = normalize_user("leetcode.com", user_status(is_verified=0)["data"]["userStatus"])

    assert user.is_verified is False
    assert user.model_dump(exclude_unset=True).keys() == {
        "id",
        "name",
        "is_signed_in",
        "is_premium",
        "is_verified",
        "session_id",
    }
    assert normalize_user("leetcode.com", None) is None
