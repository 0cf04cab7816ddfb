import httpx
import pytest
from lcp.config import get_settings
from lcp.errors import UpstreamError
from lcp.schemas.problems import ProblemListItem
from lcp.services.problems import (
    ProblemListAggregator,
    acceptance_rate,
    fill_localized_titles,
    filter_items,
    item_from_graphql,
)

from tests.fakes import graphql_body

settings = get_settings()


def gql_node(slug: str, title_zh=None, **overrides):
    node = {
        "id": "1",
        "frontendId": "1",
        "title": slug.replace("-", " ").title(),
        "titleZh": title_zh,
        "titleSlug": slug,
        "paidOnly": False,
        "difficulty": "Easy",
        "status": None,
        "acRate": 51.5,
    }
    node.update(overrides)
    return node


def gql_list(*nodes):
    return {"data": {"problemsetQuestionList": {"total": len(nodes), "questions": list(nodes)}}}


def rest_pair(qid: int, slug: str, title: str, level: int, acs, submitted, paid=False):
    return {
        "stat": {
            "question_id": qid,
            "frontend_question_id": qid,
            "question__title": title,
            "question__title_slug": slug,
            "total_acs": acs,
            "total_submitted": submitted,
        },
        "difficulty": {"level": level},
        "paid_only": paid,
        "status": "ac" if qid == 1 else None,
    }


REST_CATALOG = {
    "stat_status_pairs": [
        rest_pair(1, "two-sum", "Two Sum", 1, 50, 200),
        rest_pair(2, "add-two-numbers", "Add Two Numbers", 2, 0, 0),
        rest_pair(4, "median-of-two-sorted-arrays", "Median of Two Sorted Arrays", 3, 10, None),
        rest_pair(10, "regular-expression-matching", "Regular Expression Matching", 7, 1, 4),
    ]
}


@pytest.fixture
def aggregator(upstream_client, resolver) -> ProblemListAggregator:
    return ProblemListAggregator(upstream_client, resolver, settings)


def test_acceptance_rate_is_null_without_submissions() -> None:
    assert acceptance_rate(5, 0) is None
    assert acceptance_rate(5, None) is None
    assert acceptance_rate(None, None) is None
    assert acceptance_rate(50, 200) == 25.0
    assert acceptance_rate(None, 10) is None
    assert acceptance_rate(0, 10) == 0.0


def test_graphql_item_normalization() -> None:
    item = item_from_graphql(
        gql_node("x", id="abc", frontendId=None, difficulty=None, status="", acRate=None)
    )

    assert item.id == 0
    assert item.frontendId == ""
    assert item.difficulty == "Unknown"
    assert item.status is None
    assert item.acRate is None


def test_fill_localized_titles_is_non_destructive_and_idempotent() -> None:
    items = [
        ProblemListItem(id=1, frontendId="1", title="Two Sum", titleZh="已有", titleSlug="two-sum"),
        ProblemListItem(id=2, frontendId="2", title="Add Two Numbers", titleSlug="add-two-numbers"),
        ProblemListItem(id=3, frontendId="3", title="Orphan", titleSlug="orphan"),
    ]
    secondary = [
        ProblemListItem(id=1, frontendId="1", title="Two Sum", titleZh="两数之和", titleSlug="two-sum"),
        ProblemListItem(id=2, frontendId="2", title="Add Two Numbers", titleZh="两数相加", titleSlug="add-two-numbers"),
    ]

    once = fill_localized_titles(items, secondary)
    twice = fill_localized_titles(once, secondary)

    assert [i.titleZh for i in once] == ["已有", "两数相加", None]
    assert twice == once
    assert items[1].titleZh is None


def test_filter_items_matches_title_slug_or_frontend_id() -> None:
    items = [
        ProblemListItem(id=1, frontendId="1", title="Two Sum", titleSlug="two-sum"),
        ProblemListItem(id=15, frontendId="15", title="3Sum", titleSlug="3sum"),
        ProblemListItem(id=20, frontendId="20", title="Valid Parentheses", titleSlug="valid-parentheses"),
    ]

    assert [i.id for i in filter_items(items, "SUM")] == [1, 15]
    assert [i.id for i in filter_items(items, "parenth")] == [20]
    assert [i.id for i in filter_items(items, "15")] == [15]
    assert len(filter_items(items, "  ")) == 3


@pytest.mark.asyncio
async def test_localized_list_uses_graphql(aggregator, fake_upstream, primary_session):
    fake_upstream.graphql(
        "leetcode.com", "translatedTitle", gql_list(gql_node("two-sum", "两数之和"))
    )

    items = await aggregator.list(primary_session, search_text=" Two ", lang="zh")

    assert [i.titleZh for i in items] == ["两数之和"]
    assert fake_upstream.calls_to("leetcode.cn") == []
    variables = graphql_body(fake_upstream.requests[0])["variables"]
    assert variables == {
        "categorySlug": None,
        "limit": settings.problem_list_limit,
        "skip": 0,
        "filters": {"searchKeywords": "two"},
    }


@pytest.mark.asyncio
async def test_missing_titles_are_filled_from_secondary_domain(
    aggregator, fake_upstream, primary_session
):
    fake_upstream.graphql(
        "leetcode.com",
        "translatedTitle",
        gql_list(gql_node("two-sum", "本地标题"), gql_node("add-two-numbers"), gql_node("lonely")),
    )
    fake_upstream.graphql(
        "leetcode.cn",
        "translatedTitle",
        gql_list(gql_node("two-sum", "两数之和"), gql_node("add-two-numbers", "两数相加")),
    )

    items = await aggregator.list(primary_session, lang="zh-CN", category="database")

    assert [i.titleZh for i in items] == ["本地标题", "两数相加", None]
    secondary_call = fake_upstream.calls_to("leetcode.cn", "/graphql/")[0]
    assert "cookie" not in secondary_call.headers
    assert graphql_body(secondary_call)["variables"]["categorySlug"] == "database"


@pytest.mark.asyncio
async def test_secondary_session_is_not_enriched(aggregator, fake_upstream, secondary_session):
    fake_upstream.graphql("leetcode.cn", "translatedTitle", gql_list(gql_node("two-sum")))

    items = await aggregator.list(secondary_session, lang="cn")

    assert len(items) == 1
    assert len(fake_upstream.requests) == 1


@pytest.mark.asyncio
async def test_title_cn_variant_used_when_translated_title_rejected(
    aggregator, fake_upstream, secondary_session
):
    fake_upstream.graphql(
        "leetcode.cn", "translatedTitle", {"errors": [{"message": "Cannot query field"}]}
    )
    fake_upstream.graphql("leetcode.cn", "titleCn", gql_list(gql_node("two-sum", "两数之和")))

    items = await aggregator.list(secondary_session, lang="zh")

    assert items[0].titleZh == "两数之和"


@pytest.mark.asyncio
async def test_empty_graphql_catalog_falls_back_to_rest(aggregator, fake_upstream, primary_session):
    fake_upstream.graphql("leetcode.com", "problemsetQuestionList", gql_list())
    fake_upstream.add("leetcode.com", "/api/problems/algorithms/", REST_CATALOG)

    items = await aggregator.list(primary_session, lang="zh")

    assert [i.titleSlug for i in items] == [
        "two-sum",
        "add-two-numbers",
        "median-of-two-sorted-arrays",
        "regular-expression-matching",
    ]
    assert all(i.titleZh is None for i in items)
    assert [i.difficulty for i in items] == ["Easy", "Medium", "Hard", "Unknown"]
    assert [i.acRate for i in items] == [25.0, None, None, 25.0]
    assert items[0].status == "ac"
    assert fake_upstream.calls_to("leetcode.cn") == []


@pytest.mark.asyncio
async def test_unlocalized_list_goes_straight_to_rest(aggregator, fake_upstream, primary_session):
    fake_upstream.add("leetcode.com", "/api/problems/algorithms/", REST_CATALOG)

    items = await aggregator.list(primary_session, search_text="two")

    assert [i.id for i in items] == [1, 2, 4]
    assert fake_upstream.calls_to("leetcode.com", "/graphql/") == []


@pytest.mark.asyncio
async def test_rest_failure_is_upstream_error(aggregator, fake_upstream, primary_session):
    fake_upstream.add("leetcode.com", "/api/problems/algorithms/", httpx.Response(503, text="down"))

    with pytest.raises(UpstreamError) as exc_info:
        await aggregator.list(primary_session)

    assert exc_info.value.code == "UPSTREAM_ERROR"
    assert exc_info.value.detail == {"status": 503, "raw": "down"}
