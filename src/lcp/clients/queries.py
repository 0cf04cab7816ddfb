"""GraphQL documents for the platform, grouped by schema variant.

Deployed environments disagree on some field names, so every family that
is known to differ ships an ordered tuple of variants to try in turn.
"""

from lcp.clients.graphql import QueryVariant
from lcp.models import DomainVariant

USER_STATUS_PRIMARY = QueryVariant(
    name="userStatus.primary",
    query="""
query globalData {
  userStatus {
    id: userId
    name: username
    is_signed_in: isSignedIn
    is_premium: isPremium
    is_verified: isVerified
    session_id: activeSessionId
  }
}
""",
)

USER_STATUS_SECONDARY = QueryVariant(
    name="userStatus.secondary",
    query="""
query globalData {
  userStatus {
    slug: userSlug
    name: username
    real_name: realName
    is_signed_in: isSignedIn
    is_premium: isPremium
    is_verified: isVerified
  }
}
""",
)

USER_STATUS = {
    DomainVariant.primary: USER_STATUS_PRIMARY,
    DomainVariant.secondary: USER_STATUS_SECONDARY,
}

_QUESTION_FIELDS = """
    id: questionId
    frontend_id: questionFrontendId
    title
    translated_title: {localized_title}
    title_slug: titleSlug
    is_paid_only: isPaidOnly
    difficulty
    likes
    dislikes
    content
    translated_content: translatedContent
    testcase_list: exampleTestcaseList
    topic_tags: topicTags {{
      name
      slug
    }}
    code_snippets: codeSnippets {{
      lang
      lang_slug: langSlug
      code
    }}
"""

_QUESTION_TEMPLATE = """
query questionData($titleSlug: String!) {{
  question(titleSlug: $titleSlug) {{{fields}  }}
}}
"""

_PROBLEMSET_TEMPLATE = """
query problemsetQuestionList($categorySlug: String, $limit: Int, $skip: Int, $filters: QuestionListFilterInput) {{
  problemsetQuestionList(categorySlug: $categorySlug, limit: $limit, skip: $skip, filters: $filters) {{
    total
    questions {{
      id: questionId
      frontendId: frontendQuestionId
      title
      titleZh: {localized_title}
      titleSlug
      paidOnly: isPaidOnly
      difficulty
      status
      acRate
    }}
  }}
}}
"""


def _question_query(localized_title: str) -> str:
    fields = _QUESTION_FIELDS.format(localized_title=localized_title)
    return _QUESTION_TEMPLATE.format(fields=fields)


QUESTION_DETAIL = (
    QueryVariant("question.translatedTitle", _question_query("translatedTitle")),
    QueryVariant("question.titleCn", _question_query("titleCn")),
)

PROBLEMSET_LIST = (
    QueryVariant(
        "problemsetQuestionList.translatedTitle",
        _PROBLEMSET_TEMPLATE.format(localized_title="translatedTitle"),
    ),
    QueryVariant(
        "problemsetQuestionList.titleCn",
        _PROBLEMSET_TEMPLATE.format(localized_title="titleCn"),
    ),
)
