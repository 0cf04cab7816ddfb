"""Problem catalog and problem detail schemas."""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel

Difficulty = Literal["Easy", "Medium", "Hard", "Unknown"]


class ProblemListItem(BaseModel):
    """One row of the problem catalog."""

    id: int
    frontendId: str
    title: str
    titleZh: Optional[str] = None
    titleSlug: str
    paidOnly: bool = False
    difficulty: Difficulty = "Unknown"
    status: Optional[str] = None
    acRate: Optional[float] = None


class ProblemList(BaseModel):
    """Problem catalog response."""

    items: List[ProblemListItem]


class TopicTag(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None


class CodeSnippet(BaseModel):
    lang: Optional[str] = None
    lang_slug: Optional[str] = None
    code: Optional[str] = None


class ProblemDetail(BaseModel):
    """Full content of one problem as the editor consumes it."""

    id: Optional[Union[int, str]] = None
    frontend_id: Optional[str] = None
    title: Optional[str] = None
    translated_title: Optional[str] = None
    title_slug: Optional[str] = None
    is_paid_only: bool = False
    difficulty: Optional[str] = None
    likes: Optional[int] = None
    dislikes: Optional[int] = None
    content: Optional[str] = None
    translated_content: Optional[str] = None
    testcase_list: List[str] = []
    topic_tags: List[TopicTag] = []
    code_snippets: List[CodeSnippet] = []


class ProblemDetailResponse(BaseModel):
    question: ProblemDetail
