"""Problem catalog and problem detail endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from lcp.auth import CurrentSession, require_session
from lcp.dependencies import get_problem_detail, get_problem_list
from lcp.schemas.common import ERROR_RESPONSES
from lcp.schemas.problems import ProblemDetailResponse, ProblemList
from lcp.services.problem_detail import ProblemDetailService
from lcp.services.problems import ProblemListAggregator

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/problems", response_model=ProblemList)
async def list_problems(
    q: Optional[str] = Query(None),
    lang: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    current: CurrentSession = Depends(require_session),
    service: ProblemListAggregator = Depends(get_problem_list),
) -> ProblemList:
    """List problems, optionally searched and localized."""
    items = await service.list(current.record, search_text=q, category=category, lang=lang)
    return ProblemList(items=items)


@router.get("/problem/{slug}", response_model=ProblemDetailResponse)
async def get_problem(
    slug: str,
    current: CurrentSession = Depends(require_session),
    service: ProblemDetailService = Depends(get_problem_detail),
) -> ProblemDetailResponse:
    """Get one problem's full content."""
    question = await service.detail(current.record, slug)
    return ProblemDetailResponse(question=question)
