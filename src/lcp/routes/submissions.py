"""Submission endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from lcp.auth import CurrentSession, require_session
from lcp.dependencies import get_submission_tracker
from lcp.schemas.common import ERROR_RESPONSES
from lcp.schemas.submissions import SubmissionCheckResponse, SubmitRequest, SubmitResponse
from lcp.services.submissions import SubmissionTracker

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("/submit", response_model=SubmitResponse)
async def submit(
    payload: SubmitRequest,
    current: CurrentSession = Depends(require_session),
    tracker: SubmissionTracker = Depends(get_submission_tracker),
) -> SubmitResponse:
    """Submit code for judging."""
    submission_id = await tracker.submit(
        current.record,
        slug=payload.slug,
        language=payload.lang,
        code=payload.code,
        question_id=payload.questionId,
    )
    return SubmitResponse(submissionId=submission_id)


@router.get("/submission/{submission_id}/check", response_model=SubmissionCheckResponse)
async def check_submission(
    submission_id: str,
    slug: Optional[str] = Query(None),
    current: CurrentSession = Depends(require_session),
    tracker: SubmissionTracker = Depends(get_submission_tracker),
) -> SubmissionCheckResponse:
    """Relay the judge's current status; the caller decides when to stop polling."""
    snapshot = await tracker.check_status(current.record, submission_id, slug)
    return SubmissionCheckResponse(submission=snapshot)
