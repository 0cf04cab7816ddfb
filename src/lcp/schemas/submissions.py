"""Submission-related schemas."""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel


class SubmitRequest(BaseModel):
    """Submit code request."""

    slug: Optional[str] = None
    lang: Optional[str] = None
    code: Optional[str] = None
    questionId: Optional[Union[int, str]] = None


class SubmitResponse(BaseModel):
    submissionId: int


class SubmissionCheckResponse(BaseModel):
    """Judging status exactly as the platform reported it."""

    submission: Optional[Dict[str, Any]] = None
