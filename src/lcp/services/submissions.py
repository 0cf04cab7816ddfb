"""Submitting solutions and relaying judge status."""

import logging
from typing import Any, Dict, Optional, Union

from lcp.clients.upstream import UpstreamClient
from lcp.errors import UpstreamError, ValidationError
from lcp.models import SessionRecord
from lcp.services.problem_detail import ProblemDetailService

logger = logging.getLogger(__name__)


def parse_submission_id(value: Any) -> int:
    """Validate a submission id taken from a URL."""
    try:
        submission_id = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError("INVALID_SUBMISSION_ID")
    if submission_id <= 0:
        raise ValidationError("INVALID_SUBMISSION_ID")
    return submission_id


class SubmissionTracker:
    """Submits code and passes judge status through untouched.

    Holds no per-submission state and never waits for a verdict; callers
    poll ``check_status`` on their own schedule.
    """

    def __init__(self, upstream: UpstreamClient, problems: ProblemDetailService):
        self.upstream = upstream
        self.problems = problems

    async def resolve_question_id(self, session: SessionRecord, slug: str) -> str:
        result = await self.problems.fetch_question(session, slug)
        if not result.ok:
            raise UpstreamError(detail=result.to_detail())
        question_id = ((result.data or {}).get("question") or {}).get("id")
        if not question_id:
            raise UpstreamError(message="Missing questionId")
        return str(question_id)

    async def submit(
        self,
        session: SessionRecord,
        slug: Optional[str],
        language: Optional[str],
        code: Optional[str],
        question_id: Optional[Union[int, str]] = None,
    ) -> int:
        """Send code to the judge and return the submission id."""
        slug = (slug or "").strip()
        language = (language or "").strip()
        if not slug:
            raise ValidationError("SLUG_REQUIRED")
        if not language:
            raise ValidationError("LANG_REQUIRED")
        if not code:
            raise ValidationError("CODE_REQUIRED")

        qid = str(question_id).strip() if question_id is not None else ""
        if not qid:
            qid = await self.resolve_question_id(session, slug)

        response = await self.upstream.submit(session, slug, qid, language, code)
        payload = response.parsed()
        if not response.ok:
            raise _upstream_failure(response.status_code, "HTTP_ERROR", payload)

        raw_id = None
        if isinstance(payload, dict):
            raw_id = payload.get("submission_id") or payload.get("submissionId")
        try:
            submission_id = int(raw_id)
        except (TypeError, ValueError):
            raise _upstream_failure(response.status_code, "NO_SUBMISSION_ID", payload)

        logger.info("Submitted %s (%s) as %d", slug, language, submission_id)
        return submission_id

    async def check_status(
        self,
        session: SessionRecord,
        submission_id: Any,
        slug: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """Current judge status snapshot, passed through as reported."""
        sid = parse_submission_id(submission_id)
        response = await self.upstream.check_submission(session, sid, (slug or "").strip() or None)
        payload = response.parsed()
        if not response.ok:
            raise _upstream_failure(response.status_code, "HTTP_ERROR", payload)
        if payload is not None and not isinstance(payload, dict):
            raise _upstream_failure(response.status_code, "INVALID_JSON", payload)
        return payload


def _upstream_failure(status: int, error: str, raw: Any) -> UpstreamError:
    return UpstreamError(detail={"ok": False, "status": status, "error": error, "raw": raw})
