from fastapi import APIRouter, Depends

from app.common.deps import CurrentUser, require_recruiter
from app.common.errors import QuestError, to_http
from app.features.submissions.schemas import Submission
from .schemas import ReviewRequest
from .service import review_service

router = APIRouter(prefix="/submissions", tags=["reviews"])


@router.post("/{submission_id}/review", response_model=Submission)
async def review_submission(
    submission_id: str, req: ReviewRequest, current_user: CurrentUser = Depends(require_recruiter())
):
    """Apply a verdict; a pass at or above the badge floor also awards a badge."""
    try:
        return await review_service.review(submission_id, current_user.id, req)
    except QuestError as exc:
        raise to_http(exc)
