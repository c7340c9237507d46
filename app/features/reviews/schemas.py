from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from app.features.submissions.schemas import SubmissionStatus
from .feedback import StructuredFeedback

REVIEWABLE_STATUSES = frozenset(
    {
        SubmissionStatus.under_review,
        SubmissionStatus.passed,
        SubmissionStatus.failed,
        SubmissionStatus.needs_revision,
    }
)


class ReviewRequest(BaseModel):
    status: SubmissionStatus
    score: Optional[int] = Field(default=None, ge=0, le=100)
    feedback: Optional[StructuredFeedback] = None

    @model_validator(mode="after")
    def ensure_reviewable_status(self) -> "ReviewRequest":
        if self.status not in REVIEWABLE_STATUSES:
            raise ValueError("status must be one of under_review, passed, failed, needs_revision")
        return self
