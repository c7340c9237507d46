from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from app.features.reviews.feedback import StructuredFeedback


class SubmissionStatus(str, Enum):
    submitted = "submitted"
    under_review = "under_review"
    passed = "passed"
    failed = "failed"
    needs_revision = "needs_revision"


PENDING_STATUSES = frozenset({SubmissionStatus.submitted, SubmissionStatus.under_review})
FINAL_STATUSES = frozenset({SubmissionStatus.passed, SubmissionStatus.failed, SubmissionStatus.needs_revision})
RESUBMITTABLE_STATUSES = frozenset({SubmissionStatus.failed, SubmissionStatus.needs_revision})


# --- Submission content (tagged on ``type``) ---------------------------------

class SubmissionFile(BaseModel):
    name: str
    type: str = "application/octet-stream"
    size: int = Field(default=0, ge=0)
    url: str


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    content: str = ""
    notes: Optional[str] = None

    def is_blank(self) -> bool:
        return not self.content.strip()


class CodeContent(BaseModel):
    type: Literal["code"] = "code"
    content: str = ""
    language: Optional[str] = None
    notes: Optional[str] = None

    def is_blank(self) -> bool:
        return not self.content.strip()


class FileContent(BaseModel):
    type: Literal["file"] = "file"
    files: List[SubmissionFile] = Field(default_factory=list)
    notes: Optional[str] = None

    def is_blank(self) -> bool:
        return not self.files


class UrlContent(BaseModel):
    type: Literal["url"] = "url"
    url: str
    notes: Optional[str] = None

    @field_validator("url")
    @classmethod
    def _http_only(cls, value: str) -> str:
        value = value.strip()
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError("url must start with http:// or https://")
        return value

    def is_blank(self) -> bool:
        return not self.url


class MultimediaContent(BaseModel):
    type: Literal["multimedia"] = "multimedia"
    content: Optional[str] = None
    files: List[SubmissionFile] = Field(default_factory=list)
    notes: Optional[str] = None

    def is_blank(self) -> bool:
        return not self.files and not (self.content or "").strip()


SubmissionContent = Annotated[
    Union[TextContent, CodeContent, FileContent, UrlContent, MultimediaContent],
    Field(discriminator="type"),
]


def coerce_legacy_content(value: Any) -> Any:
    """Read untyped payloads (``{"solution", "notes"}`` or a plain string) as text."""
    if isinstance(value, str):
        return {"type": "text", "content": value}
    if isinstance(value, dict) and "type" not in value:
        return {
            "type": "text",
            "content": str(value.get("solution") or value.get("content") or ""),
            "notes": value.get("notes"),
        }
    return value


# --- Submissions --------------------------------------------------------------

class Submission(BaseModel):
    id: str
    quest_id: str
    user_id: str
    attempt_number: int = Field(..., ge=1)
    submission_content: SubmissionContent
    status: SubmissionStatus = SubmissionStatus.submitted
    score: Optional[int] = Field(default=None, ge=0, le=100)
    feedback: Optional[StructuredFeedback] = None
    time_spent: Optional[int] = Field(default=None, ge=0, description="Seconds")
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None

    @field_validator("submission_content", mode="before")
    @classmethod
    def _legacy_content(cls, value: Any) -> Any:
        return coerce_legacy_content(value)

    @field_validator("feedback", mode="before")
    @classmethod
    def _empty_feedback(cls, value: Any) -> Any:
        return value or None

    def candidate_view(self) -> "Submission":
        if self.feedback is None:
            return self
        return self.model_copy(update={"feedback": self.feedback.public_view()})


class SubmissionCreate(BaseModel):
    submission_content: SubmissionContent
    time_spent: int = Field(default=0, ge=0, description="Seconds")

    @model_validator(mode="after")
    def ensure_payload(self) -> "SubmissionCreate":
        if self.submission_content.is_blank():
            raise ValueError("submission_content must not be empty")
        return self


class SubmissionEligibility(BaseModel):
    has_prior_submission: bool
    latest_submission: Optional[Submission] = None
    can_submit: bool
