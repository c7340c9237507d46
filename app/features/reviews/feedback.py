from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


class FeedbackItemType(str, Enum):
    strength = "strength"
    improvement = "improvement"
    comment = "comment"


class Severity(str, Enum):
    minor = "minor"
    moderate = "moderate"
    major = "major"


class Impact(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Recommendation(str, Enum):
    hire = "hire"
    consider = "consider"
    pass_ = "pass"


class FeedbackItem(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    content: str = ""
    type: FeedbackItemType = FeedbackItemType.comment
    severity: Optional[Severity] = None
    impact: Optional[Impact] = None
    category: Optional[str] = None


def _coerce_items(value: Any, item_type: FeedbackItemType) -> Any:
    # Older reviews stored bare strings per line.
    if not isinstance(value, list):
        return value or []
    items = []
    for entry in value:
        if isinstance(entry, str):
            items.append({"content": entry, "type": item_type})
        elif isinstance(entry, dict):
            items.append({"type": item_type, **entry})
        else:
            items.append(entry)
    return items


class StructuredFeedback(BaseModel):
    overall: str = ""
    strengths: List[FeedbackItem] = Field(default_factory=list)
    improvements: List[FeedbackItem] = Field(default_factory=list)
    specific_comments: List[FeedbackItem] = Field(default_factory=list)
    score: Optional[int] = Field(default=None, ge=0, le=100)
    recommendation: Optional[Recommendation] = None
    private_notes: Optional[str] = None

    @field_validator("strengths", mode="before")
    @classmethod
    def _strengths(cls, value: Any) -> Any:
        return _coerce_items(value, FeedbackItemType.strength)

    @field_validator("improvements", mode="before")
    @classmethod
    def _improvements(cls, value: Any) -> Any:
        return _coerce_items(value, FeedbackItemType.improvement)

    @field_validator("specific_comments", mode="before")
    @classmethod
    def _comments(cls, value: Any) -> Any:
        return _coerce_items(value, FeedbackItemType.comment)

    def public_view(self) -> "StructuredFeedback":
        """Copy without reviewer-private notes (what the candidate may see)."""
        return self.model_copy(update={"private_notes": None})


