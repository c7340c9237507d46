from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class QuestCategory(str, Enum):
    coding = "coding"
    design = "design"
    writing = "writing"
    analysis = "analysis"
    leadership = "leadership"
    communication = "communication"


class QuestDifficulty(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"
    expert = "expert"


class QuestBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    category: QuestCategory
    difficulty: QuestDifficulty
    estimated_time: Optional[int] = Field(default=None, ge=0, description="Minutes")
    instructions: Any = Field(default_factory=dict)
    resources: Any = Field(default_factory=list)
    skills_assessed: List[str] = Field(default_factory=list)
    verification_criteria: Any = Field(default_factory=dict)
    passing_score: int = Field(default=80, ge=0, le=100)
    badge_metadata: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True

    @field_validator("skills_assessed", mode="before")
    @classmethod
    def _null_skills(cls, value: Any) -> Any:
        return value or []


class QuestCreate(QuestBase):
    pass


class QuestUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[QuestCategory] = None
    difficulty: Optional[QuestDifficulty] = None
    estimated_time: Optional[int] = Field(default=None, ge=0)
    instructions: Optional[Any] = None
    resources: Optional[Any] = None
    skills_assessed: Optional[List[str]] = None
    verification_criteria: Optional[Any] = None
    passing_score: Optional[int] = Field(default=None, ge=0, le=100)
    badge_metadata: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class Quest(QuestBase):
    id: str
    created_by: str
    total_attempts: int = Field(default=0, ge=0)
    success_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class QuestSearchFilters(BaseModel):
    category: Optional[QuestCategory] = None
    difficulty: Optional[QuestDifficulty] = None
    skills: List[str] = Field(default_factory=list)
    search: Optional[str] = None


class QuestStats(BaseModel):
    quest_id: str
    total_attempts: int
    success_rate: float
