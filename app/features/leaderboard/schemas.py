from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from app.features.quests.schemas import QuestCategory


class Timeframe(str, Enum):
    all_time = "all-time"
    this_month = "this-month"
    this_week = "this-week"


class LeaderboardCategory(str, Enum):
    """Quest categories plus ``overall`` (no category filter)."""

    overall = "overall"
    coding = "coding"
    design = "design"
    writing = "writing"
    analysis = "analysis"
    leadership = "leadership"
    communication = "communication"

    def quest_category(self) -> Optional[QuestCategory]:
        if self is LeaderboardCategory.overall:
            return None
        return QuestCategory(self.value)


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    display_name: str
    total_quests_passed: int
    total_score: int
    average_score: float
    badge_count: int
