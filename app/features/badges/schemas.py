from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class BadgeLevel(str, Enum):
    bronze = "bronze"
    silver = "silver"
    gold = "gold"
    platinum = "platinum"
    diamond = "diamond"


class BadgeRarity(str, Enum):
    common = "common"
    uncommon = "uncommon"
    rare = "rare"
    epic = "epic"
    legendary = "legendary"


class Badge(BaseModel):
    id: str
    user_id: str
    quest_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    skill: str
    level: BadgeLevel
    rarity: BadgeRarity
    # Inert verification metadata: {score, quest_difficulty, earned_date}
    blockchain_data: Dict[str, Any] = Field(default_factory=dict)
    is_verified: bool = False
    is_displayed: bool = True
    display_order: int = 0
    earned_at: Optional[datetime] = None


class BadgeDisplayUpdate(BaseModel):
    is_displayed: Optional[bool] = None
    display_order: Optional[int] = Field(default=None, ge=0)
