from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from app.common.errors import NotFoundError
from app.features.quests.service import QuestService, quest_service
from .repository import BadgeRepository, badge_repository
from .schemas import Badge, BadgeDisplayUpdate
from .scoring import calculate_badge_level, calculate_badge_rarity

logger = logging.getLogger("badges.service")


class BadgesService:
    def __init__(self, repo: Optional[BadgeRepository] = None, quests: Optional[QuestService] = None):
        self.repo = repo or badge_repository
        self.quests = quests or quest_service
        self.log = logger

    async def award_badge(self, user_id: str, quest_id: str, score: int) -> Badge:
        """Create a badge for a passing score.

        Not idempotent: every call inserts a new row, so the review workflow
        calls this at most once per review action.
        """
        quest = await self.quests.get_quest(quest_id)
        level = calculate_badge_level(score)
        rarity = calculate_badge_rarity(quest.difficulty, score)
        earned_at = datetime.now(timezone.utc).isoformat()
        row = await self.repo.insert(
            {
                "user_id": user_id,
                "quest_id": quest_id,
                "name": f"{quest.title} {level.value}",
                "description": f"Earned by completing {quest.title} with a score of {score}%",
                "skill": quest.skills_assessed[0] if quest.skills_assessed else "General",
                "level": level.value,
                "rarity": rarity.value,
                "blockchain_data": {
                    "score": score,
                    "quest_difficulty": quest.difficulty.value,
                    "earned_date": earned_at,
                },
                "is_verified": True,
                "is_displayed": True,
                "display_order": 0,
                "earned_at": earned_at,
            }
        )
        self.log.info(
            "badge_awarded user_id=%s quest_id=%s level=%s rarity=%s", user_id, quest_id, level.value, rarity.value
        )
        return Badge.model_validate(row)

    async def get_user_badges(self, user_id: str) -> List[Badge]:
        rows = await self.repo.list_for_user(user_id)
        return [Badge.model_validate(row) for row in rows]

    async def update_display(self, badge_id: str, owner_id: str, update: BadgeDisplayUpdate) -> Badge:
        row = await self.repo.get(badge_id)
        if not row or str(row.get("user_id")) != str(owner_id):
            raise NotFoundError("Badge not found or no permission")
        fields = {k: v for k, v in update.model_dump(exclude_unset=True).items() if v is not None}
        if fields:
            row = await self.repo.update(badge_id, fields) or row
        return Badge.model_validate(row)


badges_service = BadgesService()

__all__ = ["badges_service", "BadgesService"]
