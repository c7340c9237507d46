from __future__ import annotations

import logging
from typing import List, Optional

from app.common.errors import NotFoundError
from app.features.submissions.repository import SubmissionRepository, submission_repository
from app.features.submissions.schemas import SubmissionStatus
from .repository import QuestRepository, quest_repository
from .schemas import Quest, QuestCreate, QuestSearchFilters, QuestStats, QuestUpdate

logger = logging.getLogger("quests.service")


class QuestService:
    """Quest definitions (recruiter side) and their aggregate statistics."""

    def __init__(
        self,
        repo: Optional[QuestRepository] = None,
        submissions: Optional[SubmissionRepository] = None,
    ):
        self.repo = repo or quest_repository
        self.submissions = submissions or submission_repository
        self.log = logger

    async def get_quests(self, created_by: Optional[str] = None) -> List[Quest]:
        # Without a creator only active quests are listed (candidate catalogue).
        rows = await self.repo.list_quests(created_by=created_by, active_only=created_by is None)
        return [Quest.model_validate(row) for row in rows]

    async def get_quest(self, quest_id: str) -> Quest:
        row = await self.repo.get(quest_id)
        if not row:
            raise NotFoundError("Quest not found")
        return Quest.model_validate(row)

    async def create_quest(self, creator_id: str, data: QuestCreate) -> Quest:
        payload = data.model_dump(mode="json")
        payload.update({"created_by": creator_id, "total_attempts": 0, "success_rate": 0.0})
        row = await self.repo.insert(payload)
        self.log.info("quest_created quest_id=%s created_by=%s", row.get("id"), creator_id)
        return Quest.model_validate(row)

    async def update_quest(self, quest_id: str, actor_id: str, updates: QuestUpdate) -> Quest:
        await self._get_owned(quest_id, actor_id)
        fields = {k: v for k, v in updates.model_dump(mode="json", exclude_unset=True).items() if v is not None}
        row = await self.repo.update(quest_id, fields)
        if not row:
            raise NotFoundError("Quest not found")
        return Quest.model_validate(row)

    async def delete_quest(self, quest_id: str, actor_id: str) -> None:
        await self._get_owned(quest_id, actor_id)
        await self.repo.delete(quest_id)
        self.log.info("quest_deleted quest_id=%s by=%s", quest_id, actor_id)

    async def search_quests(self, filters: QuestSearchFilters) -> List[Quest]:
        rows = await self.repo.search(filters)
        return [Quest.model_validate(row) for row in rows]

    async def recompute_quest_stats(self, quest_id: str) -> QuestStats:
        """Recount attempts and success rate from every submission of the quest."""
        statuses = await self.submissions.list_statuses_for_quest(quest_id)
        total_attempts = len(statuses)
        passed = sum(1 for s in statuses if s == SubmissionStatus.passed.value)
        success_rate = passed / total_attempts if total_attempts > 0 else 0.0
        await self.repo.update_stats(quest_id, total_attempts, success_rate)
        self.log.debug(
            "quest_stats quest_id=%s total_attempts=%d success_rate=%.3f", quest_id, total_attempts, success_rate
        )
        return QuestStats(quest_id=quest_id, total_attempts=total_attempts, success_rate=success_rate)

    async def _get_owned(self, quest_id: str, actor_id: str) -> Quest:
        quest = await self.get_quest(quest_id)
        if str(quest.created_by) != str(actor_id):
            raise NotFoundError("Quest not found or no permission")
        return quest


quest_service = QuestService()

__all__ = ["quest_service", "QuestService"]
