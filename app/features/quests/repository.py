from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.common.errors import PersistenceError
from app.db.repository import SupabaseRepository
from .schemas import QuestSearchFilters


class QuestRepository(SupabaseRepository):
    """Row access for the ``quests`` table."""

    _TABLE = "quests"

    async def get(self, quest_id: str) -> Optional[Dict[str, Any]]:
        client = await self._client()
        query = client.table(self._TABLE).select("*").eq("id", quest_id).limit(1)
        resp = await self._exec(query.execute(), op="quests.select_by_id")
        return self._first(resp)

    async def list_quests(
        self,
        created_by: Optional[str] = None,
        active_only: bool = False,
        category: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        client = await self._client()
        query = client.table(self._TABLE).select("*")
        if created_by:
            query = query.eq("created_by", created_by)
        if active_only:
            query = query.eq("is_active", True)
        if category:
            query = query.eq("category", category)
        resp = await self._exec(query.order("created_at", desc=True).execute(), op="quests.list")
        return self._rows(resp)

    async def search(self, filters: QuestSearchFilters) -> List[Dict[str, Any]]:
        client = await self._client()
        query = client.table(self._TABLE).select("*").eq("is_active", True)
        if filters.category:
            query = query.eq("category", filters.category.value)
        if filters.difficulty:
            query = query.eq("difficulty", filters.difficulty.value)
        if filters.skills:
            query = query.overlaps("skills_assessed", filters.skills)
        if filters.search:
            query = query.ilike("title", f"%{filters.search}%")
        resp = await self._exec(query.order("created_at", desc=True).execute(), op="quests.search")
        return self._rows(resp)

    async def insert(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        client = await self._client()
        resp = await self._exec(client.table(self._TABLE).insert(payload).execute(), op="quests.insert")
        row = self._first(resp)
        if not row:
            raise PersistenceError("Failed to create quest record")
        return row

    async def update(self, quest_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not fields:
            return await self.get(quest_id)
        payload = {**fields, "updated_at": datetime.now(timezone.utc).isoformat()}
        client = await self._client()
        query = client.table(self._TABLE).update(payload).eq("id", quest_id)
        resp = await self._exec(query.execute(), op="quests.update")
        return self._first(resp)

    async def update_stats(self, quest_id: str, total_attempts: int, success_rate: float) -> None:
        client = await self._client()
        query = (
            client.table(self._TABLE)
            .update({"total_attempts": total_attempts, "success_rate": success_rate})
            .eq("id", quest_id)
        )
        await self._exec(query.execute(), op="quests.update_stats")

    async def delete(self, quest_id: str) -> bool:
        client = await self._client()
        resp = await self._exec(client.table(self._TABLE).delete().eq("id", quest_id).execute(), op="quests.delete")
        return bool(self._rows(resp))


quest_repository = QuestRepository()

__all__ = ["quest_repository", "QuestRepository"]
