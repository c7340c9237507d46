from __future__ import annotations

from typing import Any, Dict, List, Optional

from app.common.errors import PersistenceError
from app.db.repository import SupabaseRepository


class BadgeRepository(SupabaseRepository):
    """Row access for the ``badges`` table."""

    _TABLE = "badges"

    async def get(self, badge_id: str) -> Optional[Dict[str, Any]]:
        client = await self._client()
        query = client.table(self._TABLE).select("*").eq("id", badge_id).limit(1)
        resp = await self._exec(query.execute(), op="badges.select_by_id")
        return self._first(resp)

    async def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        client = await self._client()
        query = client.table(self._TABLE).select("*").eq("user_id", user_id).order("earned_at", desc=True)
        resp = await self._exec(query.execute(), op="badges.list_for_user")
        return self._rows(resp)

    async def list_all(self) -> List[Dict[str, Any]]:
        client = await self._client()
        query = client.table(self._TABLE).select("id, user_id, quest_id, earned_at")
        resp = await self._exec(query.execute(), op="badges.list_all")
        return self._rows(resp)

    async def insert(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        client = await self._client()
        resp = await self._exec(client.table(self._TABLE).insert(payload).execute(), op="badges.insert")
        row = self._first(resp)
        if not row:
            raise PersistenceError("Failed to create badge record")
        return row

    async def update(self, badge_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        client = await self._client()
        query = client.table(self._TABLE).update(fields).eq("id", badge_id)
        resp = await self._exec(query.execute(), op="badges.update")
        return self._first(resp)


badge_repository = BadgeRepository()

__all__ = ["badge_repository", "BadgeRepository"]
