from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from app.common.errors import PersistenceError
from app.db.repository import SupabaseRepository
from .schemas import PENDING_STATUSES


class SubmissionRepository(SupabaseRepository):
    """Row access for the ``quest_submissions`` table."""

    _TABLE = "quest_submissions"

    async def get(self, submission_id: str) -> Optional[Dict[str, Any]]:
        client = await self._client()
        query = client.table(self._TABLE).select("*").eq("id", submission_id).limit(1)
        resp = await self._exec(query.execute(), op="quest_submissions.select_by_id")
        return self._first(resp)

    async def get_latest(self, quest_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        """Most recent attempt (highest attempt_number) for a (quest, user) pair."""
        client = await self._client()
        query = (
            client.table(self._TABLE)
            .select("*")
            .eq("quest_id", quest_id)
            .eq("user_id", user_id)
            .order("attempt_number", desc=True)
            .limit(1)
        )
        resp = await self._exec(query.execute(), op="quest_submissions.latest")
        return self._first(resp)

    async def list_submissions(
        self,
        quest_id: Optional[str] = None,
        user_id: Optional[str] = None,
        quest_ids: Optional[Iterable[str]] = None,
        status: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        client = await self._client()
        query = client.table(self._TABLE).select("*")
        if quest_id:
            query = query.eq("quest_id", quest_id)
        if user_id:
            query = query.eq("user_id", user_id)
        if quest_ids is not None:
            query = query.in_("quest_id", list(quest_ids))
        if status:
            query = query.eq("status", status)
        resp = await self._exec(query.order("submitted_at", desc=True).execute(), op="quest_submissions.list")
        return self._rows(resp)

    async def list_statuses_for_quest(self, quest_id: str) -> List[str]:
        client = await self._client()
        query = client.table(self._TABLE).select("status").eq("quest_id", quest_id)
        resp = await self._exec(query.execute(), op="quest_submissions.statuses")
        return [row.get("status") for row in self._rows(resp)]

    async def insert(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        client = await self._client()
        resp = await self._exec(client.table(self._TABLE).insert(payload).execute(), op="quest_submissions.insert")
        row = self._first(resp)
        if not row:
            raise PersistenceError("Failed to create submission record")
        return row

    async def update_pending(self, submission_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply ``fields`` only while the row is still submitted or under review.

        Returns None when another reviewer already recorded a final verdict.
        """
        client = await self._client()
        query = (
            client.table(self._TABLE)
            .update(fields)
            .eq("id", submission_id)
            .in_("status", sorted(s.value for s in PENDING_STATUSES))
        )
        resp = await self._exec(query.execute(), op="quest_submissions.update_pending")
        return self._first(resp)


submission_repository = SubmissionRepository()

__all__ = ["submission_repository", "SubmissionRepository"]
