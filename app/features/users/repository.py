from __future__ import annotations

from typing import Any, Dict, Optional

from app.db.repository import SupabaseRepository


class UserRepository(SupabaseRepository):
    """Read access to the public ``users`` profile table."""

    _TABLE = "users"

    async def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        client = await self._client()
        query = client.table(self._TABLE).select("id, email, role").eq("id", user_id).limit(1)
        resp = await self._exec(query.execute(), op="users.select_by_id")
        return self._first(resp)


user_repository = UserRepository()

__all__ = ["user_repository", "UserRepository"]
