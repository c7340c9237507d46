"""Process-wide async Supabase client.

Repositories reach it through ``SupabaseRepository._client``; the auth
dependency uses it directly for ``auth.get_user``.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from supabase import AsyncClient, create_async_client

from app.core.config import get_settings

logger = logging.getLogger("db.supabase")

_client: Optional[AsyncClient] = None
_lock = asyncio.Lock()


async def get_supabase() -> AsyncClient:
    """Return the shared client, creating it on first use.

    Raises RuntimeError when the client cannot be created (bad URL or key).
    """
    global _client
    if _client is not None:
        return _client
    async with _lock:
        if _client is None:
            settings = get_settings()
            if not settings.supabase_url or not settings.supabase_key:
                raise RuntimeError("SUPABASE_URL and a Supabase key must be configured")
            try:
                _client = await create_async_client(settings.supabase_url, settings.supabase_key)
            except Exception as exc:
                raise RuntimeError("Could not create Supabase async client") from exc
            logger.info("supabase_client_created url=%s", settings.supabase_url)
    return _client


__all__ = ["get_supabase"]
