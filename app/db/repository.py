"""Shared plumbing for Supabase-backed repositories."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from postgrest.exceptions import APIError

from app.common.errors import ConflictError, PersistenceError
from app.core.config import get_settings
from app.db.supabase import get_supabase

logger = logging.getLogger("db.repository")

UNIQUE_VIOLATION = "23505"

ClientFactory = Callable[[], Awaitable[Any]]


class SupabaseRepository:
    """Base class: client lookup, bounded query execution and error mapping.

    Subclasses only build PostgREST queries. ``client_factory`` lets callers
    inject any object exposing the ``table(...)`` query builder (tests use an
    in-memory fake); by default the shared async Supabase client is used.
    """

    def __init__(self, client_factory: Optional[ClientFactory] = None) -> None:
        self._client_factory = client_factory

    async def _client(self):
        factory = self._client_factory or get_supabase
        try:
            return await factory()
        except Exception as exc:
            raise PersistenceError(f"Supabase client unavailable: {exc}") from exc

    async def _exec(self, awaitable, op: str) -> Any:
        timeout = get_settings().supabase_query_timeout
        t0 = time.perf_counter()
        try:
            resp = await asyncio.wait_for(awaitable, timeout=timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("supabase_%s_timeout timeout=%s", op, timeout)
            raise PersistenceError(f"Supabase {op} timed out after {timeout}s") from exc
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                logger.info("supabase_%s_conflict detail=%s", op, exc.message)
                raise ConflictError(f"Conflicting write on {op}") from exc
            logger.warning("supabase_%s_failed code=%s error=%s", op, exc.code, exc.message)
            raise PersistenceError(f"Supabase {op} failed: {exc.message}") from exc
        except Exception as exc:
            logger.warning("supabase_%s_failed error=%s", op, exc)
            raise PersistenceError(f"Supabase {op} failed: {exc}") from exc
        ms = int((time.perf_counter() - t0) * 1000)
        if ms > 50:
            logger.info("supabase_%s_ms=%d", op, ms)
        return resp

    @staticmethod
    def _rows(resp: Any) -> List[Dict[str, Any]]:
        data = getattr(resp, "data", None)
        if isinstance(data, dict):
            return [data]
        return list(data or [])

    @classmethod
    def _first(cls, resp: Any) -> Optional[Dict[str, Any]]:
        rows = cls._rows(resp)
        return rows[0] if rows else None
