#app\db\session.py
"""Engine forge (lazy: the API itself talks to Supabase over PostgREST)."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional
import os
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from app.core.config import get_settings

logger = logging.getLogger("db.session")


@lru_cache()
def get_engine() -> Optional[Engine]:
    """Return the shared engine, or None when DATABASE_URL is not configured."""
    settings = get_settings()
    runtime_url = settings.get_database_url()
    if not runtime_url:
        logger.warning("DATABASE_URL not configured; SQL engine disabled")
        return None

    connect_args = {"sslmode": "require"} if "sslmode=" not in runtime_url else {}
    # Tunables (clamped to expose issues faster)
    _pool_size = int(os.getenv("DB_POOL_SIZE", "5"))
    _max_overflow = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    _pool_timeout = int(os.getenv("DB_POOL_TIMEOUT", "5"))
    _connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", "5"))
    connect_args = {**connect_args, "connect_timeout": _connect_timeout}

    return create_engine(
        runtime_url,
        pool_pre_ping=True,
        pool_size=_pool_size,
        max_overflow=_max_overflow,
        pool_timeout=_pool_timeout,
        pool_recycle=300,
        echo=settings.debug,
        connect_args=connect_args,
    )

