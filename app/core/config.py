from __future__ import annotations

import os
from functools import lru_cache
from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(".env") or ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    """Central configuration (env driven)."""

    def __init__(self) -> None:
        # Supabase
        raw_url = os.getenv("SUPABASE_URL", "")
        self.supabase_url: str = raw_url.rstrip("/")
        self.supabase_anon_key: str = os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY", "")
        self.supabase_service_role_key: str = (
            os.getenv("SUPABASE_SERVICE_ROLE_KEY")
            or os.getenv("SUPABASE_SERVICE_KEY")
            or ""
        )
        # Server-side writes (stats, badges) need to bypass candidate RLS policies
        self.supabase_key: str = self.supabase_service_role_key or self.supabase_anon_key
        self.supabase_query_timeout: float = float(os.getenv("SUPABASE_QUERY_TIMEOUT", "5"))
        self.auth_whoami_timeout: float = float(os.getenv("AUTH_WHOAMI_TIMEOUT", "5"))
        # Database (migrations + health probe)
        self.database_url: str = os.getenv("DATABASE_URL", "")
        # App meta
        self.app_name: str = "CVaaS Backend"
        self.debug: bool = _env_bool("DEBUG", "false")
        self.log_level: str = os.getenv("LOG_LEVEL", "DEBUG" if self.debug else "INFO").upper()
        self.allow_origins: list[str] = [
            o.strip().rstrip("/")
            for o in os.getenv("ALLOW_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
            if o.strip()
        ]
        # Quest rules
        self.badge_award_min_score: int = int(os.getenv("BADGE_AWARD_MIN_SCORE", "80"))
        self.eligibility_fail_open: bool = _env_bool("ELIGIBILITY_FAIL_OPEN", "true")

    def get_database_url(self) -> str:
        return self.database_url


@lru_cache()
def get_settings() -> Settings:
    return Settings()
