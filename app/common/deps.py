"""Shared FastAPI dependencies for authentication, authorization, and context."""

from __future__ import annotations

import asyncio
import logging
import time
from functools import lru_cache
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from app.common.errors import QuestError
from app.core.config import get_settings
from app.db.supabase import get_supabase
from app.features.users.repository import user_repository


logger = logging.getLogger("auth.deps")
security = HTTPBearer(auto_error=True)


class CurrentUser(BaseModel):
    """Minimal user identity shared across endpoints."""
    id: str
    email: Optional[str] = None
    role: str = "candidate"


@lru_cache()
def _admin_roles() -> set[str]:
    return {"admin", "superadmin"}


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """Resolve the caller from a Supabase access token.

    Steps:
      1. Validate bearer token via Supabase Auth
      2. Read the caller's role from the public users table (candidate if absent)
      3. Return typed minimal identity object
      4. Log request with X-Request-Id if provided
    """
    try:
        client = await get_supabase()
    except RuntimeError as exc:
        logger.error("Supabase client unavailable: %s", exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Failed to resolve user") from exc
    token = credentials.credentials
    try:
        # Clamp whoami to avoid 30s stalls
        t0 = time.perf_counter()
        auth_user = await asyncio.wait_for(client.auth.get_user(token), timeout=get_settings().auth_whoami_timeout)
        ms = int((time.perf_counter() - t0) * 1000)
        if ms > 50:
            logger.info("auth.get_user_ms=%d", ms)
    except Exception as exc:  # noqa: BLE001
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication credentials") from exc

    if not auth_user or not auth_user.user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication credentials")

    sup_user = auth_user.user
    email = sup_user.email or (sup_user.user_metadata or {}).get("email")

    try:
        profile = await user_repository.get_by_id(sup_user.id)
    except QuestError as exc:
        logger.error("Error resolving user profile: %s", exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Failed to resolve user") from exc
    role = ((profile or {}).get("role") or "candidate").lower()

    current = CurrentUser(id=str(sup_user.id), email=email, role=role)

    request_id = request.headers.get("X-Request-Id") or request.headers.get("X-Request-ID")
    if request_id:
        request.state.request_id = request_id
    logger.info(
        "auth_resolved user_id=%s role=%s request_id=%s path=%s",
        current.id,
        current.role,
        request_id,
        request.url.path,
    )
    return current


def require_role(*roles: str) -> Callable:
    """Factory returning dependency enforcing that user has one of the roles.

    Args:
      roles: Allowed roles (case-insensitive). Empty -> no restriction.
    """
    normalized = {r.lower() for r in roles if r}

    async def _checker(current: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not normalized:
            return current
        role_l = current.role.lower()
        if role_l in normalized or role_l in _admin_roles():
            return current
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")

    return _checker


def require_recruiter() -> Callable:
    return require_role("recruiter")
