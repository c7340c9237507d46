"""FastAPI Heartbeat. Lean."""

from __future__ import annotations

import os
import time
import uuid
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.common.deps import get_current_user
from app.features.quests.endpoints import router as quests_router
from app.features.submissions.endpoints import router as submissions_router, quest_router as quest_submissions_router
from app.features.reviews.endpoints import router as reviews_router
from app.features.badges.endpoints import router as badges_router
from app.features.leaderboard.endpoints import router as leaderboard_router

_settings = get_settings()
logging.basicConfig(
    level=getattr(logging, _settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title=_settings.app_name)
_START_TIME = datetime.now(timezone.utc)


# ------------------------
# CORS Setup
# ------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------
# Custom Middlewares
# ------------------------
@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    incoming = request.headers.get("X-Request-Id") or request.headers.get("X-Request-ID")
    req_id = incoming or str(uuid.uuid4())
    request.state.request_id = req_id
    logger = logging.getLogger("request")
    logger.info("request.start", extra={"request_id": req_id, "path": request.url.path, "method": request.method})
    response = await call_next(request)
    response.headers["X-Request-Id"] = req_id
    logger.info("request.end", extra={"request_id": req_id, "path": request.url.path, "status_code": response.status_code})
    return response


@app.middleware("http")
async def timing_middleware(request: Request, call_next):
    t0 = time.perf_counter()
    resp = await call_next(request)
    dt = int((time.perf_counter() - t0) * 1000)
    logging.getLogger("timing").info("%s %s %dms %s", request.method, request.url.path, dt, resp.status_code)
    return resp


# ------------------------
# Routers
# ------------------------
protected_deps = [Depends(get_current_user)]

app.include_router(quests_router, dependencies=protected_deps)
app.include_router(quest_submissions_router, dependencies=protected_deps)
app.include_router(submissions_router, dependencies=protected_deps)
app.include_router(reviews_router, dependencies=protected_deps)
app.include_router(badges_router, dependencies=protected_deps)
app.include_router(leaderboard_router, dependencies=protected_deps)


# ------------------------
# Meta endpoints
# ------------------------
@app.get("/", tags=["meta"], summary="API Root")
async def root():
    return {
        "name": _settings.app_name,
        "status": "ok",
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/healthz",
    }


@app.get("/healthz", tags=["meta"], summary="Liveness / readiness probe")
async def healthz() -> Dict[str, Any]:
    from app.db.session import get_engine

    now = datetime.now(timezone.utc)
    uptime_seconds = (now - _START_TIME).total_seconds()
    db_status: str = "unknown"
    db_latency_ms: float | None = None

    engine = get_engine()
    if engine is None:
        db_status = "missing-config"
    else:
        try:
            start = time.perf_counter()
            with engine.connect().execution_options(isolation_level="AUTOCOMMIT") as conn:
                conn.execute(text("SELECT 1"))
            db_latency_ms = round((time.perf_counter() - start) * 1000, 2)
            db_status = "ok"
        except SQLAlchemyError as e:
            db_status = f"error:{type(e).__name__}"

    tags = sorted({t for r in app.routes for t in getattr(r, "tags", [])})

    return {
        "status": "ok" if db_status in ("ok", "missing-config") else "degraded",
        "time_utc": now.isoformat(),
        "uptime_seconds": round(uptime_seconds, 2),
        "version": os.getenv("APP_VERSION", "dev"),
        "environment": "debug" if _settings.debug else "prod",
        "components": {
            "database": (
                {"status": db_status, "latency_ms": db_latency_ms}
                if db_status == "ok"
                else {"status": db_status}
            ),
            "supabase": "configured" if _settings.supabase_url else "missing-config",
        },
        "counts": {"routes": len(app.routes)},
        "tags": tags,
    }
