import sys
import os

import pytest

# Ensure repo root on sys.path for imports like `app...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
TESTS = os.path.dirname(__file__)
if TESTS not in sys.path:
    sys.path.insert(0, TESTS)

from fakesupabase import FakeSupabase  # noqa: E402

RECRUITER_ID = "11111111-1111-1111-1111-111111111111"
CANDIDATE_ID = "22222222-2222-2222-2222-2222aaaaaaaa"
OTHER_CANDIDATE_ID = "33333333-3333-3333-3333-3333bbbbbbbb"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_db(monkeypatch):
    """Route every repository singleton to a fresh in-memory store."""
    db = FakeSupabase()

    async def _fake_get_supabase():
        return db

    monkeypatch.setattr("app.db.repository.get_supabase", _fake_get_supabase)
    return db


def make_quest(db, **overrides):
    row = {
        "created_by": RECRUITER_ID,
        "title": "REST API Design",
        "description": "Design a small REST API",
        "category": "coding",
        "difficulty": "intermediate",
        "estimated_time": 60,
        "instructions": {},
        "resources": [],
        "skills_assessed": ["API Design", "Python"],
        "verification_criteria": {},
        "passing_score": 80,
        "badge_metadata": {},
        "is_active": True,
        "total_attempts": 0,
        "success_rate": 0.0,
        "created_at": "2026-09-01T09:00:00+00:00",
        "updated_at": "2026-09-01T09:00:00+00:00",
    }
    row.update(overrides)
    return db.seed("quests", row)


def make_submission(db, quest_id, user_id=CANDIDATE_ID, **overrides):
    row = {
        "quest_id": quest_id,
        "user_id": user_id,
        "attempt_number": 1,
        "submission_content": {"type": "text", "content": "my answer"},
        "status": "submitted",
        "score": None,
        "feedback": {},
        "time_spent": 120,
        "submitted_at": "2026-09-02T10:00:00+00:00",
        "reviewed_at": None,
        "reviewed_by": None,
    }
    row.update(overrides)
    return db.seed("quest_submissions", row)


def make_badge(db, user_id, quest_id, **overrides):
    row = {
        "user_id": user_id,
        "quest_id": quest_id,
        "name": "REST API Design gold",
        "description": None,
        "skill": "API Design",
        "level": "gold",
        "rarity": "common",
        "blockchain_data": {},
        "is_verified": True,
        "is_displayed": True,
        "display_order": 0,
        "earned_at": "2026-09-03T10:00:00+00:00",
    }
    row.update(overrides)
    return db.seed("badges", row)
