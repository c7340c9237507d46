import pytest

from app.common.errors import (
    AlreadyPassedError,
    AlreadyPendingError,
    ConflictError,
    NotFoundError,
    PersistenceError,
    QuestInactiveError,
)
from app.core.config import Settings
from app.features.submissions.schemas import SubmissionCreate, SubmissionStatus
from app.features.submissions.service import SubmissionsService
from conftest import CANDIDATE_ID, OTHER_CANDIDATE_ID, RECRUITER_ID, make_quest, make_submission

pytestmark = pytest.mark.anyio("asyncio")


def _payload(text="my answer"):
    return SubmissionCreate(submission_content={"type": "text", "content": text}, time_spent=300)


def _service(fail_open=True):
    settings = Settings()
    settings.eligibility_fail_open = fail_open
    return SubmissionsService(settings=settings)


async def test_eligibility_without_prior_submission(fake_db):
    quest = make_quest(fake_db)
    result = await _service().get_submission_eligibility(quest["id"], CANDIDATE_ID)
    assert result.has_prior_submission is False
    assert result.latest_submission is None
    assert result.can_submit is True


@pytest.mark.parametrize(
    "status, can_submit",
    [
        ("submitted", False),
        ("under_review", False),
        ("passed", False),
        ("failed", True),
        ("needs_revision", True),
    ],
)
async def test_eligibility_follows_latest_status(fake_db, status, can_submit):
    quest = make_quest(fake_db)
    make_submission(fake_db, quest["id"], attempt_number=1, status="failed")
    make_submission(fake_db, quest["id"], attempt_number=2, status=status)

    result = await _service().get_submission_eligibility(quest["id"], CANDIDATE_ID)
    assert result.has_prior_submission is True
    assert result.latest_submission.attempt_number == 2
    assert result.can_submit is can_submit


async def test_first_submit_creates_attempt_one_and_refreshes_stats(fake_db):
    quest = make_quest(fake_db)
    sub = await _service().submit(quest["id"], CANDIDATE_ID, _payload())

    assert sub.attempt_number == 1
    assert sub.status == SubmissionStatus.submitted
    assert sub.time_spent == 300
    assert fake_db.tables["quests"][0]["total_attempts"] == 1
    assert fake_db.tables["quests"][0]["success_rate"] == 0.0


async def test_submit_while_pending_is_rejected(fake_db):
    quest = make_quest(fake_db)
    make_submission(fake_db, quest["id"], status="under_review")
    with pytest.raises(AlreadyPendingError):
        await _service().submit(quest["id"], CANDIDATE_ID, _payload())
    assert len(fake_db.tables["quest_submissions"]) == 1


async def test_submit_after_pass_is_rejected(fake_db):
    quest = make_quest(fake_db)
    make_submission(fake_db, quest["id"], status="passed", score=90)
    with pytest.raises(AlreadyPassedError):
        await _service().submit(quest["id"], CANDIDATE_ID, _payload())


async def test_resubmit_after_revision_increments_attempt(fake_db):
    quest = make_quest(fake_db)
    make_submission(fake_db, quest["id"], attempt_number=1, status="failed", score=40)
    make_submission(fake_db, quest["id"], attempt_number=2, status="needs_revision")

    sub = await _service().submit(quest["id"], CANDIDATE_ID, _payload("second try"))
    assert sub.attempt_number == 3
    attempts = sorted(r["attempt_number"] for r in fake_db.tables["quest_submissions"])
    assert attempts == [1, 2, 3]


async def test_attempts_are_counted_per_user(fake_db):
    quest = make_quest(fake_db)
    make_submission(fake_db, quest["id"], user_id=OTHER_CANDIDATE_ID, attempt_number=4, status="failed")
    sub = await _service().submit(quest["id"], CANDIDATE_ID, _payload())
    assert sub.attempt_number == 1


async def test_submit_to_inactive_quest(fake_db):
    quest = make_quest(fake_db, is_active=False)
    with pytest.raises(QuestInactiveError):
        await _service().submit(quest["id"], CANDIDATE_ID, _payload())


async def test_submit_to_missing_quest(fake_db):
    with pytest.raises(NotFoundError):
        await _service().submit("no-such-quest", CANDIDATE_ID, _payload())


async def test_eligibility_fails_open_on_read_error(fake_db):
    quest = make_quest(fake_db)
    make_submission(fake_db, quest["id"], status="submitted")
    fake_db.break_table("quest_submissions", ops={"select"})

    result = await _service(fail_open=True).get_submission_eligibility(quest["id"], CANDIDATE_ID)
    assert result.can_submit is True
    assert result.has_prior_submission is False


async def test_eligibility_fails_closed_when_configured(fake_db):
    quest = make_quest(fake_db)
    fake_db.break_table("quest_submissions", ops={"select"})
    with pytest.raises(PersistenceError):
        await _service(fail_open=False).get_submission_eligibility(quest["id"], CANDIDATE_ID)


async def test_racing_submit_hits_unique_attempt(fake_db, monkeypatch):
    quest = make_quest(fake_db)
    make_submission(fake_db, quest["id"], attempt_number=1, status="submitted")
    service = _service()

    async def _stale_latest(quest_id, user_id):
        return None

    # Simulates a second writer whose eligibility read predates the first insert.
    monkeypatch.setattr(service.repo, "get_latest", _stale_latest)
    with pytest.raises(ConflictError):
        await service.submit(quest["id"], CANDIDATE_ID, _payload())
    assert len(fake_db.tables["quest_submissions"]) == 1


async def test_stats_failure_does_not_undo_submission(fake_db, monkeypatch):
    quest = make_quest(fake_db)
    service = _service()

    async def _broken_stats(quest_id):
        raise PersistenceError("stats down")

    monkeypatch.setattr(service.quests, "recompute_quest_stats", _broken_stats)
    sub = await service.submit(quest["id"], CANDIDATE_ID, _payload())
    assert sub.attempt_number == 1
    assert len(fake_db.tables["quest_submissions"]) == 1


async def test_review_queue_only_lists_own_quests(fake_db):
    mine = make_quest(fake_db)
    theirs = make_quest(fake_db, created_by="44444444-4444-4444-4444-444444444444", title="Other")
    make_submission(fake_db, mine["id"])
    make_submission(fake_db, theirs["id"])

    queue = await _service().list_for_recruiter(RECRUITER_ID)
    assert [s.quest_id for s in queue] == [mine["id"]]
