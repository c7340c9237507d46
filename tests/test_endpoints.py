import pytest
from fastapi.testclient import TestClient

from app.common.deps import CurrentUser, get_current_user
from app.main import app
from conftest import CANDIDATE_ID, RECRUITER_ID, make_quest, make_submission

recruiter = CurrentUser(id=RECRUITER_ID, email="hiring@acme.test", role="recruiter")
candidate = CurrentUser(id=CANDIDATE_ID, email="dev@example.test", role="candidate")


@pytest.fixture
def client(fake_db):
    yield TestClient(app)
    app.dependency_overrides.clear()


def login_as(user):
    app.dependency_overrides[get_current_user] = lambda: user


def test_healthz_is_public(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    body = resp.json()
    assert "database" in body["components"]
    assert resp.headers["X-Request-Id"]


def test_request_id_is_echoed(client):
    resp = client.get("/", headers={"X-Request-Id": "req-123"})
    assert resp.status_code == 200
    assert resp.headers["X-Request-Id"] == "req-123"


def test_protected_routes_need_a_token(client):
    resp = client.get("/quests")
    assert resp.status_code in (401, 403)


def test_candidate_cannot_create_quest(client):
    login_as(candidate)
    resp = client.post("/quests", json={"title": "x", "category": "coding", "difficulty": "beginner"})
    assert resp.status_code == 403


def test_recruiter_creates_and_lists_quest(client):
    login_as(recruiter)
    resp = client.post(
        "/quests",
        json={"title": "SQL tuning", "category": "analysis", "difficulty": "advanced", "skills_assessed": ["SQL"]},
    )
    assert resp.status_code == 201
    created = resp.json()
    assert created["created_by"] == RECRUITER_ID
    assert created["passing_score"] == 80

    login_as(candidate)
    listed = client.get("/quests").json()
    assert [q["id"] for q in listed] == [created["id"]]
    assert client.get(f"/quests/{created['id']}").status_code == 200


def test_submit_twice_reports_pending(client, fake_db):
    quest = make_quest(fake_db)
    login_as(candidate)
    body = {"submission_content": {"type": "code", "content": "SELECT 1;", "language": "sql"}, "time_spent": 90}

    first = client.post(f"/quests/{quest['id']}/submissions", json=body)
    assert first.status_code == 201
    assert first.json()["attempt_number"] == 1

    second = client.post(f"/quests/{quest['id']}/submissions", json=body)
    assert second.status_code == 409
    assert second.json()["detail"]["error_code"] == "E_SUBMISSION_PENDING"

    eligibility = client.get(f"/quests/{quest['id']}/eligibility").json()
    assert eligibility["has_prior_submission"] is True
    assert eligibility["can_submit"] is False


def test_submit_blank_content_is_rejected(client, fake_db):
    quest = make_quest(fake_db)
    login_as(candidate)
    resp = client.post(f"/quests/{quest['id']}/submissions", json={"submission_content": {"type": "text", "content": ""}})
    assert resp.status_code == 422


def test_missing_quest_is_404(client):
    login_as(candidate)
    resp = client.get("/quests/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["detail"]["error_code"] == "E_NOT_FOUND"


def test_review_below_passing_score(client, fake_db):
    quest = make_quest(fake_db, passing_score=80)
    sub = make_submission(fake_db, quest["id"])
    login_as(recruiter)

    resp = client.post(f"/submissions/{sub['id']}/review", json={"status": "passed", "score": 70})
    assert resp.status_code == 422
    assert resp.json()["detail"]["error_code"] == "E_SCORE_BELOW_THRESHOLD"


def test_candidate_cannot_review(client, fake_db):
    quest = make_quest(fake_db)
    sub = make_submission(fake_db, quest["id"])
    login_as(candidate)
    resp = client.post(f"/submissions/{sub['id']}/review", json={"status": "passed", "score": 99})
    assert resp.status_code == 403


def test_review_flow_over_http(client, fake_db):
    quest = make_quest(fake_db)
    sub = make_submission(fake_db, quest["id"])

    login_as(recruiter)
    queue = client.get("/submissions/review-queue").json()
    assert [s["id"] for s in queue] == [sub["id"]]

    resp = client.post(
        f"/submissions/{sub['id']}/review",
        json={
            "status": "passed",
            "score": 92,
            "feedback": {"overall": "Great", "recommendation": "hire", "private_notes": "fast track"},
        },
    )
    assert resp.status_code == 200
    assert resp.json()["feedback"]["private_notes"] == "fast track"

    again = client.post(f"/submissions/{sub['id']}/review", json={"status": "failed", "score": 10})
    assert again.status_code == 409
    assert again.json()["detail"]["error_code"] == "E_ALREADY_REVIEWED"

    login_as(candidate)
    mine = client.get(f"/submissions/{sub['id']}").json()
    assert mine["status"] == "passed"
    assert mine["feedback"]["overall"] == "Great"
    assert mine["feedback"]["private_notes"] is None

    badges = client.get("/badges/me").json()
    assert len(badges) == 1
    assert badges[0]["level"] == "platinum"

    board = client.get("/leaderboard").json()
    assert board[0]["user_id"] == CANDIDATE_ID
    assert board[0]["badge_count"] == 1
    assert board[0]["display_name"] == "Candidate #aaaaaaaa"


def test_hidden_badges_not_shown_to_others(client, fake_db):
    quest = make_quest(fake_db)
    fake_db.seed(
        "badges",
        {
            "user_id": CANDIDATE_ID,
            "quest_id": quest["id"],
            "name": "REST API Design gold",
            "skill": "API Design",
            "level": "gold",
            "rarity": "common",
            "is_displayed": False,
            "earned_at": "2026-09-03T10:00:00+00:00",
        },
    )
    login_as(recruiter)
    assert client.get(f"/badges/users/{CANDIDATE_ID}").json() == []
    login_as(candidate)
    assert len(client.get(f"/badges/users/{CANDIDATE_ID}").json()) == 1


def test_other_user_cannot_read_submission(client, fake_db):
    quest = make_quest(fake_db)
    sub = make_submission(fake_db, quest["id"])
    login_as(CurrentUser(id="55555555-5555-5555-5555-555555555555", role="candidate"))
    assert client.get(f"/submissions/{sub['id']}").status_code == 404


def test_store_outage_maps_to_503(client, fake_db):
    fake_db.break_table("quests")
    login_as(candidate)
    resp = client.get("/quests")
    assert resp.status_code == 503
    assert resp.json()["detail"]["error_code"] == "E_STORE_UNAVAILABLE"


def test_leaderboard_rejects_unknown_timeframe(client):
    login_as(candidate)
    assert client.get("/leaderboard", params={"timeframe": "this-year"}).status_code == 422
    assert client.get("/leaderboard", params={"timeframe": "this-week"}).status_code == 200


def test_leaderboard_category_overall_means_unfiltered(client, fake_db):
    coding = make_quest(fake_db, category="coding")
    design = make_quest(fake_db, category="design", title="Mockup")
    make_submission(fake_db, coding["id"], user_id="coder", status="passed", score=90)
    make_submission(fake_db, design["id"], user_id="designer", status="passed", score=95)
    login_as(candidate)

    overall = client.get("/leaderboard", params={"category": "overall"})
    assert overall.status_code == 200
    assert [e["user_id"] for e in overall.json()] == ["designer", "coder"]

    coding_only = client.get("/leaderboard", params={"category": "coding"}).json()
    assert [e["user_id"] for e in coding_only] == ["coder"]

    assert client.get("/leaderboard", params={"category": "cooking"}).status_code == 422
