import pytest

from app.features.badges.service import BadgesService
from app.features.reviews.schemas import ReviewRequest
from app.features.reviews.service import review_service
from app.features.submissions.schemas import SubmissionCreate, SubmissionStatus
from app.features.submissions.service import submissions_service
from conftest import CANDIDATE_ID, RECRUITER_ID, make_quest

pytestmark = pytest.mark.anyio("asyncio")


async def test_revision_then_pass_awards_one_badge(fake_db):
    quest = make_quest(fake_db, difficulty="advanced", passing_score=80)
    payload = SubmissionCreate(submission_content={"type": "url", "url": "https://github.com/candidate/api"})

    first = await submissions_service.submit(quest["id"], CANDIDATE_ID, payload)
    assert first.attempt_number == 1
    assert first.status == SubmissionStatus.submitted
    assert (await submissions_service.get_submission_eligibility(quest["id"], CANDIDATE_ID)).can_submit is False

    await review_service.review(
        first.id,
        RECRUITER_ID,
        ReviewRequest(status="needs_revision", feedback={"overall": "Add pagination", "improvements": ["paginate"]}),
    )
    eligibility = await submissions_service.get_submission_eligibility(quest["id"], CANDIDATE_ID)
    assert eligibility.can_submit is True
    assert eligibility.latest_submission.status == SubmissionStatus.needs_revision

    second = await submissions_service.submit(quest["id"], CANDIDATE_ID, payload)
    assert second.attempt_number == 2

    reviewed = await review_service.review(second.id, RECRUITER_ID, ReviewRequest(status="passed", score=88))
    assert reviewed.status == SubmissionStatus.passed

    badges = await BadgesService().get_user_badges(CANDIDATE_ID)
    assert len(badges) == 1
    assert badges[0].level.value == "gold"
    assert badges[0].rarity.value == "common"
    assert badges[0].quest_id == quest["id"]

    stored_quest = fake_db.tables["quests"][0]
    assert stored_quest["total_attempts"] == 2
    assert stored_quest["success_rate"] == 0.5

    eligibility = await submissions_service.get_submission_eligibility(quest["id"], CANDIDATE_ID)
    assert eligibility.can_submit is False


async def test_badge_display_is_owner_controlled(fake_db):
    from app.common.errors import NotFoundError
    from app.features.badges.schemas import BadgeDisplayUpdate

    quest = make_quest(fake_db)
    service = BadgesService()
    badge = await service.award_badge(CANDIDATE_ID, quest["id"], 91)
    assert badge.level.value == "platinum"
    assert badge.rarity.value == "uncommon"
    assert badge.description == "Earned by completing REST API Design with a score of 91%"

    hidden = await service.update_display(badge.id, CANDIDATE_ID, BadgeDisplayUpdate(is_displayed=False, display_order=2))
    assert hidden.is_displayed is False
    assert hidden.display_order == 2

    with pytest.raises(NotFoundError):
        await service.update_display(badge.id, RECRUITER_ID, BadgeDisplayUpdate(is_displayed=True))


async def test_each_pass_awards_its_own_badge(fake_db):
    quest = make_quest(fake_db, skills_assessed=[])
    service = BadgesService()
    await service.award_badge(CANDIDATE_ID, quest["id"], 85)
    await service.award_badge(CANDIDATE_ID, quest["id"], 85)

    badges = await service.get_user_badges(CANDIDATE_ID)
    assert len(badges) == 2
    assert {b.skill for b in badges} == {"General"}
