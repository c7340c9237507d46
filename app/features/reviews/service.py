from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from app.common.errors import AlreadyReviewedError, NotFoundError, PersistenceError, ScoreBelowThresholdError
from app.core.config import Settings, get_settings
from app.features.badges.service import BadgesService, badges_service
from app.features.quests.service import QuestService, quest_service
from app.features.submissions.repository import SubmissionRepository, submission_repository
from app.features.submissions.schemas import FINAL_STATUSES, Submission, SubmissionStatus
from .schemas import ReviewRequest

logger = logging.getLogger("reviews.service")


class ReviewService:
    """Apply a recruiter's verdict to a submission and issue badges.

    Two thresholds apply to a pass: the quest's own ``passing_score`` gates the
    verdict, and the platform-wide ``badge_award_min_score`` gates the badge.
    The verdict is written only while the submission is still pending, so
    concurrent reviews of one submission settle on a single verdict. The
    submission update and the badge insert are independent writes.
    """

    def __init__(
        self,
        submissions: Optional[SubmissionRepository] = None,
        quests: Optional[QuestService] = None,
        badges: Optional[BadgesService] = None,
        settings: Optional[Settings] = None,
    ):
        self.submissions = submissions or submission_repository
        self.quests = quests or quest_service
        self.badges = badges or badges_service
        self.settings = settings or get_settings()
        self.log = logger

    async def review(self, submission_id: str, reviewer_id: str, request: ReviewRequest) -> Submission:
        row = await self.submissions.get(submission_id)
        if not row:
            raise NotFoundError("Submission not found or no permission")
        submission = Submission.model_validate(row)

        try:
            quest = await self.quests.get_quest(submission.quest_id)
        except NotFoundError:
            raise NotFoundError("Submission not found or no permission") from None
        if str(quest.created_by) != str(reviewer_id):
            raise NotFoundError("Submission not found or no permission")

        if submission.status in FINAL_STATUSES:
            raise AlreadyReviewedError()

        passed = request.status == SubmissionStatus.passed
        if passed and (request.score is None or request.score < quest.passing_score):
            raise ScoreBelowThresholdError(request.score, quest.passing_score)

        updated_row = await self.submissions.update_pending(
            submission_id,
            {
                "status": request.status.value,
                "score": request.score,
                "feedback": request.feedback.model_dump(mode="json") if request.feedback else {},
                "reviewed_at": datetime.now(timezone.utc).isoformat(),
                "reviewed_by": reviewer_id,
            },
        )
        if not updated_row:
            # A concurrent review recorded its verdict first.
            self.log.info("review_lost_race submission_id=%s reviewer_id=%s", submission_id, reviewer_id)
            raise AlreadyReviewedError()
        updated = Submission.model_validate(updated_row)
        self.log.info(
            "submission_reviewed submission_id=%s reviewer_id=%s status=%s score=%s",
            submission_id,
            reviewer_id,
            request.status.value,
            request.score,
        )

        try:
            await self.quests.recompute_quest_stats(quest.id)
        except PersistenceError as exc:
            self.log.error("quest_stats_update_failed quest_id=%s error=%s", quest.id, exc)

        if passed and request.score >= self.settings.badge_award_min_score:
            try:
                await self.badges.award_badge(updated.user_id, quest.id, request.score)
            except Exception:
                # The review stays applied; there is no compensating write.
                self.log.exception("badge_award_failed submission_id=%s user_id=%s", submission_id, updated.user_id)
                raise
        return updated


review_service = ReviewService()

__all__ = ["review_service", "ReviewService"]
