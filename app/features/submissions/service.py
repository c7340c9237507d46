from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from app.common.errors import (
    AlreadyPassedError,
    AlreadyPendingError,
    NotFoundError,
    PersistenceError,
    QuestInactiveError,
)
from app.core.config import Settings, get_settings
from app.features.quests.service import QuestService, quest_service
from .repository import SubmissionRepository, submission_repository
from .schemas import (
    PENDING_STATUSES,
    RESUBMITTABLE_STATUSES,
    Submission,
    SubmissionCreate,
    SubmissionEligibility,
    SubmissionStatus,
)

logger = logging.getLogger("submissions.service")


class SubmissionsService:
    """Gate and record quest attempts.

    Attempt numbers are assigned as ``latest + 1`` per (quest, user) pair. The
    eligibility read and the insert are separate round-trips; two racing
    submits are resolved by the store's unique (quest_id, user_id,
    attempt_number) constraint, surfacing as ``ConflictError``.
    """

    def __init__(
        self,
        repo: Optional[SubmissionRepository] = None,
        quests: Optional[QuestService] = None,
        settings: Optional[Settings] = None,
    ):
        self.repo = repo or submission_repository
        self.quests = quests or quest_service
        self.settings = settings or get_settings()
        self.log = logger

    async def get_submission_eligibility(self, quest_id: str, user_id: str) -> SubmissionEligibility:
        try:
            row = await self.repo.get_latest(quest_id, user_id)
        except PersistenceError as exc:
            if not self.settings.eligibility_fail_open:
                raise
            # Fail open: a flaky read must not block the candidate.
            self.log.warning("eligibility_read_failed quest_id=%s user_id=%s error=%s", quest_id, user_id, exc)
            return SubmissionEligibility(has_prior_submission=False, latest_submission=None, can_submit=True)

        if row is None:
            return SubmissionEligibility(has_prior_submission=False, latest_submission=None, can_submit=True)

        latest = Submission.model_validate(row)
        return SubmissionEligibility(
            has_prior_submission=True,
            latest_submission=latest,
            can_submit=latest.status in RESUBMITTABLE_STATUSES,
        )

    async def submit(self, quest_id: str, user_id: str, payload: SubmissionCreate) -> Submission:
        quest = await self.quests.get_quest(quest_id)
        if not quest.is_active:
            raise QuestInactiveError()

        eligibility = await self.get_submission_eligibility(quest_id, user_id)
        latest = eligibility.latest_submission
        if not eligibility.can_submit and latest is not None:
            if latest.status == SubmissionStatus.passed:
                raise AlreadyPassedError()
            if latest.status in PENDING_STATUSES:
                raise AlreadyPendingError()

        attempt_number = (latest.attempt_number if latest else 0) + 1
        row = await self.repo.insert(
            {
                "quest_id": quest_id,
                "user_id": user_id,
                "attempt_number": attempt_number,
                "submission_content": payload.submission_content.model_dump(mode="json"),
                "status": SubmissionStatus.submitted.value,
                "time_spent": payload.time_spent,
                "submitted_at": datetime.now(timezone.utc).isoformat(),
            }
        )
        submission = Submission.model_validate(row)
        self.log.info(
            "submission_created submission_id=%s quest_id=%s user_id=%s attempt=%d",
            submission.id,
            quest_id,
            user_id,
            attempt_number,
        )

        try:
            await self.quests.recompute_quest_stats(quest_id)
        except PersistenceError as exc:
            # Stats are rebuilt from scratch on the next recompute.
            self.log.error("quest_stats_update_failed quest_id=%s error=%s", quest_id, exc)
        return submission

    async def get_submission(self, submission_id: str) -> Submission:
        row = await self.repo.get(submission_id)
        if not row:
            raise NotFoundError("Submission not found or no permission")
        return Submission.model_validate(row)

    async def list_submissions(
        self, quest_id: Optional[str] = None, user_id: Optional[str] = None
    ) -> List[Submission]:
        rows = await self.repo.list_submissions(quest_id=quest_id, user_id=user_id)
        return [Submission.model_validate(row) for row in rows]

    async def list_for_recruiter(self, recruiter_id: str, quest_id: Optional[str] = None) -> List[Submission]:
        """Submissions to quests the recruiter created (their review queue)."""
        quests = await self.quests.get_quests(created_by=recruiter_id)
        quest_ids = [q.id for q in quests]
        if quest_id is not None:
            quest_ids = [qid for qid in quest_ids if qid == quest_id]
        if not quest_ids:
            return []
        rows = await self.repo.list_submissions(quest_ids=quest_ids)
        return [Submission.model_validate(row) for row in rows]


submissions_service = SubmissionsService()

__all__ = ["submissions_service", "SubmissionsService"]
