# app/features/submissions/endpoints.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.common.deps import CurrentUser, get_current_user, require_recruiter
from app.common.errors import NotFoundError, QuestError, to_http
from app.features.quests.service import quest_service
from .schemas import Submission, SubmissionCreate, SubmissionEligibility
from .service import submissions_service

logger = logging.getLogger("submissions")

router = APIRouter(prefix="/submissions", tags=["submissions"])
quest_router = APIRouter(prefix="/quests", tags=["submissions"])


@quest_router.get("/{quest_id}/eligibility", response_model=SubmissionEligibility)
async def get_eligibility(quest_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        eligibility = await submissions_service.get_submission_eligibility(quest_id, current_user.id)
    except QuestError as exc:
        raise to_http(exc)
    if eligibility.latest_submission is not None:
        eligibility.latest_submission = eligibility.latest_submission.candidate_view()
    return eligibility


@quest_router.post(
    "/{quest_id}/submissions",
    response_model=Submission,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an attempt for a quest",
)
async def submit_quest(
    quest_id: str, payload: SubmissionCreate, current_user: CurrentUser = Depends(get_current_user)
):
    try:
        return await submissions_service.submit(quest_id, current_user.id, payload)
    except QuestError as exc:
        logger.info("submit_rejected quest_id=%s user_id=%s code=%s", quest_id, current_user.id, exc.error_code)
        raise to_http(exc)


@router.get("", response_model=List[Submission], summary="List the caller's own submissions")
async def list_my_submissions(
    quest_id: Optional[str] = Query(default=None),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        submissions = await submissions_service.list_submissions(quest_id=quest_id, user_id=current_user.id)
    except QuestError as exc:
        raise to_http(exc)
    return [s.candidate_view() for s in submissions]


@router.get("/review-queue", response_model=List[Submission], summary="Submissions to the recruiter's quests")
async def review_queue(
    quest_id: Optional[str] = Query(default=None),
    current_user: CurrentUser = Depends(require_recruiter()),
):
    try:
        return await submissions_service.list_for_recruiter(current_user.id, quest_id=quest_id)
    except QuestError as exc:
        raise to_http(exc)


@router.get("/{submission_id}", response_model=Submission)
async def get_submission(submission_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        submission = await submissions_service.get_submission(submission_id)
        if submission.user_id == current_user.id:
            return submission.candidate_view()
        quest = await quest_service.get_quest(submission.quest_id)
        if quest.created_by == current_user.id:
            return submission
        raise NotFoundError("Submission not found or no permission")
    except QuestError as exc:
        raise to_http(exc)
