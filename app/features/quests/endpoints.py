# Quests feature: recruiter-authored challenges
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from app.common.deps import CurrentUser, get_current_user, require_recruiter
from app.common.errors import QuestError, to_http
from .schemas import Quest, QuestCategory, QuestCreate, QuestDifficulty, QuestSearchFilters, QuestUpdate
from .service import quest_service

router = APIRouter(prefix="/quests", tags=["quests"])


@router.get("", response_model=List[Quest])
async def list_quests(
    created_by: Optional[str] = Query(default=None, description="Only quests authored by this user"),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        return await quest_service.get_quests(created_by)
    except QuestError as exc:
        raise to_http(exc)


@router.get("/search", response_model=List[Quest])
async def search_quests(
    category: Optional[QuestCategory] = None,
    difficulty: Optional[QuestDifficulty] = None,
    skills: Optional[List[str]] = Query(default=None),
    search: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
):
    filters = QuestSearchFilters(category=category, difficulty=difficulty, skills=skills or [], search=search)
    try:
        return await quest_service.search_quests(filters)
    except QuestError as exc:
        raise to_http(exc)


@router.get("/{quest_id}", response_model=Quest)
async def get_quest(quest_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return await quest_service.get_quest(quest_id)
    except QuestError as exc:
        raise to_http(exc)


@router.post("", response_model=Quest, status_code=status.HTTP_201_CREATED)
async def create_quest(payload: QuestCreate, current_user: CurrentUser = Depends(require_recruiter())):
    try:
        return await quest_service.create_quest(current_user.id, payload)
    except QuestError as exc:
        raise to_http(exc)


@router.patch("/{quest_id}", response_model=Quest)
async def update_quest(
    quest_id: str, payload: QuestUpdate, current_user: CurrentUser = Depends(require_recruiter())
):
    try:
        return await quest_service.update_quest(quest_id, current_user.id, payload)
    except QuestError as exc:
        raise to_http(exc)


@router.delete("/{quest_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quest(quest_id: str, current_user: CurrentUser = Depends(require_recruiter())):
    try:
        await quest_service.delete_quest(quest_id, current_user.id)
    except QuestError as exc:
        raise to_http(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
