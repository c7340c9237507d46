#Badges feature - earned credentials for passed quests
from typing import List

from fastapi import APIRouter, Depends

from app.common.deps import CurrentUser, get_current_user
from app.common.errors import QuestError, to_http
from .schemas import Badge, BadgeDisplayUpdate
from .service import badges_service

router = APIRouter(prefix="/badges", tags=["badges"])


#All badges the caller has earned, newest first
@router.get("/me", response_model=List[Badge])
async def get_my_badges(current_user: CurrentUser = Depends(get_current_user)):
    try:
        return await badges_service.get_user_badges(current_user.id)
    except QuestError as exc:
        raise to_http(exc)


#Another user's showcase: hidden badges are left out
@router.get("/users/{user_id}", response_model=List[Badge])
async def get_user_badges(user_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        badges = await badges_service.get_user_badges(user_id)
    except QuestError as exc:
        raise to_http(exc)
    if user_id == current_user.id:
        return badges
    return [b for b in badges if b.is_displayed]


@router.patch("/{badge_id}/display", response_model=Badge)
async def update_badge_display(
    badge_id: str, req: BadgeDisplayUpdate, current_user: CurrentUser = Depends(get_current_user)
):
    try:
        return await badges_service.update_display(badge_id, current_user.id, req)
    except QuestError as exc:
        raise to_http(exc)
