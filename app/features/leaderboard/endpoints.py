from typing import List, Optional

from fastapi import APIRouter, Depends

from app.common.deps import CurrentUser, get_current_user
from app.common.errors import QuestError, to_http
from .schemas import LeaderboardCategory, LeaderboardEntry, Timeframe
from .service import leaderboard_service

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    timeframe: Timeframe = Timeframe.all_time,
    category: Optional[LeaderboardCategory] = None,
    current_user: CurrentUser = Depends(get_current_user),
):
    quest_category = category.quest_category() if category else None
    try:
        return await leaderboard_service.get_leaderboard(timeframe=timeframe, category=quest_category)
    except QuestError as exc:
        raise to_http(exc)
