from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from app.features.badges.repository import BadgeRepository, badge_repository
from app.features.quests.repository import QuestRepository, quest_repository
from app.features.quests.schemas import QuestCategory
from app.features.submissions.repository import SubmissionRepository, submission_repository
from app.features.submissions.schemas import SubmissionStatus
from .schemas import LeaderboardEntry, Timeframe

logger = logging.getLogger("leaderboard.service")


_DATETIME = TypeAdapter(datetime)


def _parse_datetime(value: Any) -> Optional[datetime]:
    # PostgREST trims trailing zeros from fractional seconds (".1234+00:00").
    if not value:
        return None
    try:
        parsed = _DATETIME.validate_python(value)
    except ValidationError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def timeframe_start(timeframe: Timeframe, now: datetime) -> Optional[datetime]:
    """Start of the calendar period (UTC) covered by ``timeframe``."""
    now = now.astimezone(timezone.utc)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if timeframe == Timeframe.this_month:
        return midnight.replace(day=1)
    if timeframe == Timeframe.this_week:
        return midnight - timedelta(days=midnight.weekday())
    return None


def display_name_for(user_id: str) -> str:
    return f"Candidate #{str(user_id)[-8:]}"


def build_leaderboard(
    passed_submissions: Iterable[Dict[str, Any]],
    badges: Iterable[Dict[str, Any]],
) -> List[LeaderboardEntry]:
    """Fold passed submissions and badges into ranked per-user entries.

    Ranked by total score (descending); ties fall back to badge count
    (descending) and then user id so the order is stable.
    """
    totals: Dict[str, Dict[str, int]] = {}
    for row in passed_submissions:
        user_id = str(row.get("user_id"))
        bucket = totals.setdefault(user_id, {"passed": 0, "score": 0, "badges": 0})
        bucket["passed"] += 1
        bucket["score"] += int(row.get("score") or 0)

    for row in badges:
        user_id = str(row.get("user_id"))
        # Badge holders without a passed submission in scope are not ranked.
        if user_id in totals:
            totals[user_id]["badges"] += 1

    ordered = sorted(totals.items(), key=lambda item: (-item[1]["score"], -item[1]["badges"], item[0]))
    return [
        LeaderboardEntry(
            rank=position,
            user_id=user_id,
            display_name=display_name_for(user_id),
            total_quests_passed=stats["passed"],
            total_score=stats["score"],
            average_score=stats["score"] / stats["passed"],
            badge_count=stats["badges"],
        )
        for position, (user_id, stats) in enumerate(ordered, start=1)
    ]


class LeaderboardService:
    """Recomputed on every call; nothing is materialised."""

    def __init__(
        self,
        submissions: Optional[SubmissionRepository] = None,
        badges: Optional[BadgeRepository] = None,
        quests: Optional[QuestRepository] = None,
    ):
        self.submissions = submissions or submission_repository
        self.badges = badges or badge_repository
        self.quests = quests or quest_repository
        self.log = logger

    async def get_leaderboard(
        self,
        timeframe: Timeframe = Timeframe.all_time,
        category: Optional[QuestCategory] = None,
        now: Optional[datetime] = None,
    ) -> List[LeaderboardEntry]:
        passed = await self.submissions.list_submissions(status=SubmissionStatus.passed.value)
        badges = await self.badges.list_all()

        if category is not None:
            quest_rows = await self.quests.list_quests(category=category.value)
            quest_ids = {str(row.get("id")) for row in quest_rows}
            passed = [row for row in passed if str(row.get("quest_id")) in quest_ids]
            badges = [row for row in badges if str(row.get("quest_id")) in quest_ids]

        start = timeframe_start(timeframe, now or datetime.now(timezone.utc))
        if start is not None:
            passed = [row for row in passed if _in_window(row.get("reviewed_at") or row.get("submitted_at"), start)]
            badges = [row for row in badges if _in_window(row.get("earned_at"), start)]

        entries = build_leaderboard(passed, badges)
        self.log.debug(
            "leaderboard_built timeframe=%s category=%s entries=%d",
            timeframe.value,
            category.value if category else None,
            len(entries),
        )
        return entries


def _in_window(value: Any, start: datetime) -> bool:
    moment = _parse_datetime(value)
    return moment is not None and moment >= start


leaderboard_service = LeaderboardService()

__all__ = ["leaderboard_service", "LeaderboardService", "build_leaderboard", "timeframe_start"]
