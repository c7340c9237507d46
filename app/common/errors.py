"""Domain error taxonomy for the quest lifecycle.

Every error carries the HTTP status and machine readable ``error_code`` that
the endpoints surface as ``{"error_code": ..., "message": ...}``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, status


class QuestError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "E_INVALID_INPUT"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.__class__.__doc__ or self.error_code)


class NotFoundError(QuestError):
    """Resource not found or no permission."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "E_NOT_FOUND"


class AlreadyPendingError(QuestError):
    """A previous submission for this quest is still awaiting review."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "E_SUBMISSION_PENDING"


class AlreadyPassedError(QuestError):
    """This quest has already been passed."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "E_QUEST_ALREADY_PASSED"


class QuestInactiveError(QuestError):
    """This quest is not accepting submissions."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "E_QUEST_INACTIVE"


class AlreadyReviewedError(QuestError):
    """This submission already has a final verdict."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "E_ALREADY_REVIEWED"


class ScoreBelowThresholdError(QuestError):
    status_code = 422
    error_code = "E_SCORE_BELOW_THRESHOLD"

    def __init__(self, score: Optional[int], passing_score: int) -> None:
        self.score = score
        self.passing_score = passing_score
        super().__init__(f"Score must be at least {passing_score}% to pass (got {score})")


class ConflictError(QuestError):
    """The store rejected a conflicting write."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "E_CONFLICT"


class PersistenceError(QuestError):
    """The data store is unavailable."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "E_STORE_UNAVAILABLE"


def to_http(exc: QuestError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail={"error_code": exc.error_code, "message": str(exc)})


__all__ = [
    "QuestError",
    "NotFoundError",
    "AlreadyPendingError",
    "AlreadyPassedError",
    "QuestInactiveError",
    "AlreadyReviewedError",
    "ScoreBelowThresholdError",
    "ConflictError",
    "PersistenceError",
    "to_http",
]
