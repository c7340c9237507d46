from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, CheckConstraint, UniqueConstraint, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
import uuid

from app.db.base import Base


class QuestSubmission(Base):
    __tablename__ = "quest_submissions"

    id = Column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    quest_id = Column(UUID(as_uuid=False), ForeignKey("quests.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    submission_content = Column(JSONB, nullable=False)
    status = Column(String(32), nullable=False, server_default="submitted")
    score = Column(Integer, nullable=True)
    feedback = Column(JSONB, nullable=False, server_default="{}")
    time_spent = Column(Integer, nullable=True)  # seconds
    attempt_number = Column(Integer, nullable=False, server_default="1")
    submitted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(UUID(as_uuid=False), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (
        # Second writer of a racing submit is rejected here.
        UniqueConstraint("quest_id", "user_id", "attempt_number", name="uq_quest_submissions_attempt"),
        CheckConstraint(
            "status in ('submitted', 'under_review', 'passed', 'failed', 'needs_revision')",
            name="ck_quest_submissions_status",
        ),
        CheckConstraint("score is null or score between 0 and 100", name="ck_quest_submissions_score"),
        CheckConstraint("attempt_number >= 1", name="ck_quest_submissions_attempt_number"),
        Index("ix_quest_submissions_status", "status"),
        Index("ix_quest_submissions_user_id", "user_id"),
    )

    def __repr__(self):
        return f"<QuestSubmission(id={self.id}, quest_id={self.quest_id}, user_id={self.user_id}, attempt={self.attempt_number})>"
