from sqlalchemy import Column, String, Text, Integer, Float, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID, JSONB, ARRAY
from sqlalchemy.sql import func
import uuid

from app.db.base import Base


class Quest(Base):
    __tablename__ = "quests"

    id = Column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    created_by = Column(UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(32), nullable=False, index=True)
    difficulty = Column(String(32), nullable=False, index=True)
    estimated_time = Column(Integer, nullable=True)  # minutes
    instructions = Column(JSONB, nullable=False, server_default="{}")
    resources = Column(JSONB, nullable=False, server_default="[]")
    skills_assessed = Column(ARRAY(Text), nullable=True)
    verification_criteria = Column(JSONB, nullable=False, server_default="{}")
    passing_score = Column(Integer, nullable=False, server_default="80")
    badge_metadata = Column(JSONB, nullable=False, server_default="{}")
    is_active = Column(Boolean, nullable=False, server_default="true")
    total_attempts = Column(Integer, nullable=False, server_default="0")
    success_rate = Column(Float, nullable=False, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "category in ('coding', 'design', 'writing', 'analysis', 'leadership', 'communication')",
            name="ck_quests_category",
        ),
        CheckConstraint(
            "difficulty in ('beginner', 'intermediate', 'advanced', 'expert')",
            name="ck_quests_difficulty",
        ),
        CheckConstraint("passing_score between 0 and 100", name="ck_quests_passing_score"),
        CheckConstraint("total_attempts >= 0", name="ck_quests_total_attempts"),
        CheckConstraint("success_rate between 0 and 1", name="ck_quests_success_rate"),
    )

    def __repr__(self) -> str:
        return f"<Quest id={self.id} title={self.title!r} difficulty={self.difficulty}>"
