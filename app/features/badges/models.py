from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, CheckConstraint, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
import uuid

from app.db.base import Base


class Badge(Base):
    __tablename__ = "badges"

    id = Column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    quest_id = Column(UUID(as_uuid=False), ForeignKey("quests.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    skill = Column(String(255), nullable=False)
    level = Column(String(32), nullable=False, server_default="bronze")
    rarity = Column(String(32), nullable=False, server_default="common")
    blockchain_data = Column(JSONB, nullable=False, server_default="{}")
    is_verified = Column(Boolean, nullable=False, server_default="false")
    is_displayed = Column(Boolean, nullable=False, server_default="true")
    display_order = Column(Integer, nullable=False, server_default="0")
    earned_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # No uniqueness on (user_id, quest_id): each passed attempt earns its own badge.
    __table_args__ = (
        CheckConstraint("level in ('bronze', 'silver', 'gold', 'platinum', 'diamond')", name="ck_badges_level"),
        CheckConstraint(
            "rarity in ('common', 'uncommon', 'rare', 'epic', 'legendary')", name="ck_badges_rarity"
        ),
        Index("ix_badges_user_id", "user_id"),
    )
