"""create users, quests, quest_submissions and badges

Revision ID: c1d2e3f4a5b6
Revises:
Create Date: 2026-09-02 10:15:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "c1d2e3f4a5b6"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _has_table(name: str) -> bool:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    return name in inspector.get_table_names()


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    if not _has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", postgresql.UUID(as_uuid=False), primary_key=True, nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("role", sa.String(length=32), nullable=False, server_default="candidate"),
            sa.Column("first_name", sa.String(length=255), nullable=True),
            sa.Column("last_name", sa.String(length=255), nullable=True),
            sa.Column("company_name", sa.String(length=255), nullable=True),
            sa.Column("profile_image_url", sa.String(length=500), nullable=True),
            sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
            *_timestamps(),
            sa.CheckConstraint("role in ('candidate', 'recruiter', 'admin')", name="ck_users_role"),
        )
        op.create_index("ix_users_email", "users", ["email"], unique=True)
        op.create_index("ix_users_role", "users", ["role"], unique=False)

    if not _has_table("quests"):
        op.create_table(
            "quests",
            sa.Column("id", postgresql.UUID(as_uuid=False), primary_key=True, nullable=False,
                      server_default=sa.text("gen_random_uuid()")),
            sa.Column("created_by", postgresql.UUID(as_uuid=False),
                      sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
            sa.Column("title", sa.String(length=255), nullable=False),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("category", sa.String(length=32), nullable=False),
            sa.Column("difficulty", sa.String(length=32), nullable=False),
            sa.Column("estimated_time", sa.Integer(), nullable=True),
            sa.Column("instructions", postgresql.JSONB(astext_type=sa.Text()), nullable=False,
                      server_default=sa.text("'{}'::jsonb")),
            sa.Column("resources", postgresql.JSONB(astext_type=sa.Text()), nullable=False,
                      server_default=sa.text("'[]'::jsonb")),
            sa.Column("skills_assessed", postgresql.ARRAY(sa.Text()), nullable=True),
            sa.Column("verification_criteria", postgresql.JSONB(astext_type=sa.Text()), nullable=False,
                      server_default=sa.text("'{}'::jsonb")),
            sa.Column("passing_score", sa.Integer(), nullable=False, server_default="80"),
            sa.Column("badge_metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=False,
                      server_default=sa.text("'{}'::jsonb")),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
            sa.Column("total_attempts", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("success_rate", sa.Float(), nullable=False, server_default="0"),
            *_timestamps(),
            sa.CheckConstraint(
                "category in ('coding', 'design', 'writing', 'analysis', 'leadership', 'communication')",
                name="ck_quests_category",
            ),
            sa.CheckConstraint(
                "difficulty in ('beginner', 'intermediate', 'advanced', 'expert')",
                name="ck_quests_difficulty",
            ),
            sa.CheckConstraint("passing_score between 0 and 100", name="ck_quests_passing_score"),
            sa.CheckConstraint("total_attempts >= 0", name="ck_quests_total_attempts"),
            sa.CheckConstraint("success_rate between 0 and 1", name="ck_quests_success_rate"),
        )
        op.create_index("ix_quests_created_by", "quests", ["created_by"], unique=False)
        op.create_index("ix_quests_category", "quests", ["category"], unique=False)
        op.create_index("ix_quests_difficulty", "quests", ["difficulty"], unique=False)

    if not _has_table("quest_submissions"):
        op.create_table(
            "quest_submissions",
            sa.Column("id", postgresql.UUID(as_uuid=False), primary_key=True, nullable=False,
                      server_default=sa.text("gen_random_uuid()")),
            sa.Column("quest_id", postgresql.UUID(as_uuid=False),
                      sa.ForeignKey("quests.id", ondelete="CASCADE"), nullable=False),
            sa.Column("user_id", postgresql.UUID(as_uuid=False),
                      sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
            sa.Column("submission_content", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
            sa.Column("status", sa.String(length=32), nullable=False, server_default="submitted"),
            sa.Column("score", sa.Integer(), nullable=True),
            sa.Column("feedback", postgresql.JSONB(astext_type=sa.Text()), nullable=False,
                      server_default=sa.text("'{}'::jsonb")),
            sa.Column("time_spent", sa.Integer(), nullable=True),
            sa.Column("attempt_number", sa.Integer(), nullable=False, server_default="1"),
            sa.Column("submitted_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
            sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("reviewed_by", postgresql.UUID(as_uuid=False),
                      sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
            sa.CheckConstraint(
                "status in ('submitted', 'under_review', 'passed', 'failed', 'needs_revision')",
                name="ck_quest_submissions_status",
            ),
            sa.CheckConstraint("score is null or score between 0 and 100", name="ck_quest_submissions_score"),
            sa.CheckConstraint("attempt_number >= 1", name="ck_quest_submissions_attempt_number"),
        )
        op.create_index("ix_quest_submissions_status", "quest_submissions", ["status"], unique=False)
        op.create_index("ix_quest_submissions_user_id", "quest_submissions", ["user_id"], unique=False)
        op.create_unique_constraint(
            "uq_quest_submissions_attempt",
            "quest_submissions",
            ["quest_id", "user_id", "attempt_number"],
        )

    if not _has_table("badges"):
        op.create_table(
            "badges",
            sa.Column("id", postgresql.UUID(as_uuid=False), primary_key=True, nullable=False,
                      server_default=sa.text("gen_random_uuid()")),
            sa.Column("user_id", postgresql.UUID(as_uuid=False),
                      sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
            sa.Column("quest_id", postgresql.UUID(as_uuid=False),
                      sa.ForeignKey("quests.id", ondelete="SET NULL"), nullable=True),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("image_url", sa.String(length=500), nullable=True),
            sa.Column("skill", sa.String(length=255), nullable=False),
            sa.Column("level", sa.String(length=32), nullable=False, server_default="bronze"),
            sa.Column("rarity", sa.String(length=32), nullable=False, server_default="common"),
            sa.Column("blockchain_data", postgresql.JSONB(astext_type=sa.Text()), nullable=False,
                      server_default=sa.text("'{}'::jsonb")),
            sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
            sa.Column("is_displayed", sa.Boolean(), nullable=False, server_default=sa.text("true")),
            sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("earned_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
            sa.CheckConstraint("level in ('bronze', 'silver', 'gold', 'platinum', 'diamond')", name="ck_badges_level"),
            sa.CheckConstraint(
                "rarity in ('common', 'uncommon', 'rare', 'epic', 'legendary')", name="ck_badges_rarity"
            ),
        )
        op.create_index("ix_badges_user_id", "badges", ["user_id"], unique=False)


def downgrade() -> None:
    if _has_table("badges"):
        op.drop_index("ix_badges_user_id", table_name="badges")
        op.drop_table("badges")
    if _has_table("quest_submissions"):
        op.drop_constraint("uq_quest_submissions_attempt", "quest_submissions", type_="unique")
        op.drop_index("ix_quest_submissions_user_id", table_name="quest_submissions")
        op.drop_index("ix_quest_submissions_status", table_name="quest_submissions")
        op.drop_table("quest_submissions")
    if _has_table("quests"):
        op.drop_index("ix_quests_difficulty", table_name="quests")
        op.drop_index("ix_quests_category", table_name="quests")
        op.drop_index("ix_quests_created_by", table_name="quests")
        op.drop_table("quests")
    if _has_table("users"):
        op.drop_index("ix_users_role", table_name="users")
        op.drop_index("ix_users_email", table_name="users")
        op.drop_table("users")
