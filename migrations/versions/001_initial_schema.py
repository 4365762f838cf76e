"""Initial schema for quiz overrides

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""

import typing as t

import sqlalchemy as sa
from alembic import op
from sqlalchemy.schema import CheckConstraint, Column, ForeignKey
from sqlalchemy.types import Boolean, Integer, String

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | t.Sequence[str] | None = None
depends_on: str | t.Sequence[str] | None = None


def upgrade() -> None:
    # Courses
    op.create_table(
        "courses",
        Column("course_id", Integer, primary_key=True),
        Column("name", String, nullable=False),
    )

    # Users
    op.create_table(
        "users",
        Column("user_id", Integer, primary_key=True),
        Column("email", String, unique=True, nullable=False),
        Column("name", String, nullable=False),
        Column("deleted", Boolean, server_default=sa.false(), nullable=False),
    )

    # Groups
    op.create_table(
        "groups",
        Column("group_id", Integer, primary_key=True),
        Column("course_id", Integer, ForeignKey("courses.course_id", ondelete="CASCADE"), nullable=False),
        Column("name", String, nullable=False),
    )

    # Capability grants
    op.create_table(
        "capability_grants",
        Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
        Column("course_id", Integer, ForeignKey("courses.course_id", ondelete="CASCADE"), primary_key=True),
        Column("capability", String, primary_key=True),
    )

    # Quizzes
    op.create_table(
        "quizzes",
        Column("quiz_id", Integer, primary_key=True),
        Column("course_id", Integer, ForeignKey("courses.course_id", ondelete="CASCADE"), nullable=False),
        Column("name", String, nullable=False),
        Column("time_open", Integer, nullable=True),
        Column("time_close", Integer, nullable=True),
        Column("time_limit", Integer, nullable=True),
        Column("attempts", Integer, nullable=True),
        Column("password", String, nullable=True),
    )

    # Quiz overrides
    op.create_table(
        "quiz_overrides",
        Column("override_id", Integer, primary_key=True),
        Column("quiz_id", Integer, ForeignKey("quizzes.quiz_id", ondelete="CASCADE"), nullable=False),
        Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=True),
        Column("group_id", Integer, ForeignKey("groups.group_id", ondelete="CASCADE"), nullable=True),
        Column("time_open", Integer, nullable=True),
        Column("time_close", Integer, nullable=True),
        Column("time_limit", Integer, nullable=True),
        Column("attempts", Integer, nullable=True),
        Column("password", String, nullable=True),
        CheckConstraint("(user_id IS NULL) <> (group_id IS NULL)", name="ck_quiz_overrides_one_scope"),
    )

    # Calendar events
    op.create_table(
        "calendar_events",
        Column("event_id", Integer, primary_key=True),
        Column("quiz_id", Integer, ForeignKey("quizzes.quiz_id", ondelete="CASCADE"), nullable=False),
        Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=True),
        Column("group_id", Integer, ForeignKey("groups.group_id", ondelete="CASCADE"), nullable=True),
        Column("event_type", String, nullable=False),
        Column("time_start", Integer, nullable=False),
        Column("name", String, nullable=False),
    )

    # Indexes
    op.create_index("ix_groups_course_id", "groups", ["course_id"])
    op.create_index("ix_quizzes_course_id", "quizzes", ["course_id"])
    op.create_index("ix_quiz_overrides_quiz_id", "quiz_overrides", ["quiz_id"])
    op.create_index("ix_calendar_events_quiz_id", "calendar_events", ["quiz_id"])
    op.create_index(
        "ux_quiz_overrides_quiz_user",
        "quiz_overrides",
        ["quiz_id", "user_id"],
        unique=True,
        postgresql_where=sa.text("user_id IS NOT NULL"),
        sqlite_where=sa.text("user_id IS NOT NULL"),
    )
    op.create_index(
        "ux_quiz_overrides_quiz_group",
        "quiz_overrides",
        ["quiz_id", "group_id"],
        unique=True,
        postgresql_where=sa.text("group_id IS NOT NULL"),
        sqlite_where=sa.text("group_id IS NOT NULL"),
    )


def downgrade() -> None:
    # Drop indexes
    op.drop_index("ux_quiz_overrides_quiz_group")
    op.drop_index("ux_quiz_overrides_quiz_user")
    op.drop_index("ix_calendar_events_quiz_id")
    op.drop_index("ix_quiz_overrides_quiz_id")
    op.drop_index("ix_quizzes_course_id")
    op.drop_index("ix_groups_course_id")

    # Drop tables in reverse dependency order
    op.drop_table("calendar_events")
    op.drop_table("quiz_overrides")
    op.drop_table("quizzes")
    op.drop_table("capability_grants")
    op.drop_table("groups")
    op.drop_table("users")
    op.drop_table("courses")
