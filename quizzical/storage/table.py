from sqlalchemy import CheckConstraint, false, ForeignKey, Index, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, MappedAsDataclass


class base(MappedAsDataclass, DeclarativeBase):
    pass


metadata = base.metadata


# Course, users & groups


class courses(base):
    __tablename__ = "courses"

    course_id: Mapped[int] = mapped_column(primary_key=True, init=False)
    name: Mapped[str]


class users(base):
    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(primary_key=True, init=False)
    email: Mapped[str] = mapped_column(unique=True)
    name: Mapped[str]
    deleted: Mapped[bool] = mapped_column(default=False, server_default=false())


class groups(base):
    __tablename__ = "groups"

    group_id: Mapped[int] = mapped_column(primary_key=True, init=False)
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.course_id", ondelete="CASCADE"), index=True)
    name: Mapped[str]


class capability_grants(base):
    __tablename__ = "capability_grants"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.course_id", ondelete="CASCADE"), primary_key=True)
    capability: Mapped[str] = mapped_column(primary_key=True)


# Quizzes & overrides


class quizzes(base):
    __tablename__ = "quizzes"

    quiz_id: Mapped[int] = mapped_column(primary_key=True, init=False)
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.course_id", ondelete="CASCADE"), index=True)
    name: Mapped[str]
    time_open: Mapped[int | None] = mapped_column(default=None)
    time_close: Mapped[int | None] = mapped_column(default=None)
    time_limit: Mapped[int | None] = mapped_column(default=None)
    attempts: Mapped[int | None] = mapped_column(default=None)
    password: Mapped[str | None] = mapped_column(default=None)


class quiz_overrides(base):
    __tablename__ = "quiz_overrides"
    __table_args__ = (
        CheckConstraint("(user_id IS NULL) <> (group_id IS NULL)", name="ck_quiz_overrides_one_scope"),
        # at most one override per (quiz, user) and per (quiz, group)
        Index(
            "ux_quiz_overrides_quiz_user",
            "quiz_id",
            "user_id",
            unique=True,
            postgresql_where=text("user_id IS NOT NULL"),
            sqlite_where=text("user_id IS NOT NULL"),
        ),
        Index(
            "ux_quiz_overrides_quiz_group",
            "quiz_id",
            "group_id",
            unique=True,
            postgresql_where=text("group_id IS NOT NULL"),
            sqlite_where=text("group_id IS NOT NULL"),
        ),
    )

    override_id: Mapped[int] = mapped_column(primary_key=True, init=False)
    quiz_id: Mapped[int] = mapped_column(ForeignKey("quizzes.quiz_id", ondelete="CASCADE"), index=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.user_id", ondelete="CASCADE"), default=None)
    group_id: Mapped[int | None] = mapped_column(ForeignKey("groups.group_id", ondelete="CASCADE"), default=None)
    time_open: Mapped[int | None] = mapped_column(default=None)
    time_close: Mapped[int | None] = mapped_column(default=None)
    time_limit: Mapped[int | None] = mapped_column(default=None)
    attempts: Mapped[int | None] = mapped_column(default=None)
    password: Mapped[str | None] = mapped_column(default=None)


# Calendar


class calendar_events(base):
    __tablename__ = "calendar_events"

    event_id: Mapped[int] = mapped_column(primary_key=True, init=False)
    quiz_id: Mapped[int] = mapped_column(ForeignKey("quizzes.quiz_id", ondelete="CASCADE"), index=True)
    event_type: Mapped[str]
    time_start: Mapped[int]
    name: Mapped[str]
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.user_id", ondelete="CASCADE"), default=None)
    group_id: Mapped[int | None] = mapped_column(ForeignKey("groups.group_id", ondelete="CASCADE"), default=None)
