from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from quizzical.core import di
from quizzical.lib import NotSet
from quizzical.model import CourseID, Quiz, QuizID

from . import Session
from .table import quizzes


def get(quiz_id: QuizID, *, session: Session = di.Provide["storage.persistent.session"]) -> Quiz | None:
    stmt = sqla.select(quizzes.__table__).where(quizzes.quiz_id == quiz_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Quiz.from_row(row) if row else None


def find(
    *,
    course_id: CourseID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Quiz, ...]:
    stmt = sqla.select(quizzes.__table__).order_by(quizzes.quiz_id)
    if course_id is not None:
        stmt = stmt.where(quizzes.course_id == course_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(Quiz.from_row(row) for row in rows)


def create(
    *,
    course_id: CourseID,
    name: str,
    time_open: int | None = None,
    time_close: int | None = None,
    time_limit: int | None = None,
    attempts: int | None = None,
    password: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> Quiz:
    stmt = sqla.insert(quizzes.__table__).values(
        course_id=course_id,
        name=name,
        time_open=time_open,
        time_close=time_close,
        time_limit=time_limit,
        attempts=attempts,
        password=password,
    )
    result = session.execute(stmt)
    session.flush()
    return get(QuizID(result.inserted_primary_key[0]), session=session)  # type: ignore[return-value]


def update(
    quiz_id: QuizID,
    *,
    name: str | NotSet = NotSet(),
    time_open: int | None | NotSet = NotSet(),
    time_close: int | None | NotSet = NotSet(),
    time_limit: int | None | NotSet = NotSet(),
    attempts: int | None | NotSet = NotSet(),
    password: str | None | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
) -> Quiz:
    """Update a quiz's settings.

    Uses NotSet sentinel so that None can clear a setting.

    Raises:
        KeyError: If quiz_id does not correspond to a quiz
    """
    given = {
        "name": name,
        "time_open": time_open,
        "time_close": time_close,
        "time_limit": time_limit,
        "attempts": attempts,
        "password": password,
    }
    values: dict[str, t.Any] = {k: v for k, v in given.items() if not isinstance(v, NotSet)}

    stmt = sqla.update(quizzes).where(quizzes.quiz_id == quiz_id).values(**(values or {"quiz_id": quiz_id}))
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Quiz {quiz_id} not found")

    session.flush()
    return get(quiz_id, session=session)  # type: ignore[return-value]
