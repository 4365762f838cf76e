from __future__ import annotations

import sqlalchemy as sqla

from quizzical.core import di
from quizzical.model import Course, CourseID

from . import Session
from .table import courses


def get(course_id: CourseID, *, session: Session = di.Provide["storage.persistent.session"]) -> Course | None:
    stmt = sqla.select(courses.__table__).where(courses.course_id == course_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Course.from_row(row) if row else None


def find(*, session: Session = di.Provide["storage.persistent.session"]) -> tuple[Course, ...]:
    stmt = sqla.select(courses.__table__).order_by(courses.course_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(Course.from_row(row) for row in rows)


def create(*, name: str, session: Session = di.Provide["storage.persistent.session"]) -> Course:
    result = session.execute(sqla.insert(courses.__table__).values(name=name))
    session.flush()
    return get(CourseID(result.inserted_primary_key[0]), session=session)  # type: ignore[return-value]
