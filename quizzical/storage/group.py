from __future__ import annotations

import sqlalchemy as sqla

from quizzical.core import di
from quizzical.model import CourseID, Group, GroupID

from . import Session
from .table import groups


def get(group_id: GroupID, *, session: Session = di.Provide["storage.persistent.session"]) -> Group | None:
    stmt = sqla.select(groups.__table__).where(groups.group_id == group_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Group.from_row(row) if row else None


def find(
    *,
    course_id: CourseID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Group, ...]:
    stmt = sqla.select(groups.__table__).order_by(groups.group_id)
    if course_id is not None:
        stmt = stmt.where(groups.course_id == course_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(Group.from_row(row) for row in rows)


def create(
    *,
    course_id: CourseID,
    name: str,
    session: Session = di.Provide["storage.persistent.session"],
) -> Group:
    result = session.execute(sqla.insert(groups.__table__).values(course_id=course_id, name=name))
    session.flush()
    return get(GroupID(result.inserted_primary_key[0]), session=session)  # type: ignore[return-value]
