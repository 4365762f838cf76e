from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from quizzical.core import di
from quizzical.lib import NotSet
from quizzical.model import CalendarEvent, CalendarEventID, CalendarEventType, GroupID, QuizID, UserID

from . import Session
from .table import calendar_events


def _filter(
    stmt: t.Any,
    quiz_id: QuizID | None,
    user_id: UserID | None | NotSet,
    group_id: GroupID | None | NotSet,
    event_type: CalendarEventType | None,
) -> t.Any:
    # NotSet leaves a column unfiltered; None matches NULL
    if quiz_id is not None:
        stmt = stmt.where(calendar_events.quiz_id == quiz_id)
    if not isinstance(user_id, NotSet):
        stmt = stmt.where(calendar_events.user_id.is_(None) if user_id is None else calendar_events.user_id == user_id)
    if not isinstance(group_id, NotSet):
        stmt = stmt.where(
            calendar_events.group_id.is_(None) if group_id is None else calendar_events.group_id == group_id
        )
    if event_type is not None:
        stmt = stmt.where(calendar_events.event_type == event_type.value)
    return stmt


def get(event_id: CalendarEventID, *, session: Session = di.Provide["storage.persistent.session"]) -> CalendarEvent | None:
    stmt = sqla.select(calendar_events.__table__).where(calendar_events.event_id == event_id)
    row = session.execute(stmt).mappings().one_or_none()
    return CalendarEvent.from_row(row) if row else None


def find(
    *,
    quiz_id: QuizID | None = None,
    user_id: UserID | None | NotSet = NotSet(),
    group_id: GroupID | None | NotSet = NotSet(),
    event_type: CalendarEventType | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[CalendarEvent, ...]:
    stmt = sqla.select(calendar_events.__table__).order_by(calendar_events.event_id)
    stmt = _filter(stmt, quiz_id, user_id, group_id, event_type)
    rows = session.execute(stmt).mappings().all()
    return tuple(CalendarEvent.from_row(row) for row in rows)


def create(
    *,
    quiz_id: QuizID,
    event_type: CalendarEventType,
    time_start: int,
    name: str,
    user_id: UserID | None = None,
    group_id: GroupID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> CalendarEvent:
    stmt = sqla.insert(calendar_events.__table__).values(
        quiz_id=quiz_id,
        user_id=user_id,
        group_id=group_id,
        event_type=event_type.value,
        time_start=time_start,
        name=name,
    )
    result = session.execute(stmt)
    session.flush()
    return get(CalendarEventID(result.inserted_primary_key[0]), session=session)  # type: ignore[return-value]


def delete(
    *,
    quiz_id: QuizID,
    user_id: UserID | None | NotSet = NotSet(),
    group_id: GroupID | None | NotSet = NotSet(),
    event_type: CalendarEventType | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> int:
    """Delete matching events, returning how many were removed"""
    stmt = _filter(sqla.delete(calendar_events.__table__), quiz_id, user_id, group_id, event_type)
    result = session.execute(stmt)
    session.flush()
    return result.rowcount  # pyright: ignore[reportAttributeAccessIssue]
