from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from quizzical.core import di
from quizzical.lib import NotSet
from quizzical.model import GroupID, GroupScope, OverrideID, QuizID, QuizOverride, UserID, UserScope

from . import Session
from .table import quiz_overrides


def _from_row(row: t.Mapping[str, t.Any]) -> QuizOverride:
    data = dict(row)
    user_id, group_id = data.pop("user_id"), data.pop("group_id")
    scope = UserScope(user_id=user_id) if user_id is not None else GroupScope(group_id=group_id)
    return QuizOverride(scope=scope, **data)


def get(override_id: OverrideID, *, session: Session = di.Provide["storage.persistent.session"]) -> QuizOverride | None:
    stmt = sqla.select(quiz_overrides.__table__).where(quiz_overrides.override_id == override_id)
    row = session.execute(stmt).mappings().one_or_none()
    return _from_row(row) if row else None


def find(
    *,
    quiz_id: QuizID | None = None,
    user_id: UserID | None = None,
    group_id: GroupID | None = None,
    exclude: OverrideID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[QuizOverride, ...]:
    """Find overrides matching every given criterion, in insertion order.

    `exclude` drops one override from the result, which is how an update looks
    for siblings other than itself.
    """
    stmt = sqla.select(quiz_overrides.__table__).order_by(quiz_overrides.override_id)
    if quiz_id is not None:
        stmt = stmt.where(quiz_overrides.quiz_id == quiz_id)
    if user_id is not None:
        stmt = stmt.where(quiz_overrides.user_id == user_id)
    if group_id is not None:
        stmt = stmt.where(quiz_overrides.group_id == group_id)
    if exclude is not None:
        stmt = stmt.where(quiz_overrides.override_id != exclude)
    rows = session.execute(stmt).mappings().all()
    return tuple(_from_row(row) for row in rows)


def create(override: QuizOverride, *, session: Session = di.Provide["storage.persistent.session"]) -> QuizOverride:
    stmt = sqla.insert(quiz_overrides.__table__).values(
        quiz_id=override.quiz_id,
        user_id=override.user_id,
        group_id=override.group_id,
        time_open=override.time_open,
        time_close=override.time_close,
        time_limit=override.time_limit,
        attempts=override.attempts,
        password=override.password,
    )
    result = session.execute(stmt)
    session.flush()
    return get(OverrideID(result.inserted_primary_key[0]), session=session)  # type: ignore[return-value]


def update(
    override_id: OverrideID,
    *,
    time_open: int | None | NotSet = NotSet(),
    time_close: int | None | NotSet = NotSet(),
    time_limit: int | None | NotSet = NotSet(),
    attempts: int | None | NotSet = NotSet(),
    password: str | None | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
) -> QuizOverride:
    """Update an override's settings; the quiz and scope of an override never change.

    Raises:
        KeyError: If override_id does not correspond to an override
    """
    given = {
        "time_open": time_open,
        "time_close": time_close,
        "time_limit": time_limit,
        "attempts": attempts,
        "password": password,
    }
    values: dict[str, t.Any] = {k: v for k, v in given.items() if not isinstance(v, NotSet)}

    stmt = (
        sqla.update(quiz_overrides)
        .where(quiz_overrides.override_id == override_id)
        .values(**(values or {"override_id": override_id}))
    )
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Override {override_id} not found")

    session.flush()
    return get(override_id, session=session)  # type: ignore[return-value]


def delete(override_id: OverrideID, *, session: Session = di.Provide["storage.persistent.session"]) -> None:
    """
    Raises:
        KeyError: If override_id does not correspond to an override
    """
    stmt = sqla.delete(quiz_overrides).where(quiz_overrides.override_id == override_id)
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Override {override_id} not found")
    session.flush()


def count(*, quiz_id: QuizID | None = None, session: Session = di.Provide["storage.persistent.session"]) -> int:
    stmt = sqla.select(sqla.func.count()).select_from(quiz_overrides)
    if quiz_id is not None:
        stmt = stmt.where(quiz_overrides.quiz_id == quiz_id)
    return session.execute(stmt).scalar_one()
