from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from quizzical.core import di
from quizzical.lib import NotSet
from quizzical.model import User, UserID

from . import Session
from .table import users


def get(
    user_id: UserID | None = None,
    *,
    email: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> User | None:
    """Get a user by ID or email.

    Exactly one of user_id or email must be provided.
    """
    if user_id is None and email is None:
        raise ValueError("Either user_id or email must be provided")
    if user_id is not None and email is not None:
        raise ValueError("Only one of user_id or email should be provided")

    if user_id is not None:
        stmt = sqla.select(users.__table__).where(users.user_id == user_id)
    else:
        stmt = sqla.select(users.__table__).where(users.email == email)

    row = session.execute(stmt).mappings().one_or_none()
    return User.from_row(row) if row else None


def exists(user_id: UserID, *, session: Session = di.Provide["storage.persistent.session"]) -> bool:
    """True when `user_id` names an account that has not been deleted"""
    stmt = sqla.select(users.user_id).where(users.user_id == user_id, users.deleted.is_(False))
    return session.execute(stmt).first() is not None


def create(*, email: str, name: str, session: Session = di.Provide["storage.persistent.session"]) -> User:
    result = session.execute(sqla.insert(users.__table__).values(email=email, name=name))
    session.flush()
    return get(UserID(result.inserted_primary_key[0]), session=session)  # type: ignore[return-value]


def update(
    user_id: UserID,
    *,
    name: str | NotSet = NotSet(),
    deleted: bool | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
) -> User:
    """Update a user.

    Raises:
        KeyError: If user_id does not correspond to a user
    """
    values: dict[str, t.Any] = {}
    if not isinstance(name, NotSet):
        values["name"] = name
    if not isinstance(deleted, NotSet):
        values["deleted"] = deleted

    # No-op update still verifies the user exists
    stmt = sqla.update(users).where(users.user_id == user_id).values(**(values or {"user_id": user_id}))
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"User {user_id} not found")

    session.flush()
    return get(user_id, session=session)  # type: ignore[return-value]
