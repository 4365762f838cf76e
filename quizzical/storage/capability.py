from __future__ import annotations

import sqlalchemy as sqla

from quizzical.core import di
from quizzical.model import Capability, CapabilityGrant, CourseID, UserID

from . import Session
from .table import capability_grants


def has(
    user_id: UserID,
    course_id: CourseID,
    capability: Capability,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    stmt = sqla.select(capability_grants.user_id).where(
        capability_grants.user_id == user_id,
        capability_grants.course_id == course_id,
        capability_grants.capability == capability.value,
    )
    return session.execute(stmt).first() is not None


def find(
    *,
    user_id: UserID | None = None,
    course_id: CourseID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[CapabilityGrant, ...]:
    stmt = sqla.select(capability_grants.__table__)
    if user_id is not None:
        stmt = stmt.where(capability_grants.user_id == user_id)
    if course_id is not None:
        stmt = stmt.where(capability_grants.course_id == course_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(CapabilityGrant.from_row(row) for row in rows)


def grant(
    user_id: UserID,
    course_id: CourseID,
    capability: Capability,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> CapabilityGrant:
    """Grant a capability; granting one already held is a no-op"""
    if not has(user_id, course_id, capability, session=session):
        stmt = sqla.insert(capability_grants.__table__).values(
            user_id=user_id, course_id=course_id, capability=capability.value
        )
        session.execute(stmt)
        session.flush()
    return CapabilityGrant(user_id=user_id, course_id=course_id, capability=capability)


def revoke(
    user_id: UserID,
    course_id: CourseID,
    capability: Capability,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    stmt = sqla.delete(capability_grants.__table__).where(
        capability_grants.user_id == user_id,
        capability_grants.course_id == course_id,
        capability_grants.capability == capability.value,
    )
    result = session.execute(stmt)
    session.flush()
    return result.rowcount > 0  # pyright: ignore[reportAttributeAccessIssue]
