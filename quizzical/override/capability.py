from __future__ import annotations

import typing as t
from abc import abstractmethod

import quizzical.storage.capability as storage
from quizzical.model import Capability, CourseID, UserID
from quizzical.storage import Session

from .errors import AuthorizationError


class CapabilityChecker(t.Protocol):
    @abstractmethod
    def has_capability(self, actor_id: UserID, course_id: CourseID, capability: Capability) -> bool: ...

    def require(self, actor_id: UserID, course_id: CourseID, *capabilities: Capability) -> None:
        """Pass if the actor holds any one of `capabilities` in the course.

        Raises:
            AuthorizationError: the actor holds none of them
        """
        if not any(self.has_capability(actor_id, course_id, c) for c in capabilities):
            names = " or ".join(c.value for c in capabilities)
            raise AuthorizationError(f"Sorry, but you do not currently have permissions to do that ({names})", names)


class GrantCapabilityChecker(CapabilityChecker):
    """Capabilities held through rows of the capability_grants table"""

    def __init__(self, session: Session):
        self.session = session

    def has_capability(self, actor_id: UserID, course_id: CourseID, capability: Capability) -> bool:
        return storage.has(actor_id, course_id, capability, session=self.session)
