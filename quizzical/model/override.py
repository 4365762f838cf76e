from __future__ import annotations

import enum
import typing as t

import pydantic as p

from .base import BaseModel
from .id import GroupID, OverrideID, QuizID, UserID
from .quiz import Quiz, QuizSettings

OVERRIDE_FIELDS: t.Final[tuple[str, ...]] = ("time_open", "time_close", "time_limit", "attempts", "password")


class ScopeKind(enum.Enum):
    User = "user"
    Group = "group"


class UserScope(BaseModel):
    model_config = p.ConfigDict(frozen=True)

    kind: t.Literal["user"] = "user"
    user_id: UserID

    @property
    def scope_kind(self) -> ScopeKind:
        return ScopeKind.User

    @property
    def member_id(self) -> int:
        return self.user_id


class GroupScope(BaseModel):
    model_config = p.ConfigDict(frozen=True)

    kind: t.Literal["group"] = "group"
    group_id: GroupID

    @property
    def scope_kind(self) -> ScopeKind:
        return ScopeKind.Group

    @property
    def member_id(self) -> int:
        return self.group_id


OverrideScope = t.Annotated[UserScope | GroupScope, p.Field(discriminator="kind")]


class QuizOverride(QuizSettings):
    """One user's or one group's exception to a quiz's settings"""

    override_id: OverrideID | None = None
    quiz_id: QuizID
    scope: OverrideScope

    @property
    def user_id(self) -> UserID | None:
        return self.scope.user_id if isinstance(self.scope, UserScope) else None

    @property
    def group_id(self) -> GroupID | None:
        return self.scope.group_id if isinstance(self.scope, GroupScope) else None

    @property
    def settings(self) -> QuizSettings:
        return QuizSettings(**{f: getattr(self, f) for f in OVERRIDE_FIELDS})


class OverrideCandidate(QuizSettings):
    """A submitted override before validation.

    Unlike `QuizOverride`, both scope members are independent so a candidate
    naming both a user and a group (or neither) can be represented and rejected.
    """

    override_id: OverrideID | None = None
    quiz_id: QuizID
    user_id: UserID | None = None
    group_id: GroupID | None = None

    @classmethod
    def from_override(cls, override: QuizOverride) -> OverrideCandidate:
        return cls(
            override_id=override.override_id,
            quiz_id=override.quiz_id,
            user_id=override.user_id,
            group_id=override.group_id,
            **override.settings.model_dump(),
        )

    def clear_empty(self) -> OverrideCandidate:
        """Replace 0 and "" with None; an override value is either real or unset"""
        fields = (*OVERRIDE_FIELDS, "user_id", "group_id")
        cleared = {f: None for f in fields if getattr(self, f) in (0, "")}
        return self.model_copy(update=cleared) if cleared else self

    def clear_matching(self, quiz: Quiz) -> OverrideCandidate:
        """Replace values equal to the quiz's own setting with None"""
        cleared = {
            f: None
            for f in OVERRIDE_FIELDS
            if getattr(self, f) is not None and getattr(self, f) == getattr(quiz, f)
        }
        return self.model_copy(update=cleared) if cleared else self

    def is_empty(self) -> bool:
        return all(getattr(self, f) is None for f in OVERRIDE_FIELDS)

    @property
    def scope(self) -> UserScope | GroupScope | None:
        if self.user_id is not None and self.group_id is None:
            return UserScope(user_id=self.user_id)
        if self.group_id is not None and self.user_id is None:
            return GroupScope(group_id=self.group_id)
        return None

    def to_override(self, override_id: OverrideID | None = None) -> QuizOverride:
        scope = self.scope
        if scope is None:
            raise ValueError("candidate must name exactly one of user_id, group_id")
        return QuizOverride(
            override_id=override_id if override_id is not None else self.override_id,
            quiz_id=self.quiz_id,
            scope=scope,
            **{f: getattr(self, f) for f in OVERRIDE_FIELDS},
        )
