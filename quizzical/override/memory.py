"""In-process collaborators for the override manager, for local use and tests."""

from __future__ import annotations

import contextlib
import typing as t

from quizzical.model import Capability, CourseID, Group, GroupID, GroupScope, OverrideID, Quiz, QuizID, \
    QuizOverride, User, UserID, UserScope

from .calendar import CalendarSynchronizer
from .capability import CapabilityChecker
from .directory import Directory
from .errors import ValidationError
from .store import duplicate_rule, OverrideStore


class MemoryOverrideStore(OverrideStore):
    """Overrides kept in a dict; a failed transaction restores the prior contents"""

    def __init__(self) -> None:
        self.overrides: dict[OverrideID, QuizOverride] = {}
        self.next_id = 1

    @contextlib.contextmanager
    def transaction(self) -> t.Iterator[None]:
        snapshot = dict(self.overrides), self.next_id
        try:
            yield
        except BaseException:
            self.overrides, self.next_id = snapshot
            raise

    def get(self, override_id: OverrideID) -> QuizOverride | None:
        return self.overrides.get(override_id)

    def find(
        self,
        quiz_id: QuizID,
        *,
        user_id: UserID | None = None,
        group_id: GroupID | None = None,
        exclude: OverrideID | None = None,
    ) -> t.Sequence[QuizOverride]:
        return [
            o
            for o in self.overrides.values()
            if o.quiz_id == quiz_id
            and (user_id is None or o.user_id == user_id)
            and (group_id is None or o.group_id == group_id)
            and (exclude is None or o.override_id != exclude)
        ]

    def create(self, override: QuizOverride) -> QuizOverride:
        if any(o.quiz_id == override.quiz_id and o.scope == override.scope for o in self.overrides.values()):
            raise ValidationError(duplicate_rule(override))
        created = override.model_copy(update={"override_id": OverrideID(self.next_id)})
        self.next_id += 1
        self.overrides[t.cast(OverrideID, created.override_id)] = created
        return created

    def update(self, override: QuizOverride) -> QuizOverride:
        if override.override_id not in self.overrides:
            raise KeyError(f"Override {override.override_id} not found")
        self.overrides[override.override_id] = override
        return override

    def delete(self, override_id: OverrideID) -> None:
        if self.overrides.pop(override_id, None) is None:
            raise KeyError(f"Override {override_id} not found")


class MemoryDirectory(Directory):
    def __init__(self) -> None:
        self.quizzes: dict[QuizID, Quiz] = {}
        self.users: dict[UserID, User] = {}
        self.groups: dict[GroupID, Group] = {}

    def add(self, *entities: Quiz | User | Group) -> None:
        for e in entities:
            match e:
                case Quiz():
                    self.quizzes[e.quiz_id] = e
                case User():
                    self.users[e.user_id] = e
                case Group():
                    self.groups[e.group_id] = e

    def get_quiz(self, quiz_id: QuizID) -> Quiz | None:
        return self.quizzes.get(quiz_id)

    def is_real_user(self, user_id: UserID) -> bool:
        user = self.users.get(user_id)
        return user is not None and not user.deleted

    def get_group(self, group_id: GroupID) -> Group | None:
        return self.groups.get(group_id)


class MemoryCapabilityChecker(CapabilityChecker):
    def __init__(self) -> None:
        self.grants: set[tuple[UserID, CourseID, Capability]] = set()

    def grant(self, actor_id: UserID, course_id: CourseID, *capabilities: Capability) -> None:
        self.grants.update((actor_id, course_id, c) for c in capabilities)

    def has_capability(self, actor_id: UserID, course_id: CourseID, capability: Capability) -> bool:
        return (actor_id, course_id, capability) in self.grants


CalendarCall = tuple[str, QuizID, UserScope | GroupScope | None]


class RecordingCalendarSynchronizer(CalendarSynchronizer):
    """Records each synchronization request instead of keeping calendar entries"""

    def __init__(self) -> None:
        self.calls: list[CalendarCall] = []

    def recompute_for_scope(self, quiz: Quiz, scope: UserScope | GroupScope) -> None:
        self.calls.append(("recompute_for_scope", quiz.quiz_id, scope))

    def recompute_all(self, quiz: Quiz) -> None:
        self.calls.append(("recompute_all", quiz.quiz_id, None))

    def remove_for_scope(self, quiz: Quiz, scope: UserScope | GroupScope) -> None:
        self.calls.append(("remove_for_scope", quiz.quiz_id, scope))
