"""Calendar entries derived from quiz and override open/close times."""

from __future__ import annotations

import logging
import typing as t
from abc import abstractmethod

import quizzical.storage.calendar as calendar_storage
import quizzical.storage.override as override_storage
from quizzical.model import CalendarEventType, GroupScope, Quiz, QuizOverride, QuizSettings, UserScope
from quizzical.storage import Session

logger = logging.getLogger(__name__)


class CalendarSynchronizer(t.Protocol):
    """Keeps a quiz's calendar entries in line with its current overrides.

    Recomputing always starts over from the stored state, so repeating a call
    converges on the same entries.
    """

    @abstractmethod
    def recompute_for_scope(self, quiz: Quiz, scope: UserScope | GroupScope) -> None: ...

    @abstractmethod
    def recompute_all(self, quiz: Quiz) -> None: ...

    @abstractmethod
    def remove_for_scope(self, quiz: Quiz, scope: UserScope | GroupScope) -> None: ...


def event_name(quiz: Quiz, event_type: CalendarEventType) -> str:
    return f"{quiz.name} ({'opens' if event_type is CalendarEventType.Open else 'closes'})"


def event_times(settings: QuizSettings) -> t.Iterator[tuple[CalendarEventType, int]]:
    if settings.time_open is not None:
        yield CalendarEventType.Open, settings.time_open
    if settings.time_close is not None:
        yield CalendarEventType.Close, settings.time_close


class StoredCalendarSynchronizer(CalendarSynchronizer):
    def __init__(self, session: Session):
        self.session = session

    def _create(self, quiz: Quiz, settings: QuizSettings, scope: UserScope | GroupScope | None = None) -> int:
        n = 0
        for event_type, time_start in event_times(settings):
            calendar_storage.create(
                quiz_id=quiz.quiz_id,
                user_id=scope.user_id if isinstance(scope, UserScope) else None,
                group_id=scope.group_id if isinstance(scope, GroupScope) else None,
                event_type=event_type,
                time_start=time_start,
                name=event_name(quiz, event_type),
                session=self.session,
            )
            n += 1
        return n

    def _find_override(self, quiz: Quiz, scope: UserScope | GroupScope) -> QuizOverride | None:
        overrides = override_storage.find(
            quiz_id=quiz.quiz_id,
            user_id=scope.user_id if isinstance(scope, UserScope) else None,
            group_id=scope.group_id if isinstance(scope, GroupScope) else None,
            session=self.session,
        )
        return overrides[0] if overrides else None

    def remove_for_scope(self, quiz: Quiz, scope: UserScope | GroupScope) -> None:
        removed = calendar_storage.delete(
            quiz_id=quiz.quiz_id,
            user_id=scope.user_id if isinstance(scope, UserScope) else None,
            group_id=scope.group_id if isinstance(scope, GroupScope) else None,
            session=self.session,
        )
        logger.debug(
            "removed calendar events",
            extra={"quiz_id": quiz.quiz_id, "scope": scope.model_dump(mode="json"), "removed": removed},
        )

    def recompute_for_scope(self, quiz: Quiz, scope: UserScope | GroupScope) -> None:
        self.remove_for_scope(quiz, scope)
        if (override := self._find_override(quiz, scope)) is not None:
            self._create(quiz, override.settings, scope)

    def recompute_all(self, quiz: Quiz) -> None:
        calendar_storage.delete(quiz_id=quiz.quiz_id, session=self.session)
        created = self._create(quiz, quiz)
        for override in override_storage.find(quiz_id=quiz.quiz_id, session=self.session):
            created += self._create(quiz, override.settings, override.scope)
        logger.debug("recomputed calendar events", extra={"quiz_id": quiz.quiz_id, "created": created})
