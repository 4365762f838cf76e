"""Persistence interface for overrides."""

from __future__ import annotations

import contextlib
import typing as t
from abc import abstractmethod

import sqlalchemy.exc

import quizzical.storage.override as storage
from quizzical.model import GroupID, OverrideID, QuizID, QuizOverride, UserID
from quizzical.storage import Session

from .errors import ValidationError
from .validator import Rule


class OverrideStore(t.Protocol):
    """Protocol for override persistence.

    The manager opens exactly one `transaction()` per operation; every other
    call happens inside it.
    """

    @abstractmethod
    def transaction(self) -> t.ContextManager[None]: ...

    @abstractmethod
    def get(self, override_id: OverrideID) -> QuizOverride | None: ...

    @abstractmethod
    def find(
        self,
        quiz_id: QuizID,
        *,
        user_id: UserID | None = None,
        group_id: GroupID | None = None,
        exclude: OverrideID | None = None,
    ) -> t.Sequence[QuizOverride]: ...

    @abstractmethod
    def create(self, override: QuizOverride) -> QuizOverride:
        """Insert a new override.

        Raises:
            ValidationError: another override already exists for the same quiz and user or group
        """
        ...

    @abstractmethod
    def update(self, override: QuizOverride) -> QuizOverride:
        """Replace the settings of an existing override.

        Raises:
            KeyError: override_id does not correspond to an override
        """
        ...

    @abstractmethod
    def delete(self, override_id: OverrideID) -> None:
        """
        Raises:
            KeyError: override_id does not correspond to an override
        """
        ...


def duplicate_rule(override: QuizOverride) -> Rule:
    return Rule.MultipleForUser if override.user_id is not None else Rule.MultipleForGroup


class SQLOverrideStore(OverrideStore):
    def __init__(self, session: Session):
        self.session = session

    @contextlib.contextmanager
    def transaction(self) -> t.Iterator[None]:
        if self.session.in_transaction():
            with self.session.begin_nested():
                yield
        else:
            with self.session.begin():
                yield

    def get(self, override_id: OverrideID) -> QuizOverride | None:
        return storage.get(override_id, session=self.session)

    def find(
        self,
        quiz_id: QuizID,
        *,
        user_id: UserID | None = None,
        group_id: GroupID | None = None,
        exclude: OverrideID | None = None,
    ) -> t.Sequence[QuizOverride]:
        return storage.find(quiz_id=quiz_id, user_id=user_id, group_id=group_id, exclude=exclude, session=self.session)

    def create(self, override: QuizOverride) -> QuizOverride:
        try:
            return storage.create(override, session=self.session)
        except sqlalchemy.exc.IntegrityError as e:
            # the unique indexes are the authority on one override per user or group
            raise ValidationError(duplicate_rule(override)) from e

    def update(self, override: QuizOverride) -> QuizOverride:
        assert override.override_id is not None
        try:
            return storage.update(
                override.override_id,
                time_open=override.time_open,
                time_close=override.time_close,
                time_limit=override.time_limit,
                attempts=override.attempts,
                password=override.password,
                session=self.session,
            )
        except sqlalchemy.exc.IntegrityError as e:
            raise ValidationError(duplicate_rule(override)) from e

    def delete(self, override_id: OverrideID) -> None:
        storage.delete(override_id, session=self.session)
