from __future__ import annotations

import logging
import typing as t

from quizzical.model import Capability, GroupScope, OverrideEvent, OverrideEventKind, OverrideID, Quiz, QuizID, \
    QuizOverride, UserID

from .cache import OverrideCache
from .calendar import CalendarSynchronizer
from .capability import CapabilityChecker
from .directory import Directory
from .errors import NotFoundError, ValidationError
from .event import OverrideEventEmitter
from .form import OverrideFormData
from .store import OverrideStore
from .validator import Rule, validate, ValidationContext

logger = logging.getLogger(__name__)


class OverrideManager(object):
    """Creates, updates and deletes the overrides of quizzes on behalf of one actor.

    Each public operation runs in a single store transaction. Capabilities are
    checked once per operation, before anything is validated or written.
    Calendar synchronization runs inside the transaction with the write. Cache
    invalidation and then the audit event follow only once it has committed.
    """

    def __init__(
        self,
        actor_id: UserID,
        store: OverrideStore,
        directory: Directory,
        cache: OverrideCache,
        events: OverrideEventEmitter,
        calendar: CalendarSynchronizer,
        capabilities: CapabilityChecker,
    ):
        self.actor_id = actor_id
        self.store = store
        self.directory = directory
        self.cache = cache
        self.events = events
        self.calendar = calendar
        self.capabilities = capabilities

    def _load_quiz(self, quiz_id: QuizID) -> Quiz:
        quiz = self.directory.get_quiz(quiz_id)
        if quiz is None:
            raise NotFoundError(f"Quiz {quiz_id} does not exist")
        return quiz

    def _load_override(self, override_id: OverrideID) -> QuizOverride:
        override = self.store.get(override_id)
        if override is None:
            raise NotFoundError(Rule.OverrideNotFound.message)
        return override

    def _emit(self, kind: OverrideEventKind, override: QuizOverride) -> None:
        assert override.override_id is not None
        self.events.emit(
            OverrideEvent(
                kind=kind,
                scope_kind=override.scope.scope_kind,
                override_id=override.override_id,
                quiz_id=override.quiz_id,
                member_id=override.scope.member_id,
            )
        )

    def _announce(self, changes: list[tuple[OverrideEventKind | None, QuizOverride]]) -> None:
        """Invalidate the cache entries of committed changes, then emit their events"""
        for _, override in changes:
            self.cache.invalidate(override.quiz_id, override.scope)
        for kind, override in changes:
            if kind is not None:
                self._emit(kind, override)

    def upsert_override(self, formdata: OverrideFormData | t.Mapping[str, t.Any]) -> OverrideID:
        """Create an override, or update the one named by `formdata.id`.

        Raises:
            pydantic.ValidationError: formdata is malformed
            NotFoundError: the quiz, or the override being updated, does not exist
            AuthorizationError: the actor cannot manage overrides in the quiz's course
            ValidationError: the override breaks a rule; `rule` says which
        """
        form = formdata if isinstance(formdata, OverrideFormData) else OverrideFormData.model_validate(formdata)

        with self.store.transaction():
            quiz = self._load_quiz(form.quizid)
            self.capabilities.require(self.actor_id, quiz.course_id, Capability.ManageOverrides)

            existing: QuizOverride | None = None
            if form.id is not None:
                existing = self._load_override(form.id)
                if existing.quiz_id != quiz.quiz_id:
                    raise NotFoundError(Rule.OverrideNotFound.message)

            candidate = form.to_candidate(existing).clear_empty().clear_matching(quiz)
            rejected = validate(
                ValidationContext(
                    candidate=candidate,
                    quiz=quiz,
                    existing=existing,
                    is_update=existing is not None,
                    is_real_user=self.directory.is_real_user,
                    get_group=self.directory.get_group,
                    find_siblings=self.store.find,
                )
            )
            if rejected is not None:
                logger.debug(
                    "rejected override",
                    extra={"quiz_id": quiz.quiz_id, "override_id": form.id, "rule": rejected.rule.value},
                )
                if rejected.rule is Rule.OverrideNotFound:
                    raise NotFoundError(rejected.message)
                raise ValidationError(rejected.rule)

            if existing is None:
                saved = self.store.create(candidate.to_override())
                kind = OverrideEventKind.Created
            else:
                try:
                    saved = self.store.update(candidate.to_override())
                except KeyError as e:
                    raise NotFoundError(Rule.OverrideNotFound.message) from e
                kind = OverrideEventKind.Updated
            assert saved.override_id is not None

            # a group override can change what many users see, a user override only that user
            if isinstance(saved.scope, GroupScope):
                self.calendar.recompute_all(quiz)
            else:
                self.calendar.recompute_for_scope(quiz, saved.scope)

        self._announce([(kind, saved)])
        logger.info(
            f"{kind.value} override",
            extra={"actor_id": self.actor_id, "quiz_id": quiz.quiz_id, "override_id": saved.override_id},
        )
        return saved.override_id

    def get_all_overrides(self, quiz_id: QuizID) -> list[QuizOverride]:
        with self.store.transaction():
            quiz = self._load_quiz(quiz_id)
            self.capabilities.require(
                self.actor_id, quiz.course_id, Capability.ViewOverrides, Capability.ManageOverrides
            )
            return list(self.store.find(quiz_id))

    def get_override(self, override_id: OverrideID) -> QuizOverride:
        with self.store.transaction():
            override = self._load_override(override_id)
            quiz = self._load_quiz(override.quiz_id)
            self.capabilities.require(
                self.actor_id, quiz.course_id, Capability.ViewOverrides, Capability.ManageOverrides
            )
            return override

    def _delete(self, quiz: Quiz, override: QuizOverride) -> None:
        assert override.override_id is not None
        self.calendar.remove_for_scope(quiz, override.scope)
        try:
            self.store.delete(override.override_id)
        except KeyError as e:
            raise NotFoundError(Rule.OverrideNotFound.message) from e

    def delete_override(self, override_id: OverrideID, *, audit: bool = True) -> None:
        """
        Raises:
            NotFoundError: no override has this id
            AuthorizationError: the actor cannot manage overrides in the quiz's course
        """
        with self.store.transaction():
            override = self._load_override(override_id)
            quiz = self._load_quiz(override.quiz_id)
            self.capabilities.require(self.actor_id, quiz.course_id, Capability.ManageOverrides)
            self._delete(quiz, override)

        self._announce([(OverrideEventKind.Deleted if audit else None, override)])
        logger.info(
            "deleted override",
            extra={"actor_id": self.actor_id, "quiz_id": override.quiz_id, "override_id": override_id},
        )

    def delete_all_overrides(self, quiz_id: QuizID, *, audit: bool = True) -> int:
        """Delete every override of a quiz in one transaction; returns how many were deleted"""
        with self.store.transaction():
            quiz = self._load_quiz(quiz_id)
            self.capabilities.require(self.actor_id, quiz.course_id, Capability.ManageOverrides)
            overrides = list(self.store.find(quiz_id))
            for override in overrides:
                self._delete(quiz, override)

        kind = OverrideEventKind.Deleted if audit else None
        self._announce([(kind, o) for o in overrides])
        logger.info(
            "deleted all overrides",
            extra={"actor_id": self.actor_id, "quiz_id": quiz_id, "count": len(overrides)},
        )
        return len(overrides)
