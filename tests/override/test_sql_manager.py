"""Tests for OverrideManager wired to the database, as the container wires it."""

from __future__ import annotations

import typing as t

import pytest
from sqlalchemy.orm import Session

from quizzical.model import CalendarEventType, Course, Group, OverrideEvent, Quiz, User
from quizzical.override import OverrideCache, OverrideEventEmitter, OverrideManager, Rule, SQLOverrideStore, \
    ValidationError
from quizzical.storage import calendar as calendar_storage
from quizzical.storage import override as override_storage


class TestUpsert(object):
    """Tests for upsert_override() against SQL storage."""

    def test_creates_and_reads_back(
        self,
        db_session: Session,
        sql_manager: t.Callable[..., OverrideManager],
        instructor: User,
        test_user: User,
        test_quiz: Quiz,
    ) -> None:
        manager = sql_manager(instructor.user_id)

        override_id = manager.upsert_override(
            {"quizid": test_quiz.quiz_id, "userid": test_user.user_id, "timeclose": 5000, "password": "pw"}
        )

        with db_session.begin():
            override = override_storage.get(override_id, session=db_session)
        assert override is not None
        assert override.user_id == test_user.user_id
        assert override.time_close == 5000
        assert override.password == "pw"

    def test_rejects_deleted_user(
        self,
        sql_manager: t.Callable[..., OverrideManager],
        instructor: User,
        user_factory: t.Callable[..., User],
        test_quiz: Quiz,
    ) -> None:
        gone = user_factory(deleted=True)

        with pytest.raises(ValidationError) as exc_info:
            sql_manager(instructor.user_id).upsert_override(
                {"quizid": test_quiz.quiz_id, "userid": gone.user_id, "attempts": 3}
            )

        assert exc_info.value.rule is Rule.InvalidUser

    def test_rejects_group_of_other_course(
        self,
        sql_manager: t.Callable[..., OverrideManager],
        instructor: User,
        course_factory: t.Callable[..., Course],
        group_factory: t.Callable[..., Group],
        test_quiz: Quiz,
    ) -> None:
        elsewhere = group_factory(course_id=course_factory(name="Elsewhere").course_id)

        with pytest.raises(ValidationError) as exc_info:
            sql_manager(instructor.user_id).upsert_override(
                {"quizid": test_quiz.quiz_id, "groupid": elsewhere.group_id, "attempts": 3}
            )

        assert exc_info.value.rule is Rule.InvalidGroup

    def test_rejected_upsert_writes_nothing(
        self,
        db_session: Session,
        sql_manager: t.Callable[..., OverrideManager],
        instructor: User,
        test_user: User,
        test_quiz: Quiz,
    ) -> None:
        with pytest.raises(ValidationError):
            sql_manager(instructor.user_id).upsert_override(
                {"quizid": test_quiz.quiz_id, "userid": test_user.user_id, "timeopen": 5000}
            )

        with db_session.begin():
            assert override_storage.count(quiz_id=test_quiz.quiz_id, session=db_session) == 0
            assert calendar_storage.find(quiz_id=test_quiz.quiz_id, session=db_session) == ()

    def test_invalidates_cache(
        self,
        sql_manager: t.Callable[..., OverrideManager],
        override_cache: OverrideCache,
        instructor: User,
        test_user: User,
        test_quiz: Quiz,
    ) -> None:
        key = OverrideCache.user_key(test_quiz.quiz_id, test_user.user_id)
        override_cache.backend.set(key, "stale")

        sql_manager(instructor.user_id).upsert_override(
            {"quizid": test_quiz.quiz_id, "userid": test_user.user_id, "attempts": 3}
        )

        assert override_cache.backend.get(key) is None

    def test_emits_event(
        self,
        sql_manager: t.Callable[..., OverrideManager],
        override_events: OverrideEventEmitter,
        instructor: User,
        test_group: Group,
        test_quiz: Quiz,
    ) -> None:
        seen: list[OverrideEvent] = []
        override_events.subscribe(seen.append)

        override_id = sql_manager(instructor.user_id).upsert_override(
            {"quizid": test_quiz.quiz_id, "groupid": test_group.group_id, "attempts": 3}
        )

        assert [e.name for e in seen] == ["group_override_created"]
        assert seen[0].override_id == override_id
        assert seen[0].member_id == test_group.group_id


class TestUniqueIndex(object):
    """The database enforces one override per quiz and user or group."""

    def test_store_maps_duplicate_to_rule(
        self,
        db_session: Session,
        sql_manager: t.Callable[..., OverrideManager],
        instructor: User,
        test_user: User,
        test_quiz: Quiz,
    ) -> None:
        """A duplicate that slips past validation is still refused by the unique index."""
        override_id = sql_manager(instructor.user_id).upsert_override(
            {"quizid": test_quiz.quiz_id, "userid": test_user.user_id, "attempts": 3}
        )
        store = SQLOverrideStore(db_session)
        with store.transaction():
            existing = store.get(override_id)
        assert existing is not None

        with pytest.raises(ValidationError) as exc_info:
            with store.transaction():
                store.create(existing.model_copy(update={"override_id": None, "attempts": 4}))

        assert exc_info.value.rule is Rule.MultipleForUser
        with db_session.begin():
            assert override_storage.count(quiz_id=test_quiz.quiz_id, session=db_session) == 1


class TestCalendar(object):
    """Calendar entries follow the overrides written through the manager."""

    def test_user_override_events(
        self,
        db_session: Session,
        sql_manager: t.Callable[..., OverrideManager],
        instructor: User,
        test_user: User,
        test_quiz: Quiz,
    ) -> None:
        manager = sql_manager(instructor.user_id)
        override_id = manager.upsert_override(
            {"quizid": test_quiz.quiz_id, "userid": test_user.user_id, "timeopen": 1500, "timeclose": 5000}
        )

        with db_session.begin():
            events = calendar_storage.find(quiz_id=test_quiz.quiz_id, user_id=test_user.user_id, session=db_session)
        assert [(e.event_type, e.time_start) for e in events] == [
            (CalendarEventType.Open, 1500),
            (CalendarEventType.Close, 5000),
        ]
        assert events[0].name == "Quiz 1 (opens)"
        assert events[1].name == "Quiz 1 (closes)"

        manager.upsert_override({"id": override_id, "quizid": test_quiz.quiz_id, "timeopen": None})

        with db_session.begin():
            events = calendar_storage.find(quiz_id=test_quiz.quiz_id, user_id=test_user.user_id, session=db_session)
        assert [(e.event_type, e.time_start) for e in events] == [(CalendarEventType.Close, 5000)]

    def test_group_override_recomputes_quiz(
        self,
        db_session: Session,
        sql_manager: t.Callable[..., OverrideManager],
        instructor: User,
        test_group: Group,
        test_quiz: Quiz,
    ) -> None:
        """A group override rebuilds the quiz's own events along with every override's."""
        sql_manager(instructor.user_id).upsert_override(
            {"quizid": test_quiz.quiz_id, "groupid": test_group.group_id, "timeclose": 5000}
        )

        with db_session.begin():
            quiz_events = calendar_storage.find(
                quiz_id=test_quiz.quiz_id, user_id=None, group_id=None, session=db_session
            )
            group_events = calendar_storage.find(
                quiz_id=test_quiz.quiz_id, group_id=test_group.group_id, session=db_session
            )
        assert [(e.event_type, e.time_start) for e in quiz_events] == [
            (CalendarEventType.Open, 1000),
            (CalendarEventType.Close, 2000),
        ]
        assert [(e.event_type, e.time_start) for e in group_events] == [(CalendarEventType.Close, 5000)]

    def test_delete_removes_events(
        self,
        db_session: Session,
        sql_manager: t.Callable[..., OverrideManager],
        instructor: User,
        test_user: User,
        test_quiz: Quiz,
    ) -> None:
        manager = sql_manager(instructor.user_id)
        override_id = manager.upsert_override(
            {"quizid": test_quiz.quiz_id, "userid": test_user.user_id, "timeclose": 5000}
        )

        manager.delete_override(override_id)

        with db_session.begin():
            assert calendar_storage.find(quiz_id=test_quiz.quiz_id, user_id=test_user.user_id, session=db_session) == ()
            assert override_storage.get(override_id, session=db_session) is None


class TestDeleteAll(object):
    """Tests for delete_all_overrides() against SQL storage."""

    def test_deletes_only_that_quiz(
        self,
        db_session: Session,
        sql_manager: t.Callable[..., OverrideManager],
        instructor: User,
        test_user: User,
        test_group: Group,
        quiz_factory: t.Callable[..., Quiz],
    ) -> None:
        quiz = quiz_factory()
        other = quiz_factory(name="Quiz 2")
        manager = sql_manager(instructor.user_id)
        manager.upsert_override({"quizid": quiz.quiz_id, "userid": test_user.user_id, "attempts": 3})
        manager.upsert_override({"quizid": quiz.quiz_id, "groupid": test_group.group_id, "attempts": 3})
        manager.upsert_override({"quizid": other.quiz_id, "userid": test_user.user_id, "attempts": 3})

        assert manager.delete_all_overrides(quiz.quiz_id) == 2

        with db_session.begin():
            assert override_storage.count(quiz_id=quiz.quiz_id, session=db_session) == 0
            assert override_storage.count(quiz_id=other.quiz_id, session=db_session) == 1

    def test_failure_keeps_every_override(
        self,
        db_session: Session,
        sql_manager: t.Callable[..., OverrideManager],
        override_events: OverrideEventEmitter,
        instructor: User,
        user_factory: t.Callable[..., User],
        test_quiz: Quiz,
    ) -> None:
        """An error partway through rolls back the deletions and calendar changes already made."""
        manager = sql_manager(instructor.user_id)
        for _ in range(2):
            manager.upsert_override({"quizid": test_quiz.quiz_id, "userid": user_factory().user_id, "timeclose": 5000})
        remove_for_scope = manager.calendar.remove_for_scope
        calls = 0

        def fail_second(quiz: Quiz, scope: t.Any) -> None:
            nonlocal calls
            calls += 1
            if calls == 2:
                raise RuntimeError("calendar unavailable")
            remove_for_scope(quiz, scope)

        manager.calendar.remove_for_scope = fail_second  # type: ignore[method-assign]
        seen: list[OverrideEvent] = []
        override_events.subscribe(seen.append)

        with pytest.raises(RuntimeError):
            manager.delete_all_overrides(test_quiz.quiz_id)

        with db_session.begin():
            assert override_storage.count(quiz_id=test_quiz.quiz_id, session=db_session) == 2
            assert len(calendar_storage.find(quiz_id=test_quiz.quiz_id, session=db_session)) == 2
        assert seen == []
