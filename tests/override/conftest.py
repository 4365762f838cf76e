"""Fixtures wiring an OverrideManager to in-process collaborators.

Nothing here touches the database; see tests/conftest.py for the SQL-backed
`sql_manager` fixture.
"""

from __future__ import annotations

import typing as t

import pytest

from quizzical.cache import MemoryCache
from quizzical.model import Capability, CourseID, Group, GroupID, Quiz, QuizID, User, UserID
from quizzical.override import OverrideCache, OverrideEventEmitter, OverrideManager
from quizzical.override.memory import MemoryCapabilityChecker, MemoryDirectory, MemoryOverrideStore, \
    RecordingCalendarSynchronizer


class Ids(object):
    """Well-known ids of the directory built by the `directory` fixture"""

    course = CourseID(1)
    other_course = CourseID(2)
    quiz = QuizID(10)
    instructor = UserID(100)
    learner = UserID(101)
    other_learner = UserID(102)
    deleted_learner = UserID(103)
    viewer = UserID(104)
    group = GroupID(200)
    other_group = GroupID(201)
    foreign_group = GroupID(202)


@pytest.fixture
def ids() -> type[Ids]:
    return Ids


@pytest.fixture
def quiz() -> Quiz:
    return Quiz(
        quiz_id=Ids.quiz,
        course_id=Ids.course,
        name="Midterm",
        time_open=1000,
        time_close=2000,
        time_limit=3600,
        attempts=1,
        password=None,
    )


@pytest.fixture
def directory(quiz: Quiz) -> MemoryDirectory:
    d = MemoryDirectory()
    d.add(
        quiz,
        User(user_id=Ids.instructor, email="instructor@acme.edu", name="Instructor"),
        User(user_id=Ids.learner, email="learner@acme.edu", name="Learner"),
        User(user_id=Ids.other_learner, email="other@acme.edu", name="Other Learner"),
        User(user_id=Ids.deleted_learner, email="gone@acme.edu", name="Gone", deleted=True),
        User(user_id=Ids.viewer, email="viewer@acme.edu", name="Viewer"),
        Group(group_id=Ids.group, course_id=Ids.course, name="Group A"),
        Group(group_id=Ids.other_group, course_id=Ids.course, name="Group B"),
        Group(group_id=Ids.foreign_group, course_id=Ids.other_course, name="Elsewhere"),
    )
    return d


@pytest.fixture
def store() -> MemoryOverrideStore:
    return MemoryOverrideStore()


@pytest.fixture
def capabilities() -> MemoryCapabilityChecker:
    checker = MemoryCapabilityChecker()
    checker.grant(Ids.instructor, Ids.course, Capability.ManageOverrides)
    checker.grant(Ids.viewer, Ids.course, Capability.ViewOverrides)
    return checker


@pytest.fixture
def cache_backend() -> MemoryCache:
    return MemoryCache(namespace="test")


@pytest.fixture
def calendar() -> RecordingCalendarSynchronizer:
    return RecordingCalendarSynchronizer()


@pytest.fixture
def events() -> OverrideEventEmitter:
    return OverrideEventEmitter()


@pytest.fixture
def manager_factory(
    store: MemoryOverrideStore,
    directory: MemoryDirectory,
    cache_backend: MemoryCache,
    events: OverrideEventEmitter,
    calendar: RecordingCalendarSynchronizer,
    capabilities: MemoryCapabilityChecker,
) -> t.Callable[[UserID], OverrideManager]:
    def create_manager(actor_id: UserID = Ids.instructor) -> OverrideManager:
        return OverrideManager(
            actor_id=actor_id,
            store=store,
            directory=directory,
            cache=OverrideCache(cache_backend),
            events=events,
            calendar=calendar,
            capabilities=capabilities,
        )

    return create_manager


@pytest.fixture
def manager(manager_factory: t.Callable[..., OverrideManager]) -> OverrideManager:
    """A manager acting as an instructor who can manage overrides"""
    return manager_factory(Ids.instructor)
