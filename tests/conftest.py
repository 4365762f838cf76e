"""Pytest fixtures for quizzical tests.

The container is booted once per test session against the Test environment,
whose storage is a private in-memory SQLite database. Each test that asks for
`db_session` gets a brand new database with the full schema, so tests never
see each other's rows.

Usage:
    def test_get_quiz(db_session: Session, quiz_factory):
        quiz = quiz_factory(time_open=100, time_close=200)
        with db_session.begin():
            assert quiz_storage.get(quiz.quiz_id, session=db_session) == quiz
"""

from __future__ import annotations

import itertools
import os
import typing as t
from pathlib import Path

import pydantic as p
import pytest
from sqlalchemy.orm import Session

import quizzical
from quizzical.cache import MemoryCache
from quizzical.core import QuizzicalContainer
from quizzical.core.container.override import provide_override_manager
from quizzical.model import Capability, Course, CourseID, DeploymentEnvironment, Group, Quiz, User, UserID
from quizzical.override import OverrideCache, OverrideEventEmitter, OverrideManager
from quizzical.storage import capability as capability_storage
from quizzical.storage import course as course_storage
from quizzical.storage import group as group_storage
from quizzical.storage import quiz as quiz_storage
from quizzical.storage import user as user_storage
from quizzical.storage.table import metadata


@pytest.fixture(scope="session")
def container() -> t.Generator[QuizzicalContainer]:
    """Boot the DI container for the test session."""
    ct = QuizzicalContainer()
    root = Path(os.path.dirname(quizzical.__file__)).parent

    QuizzicalContainer.boot(
        ct,
        debug=True,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{root}/config"),
        override=(),
    )

    yield ct

    ct.shutdown_resources()


@pytest.fixture
def db_session(container: QuizzicalContainer) -> t.Generator[Session]:
    """Provide a session on a freshly created, empty database.

    Sessions do not autobegin, as in production: wrap reads and writes in
    `with db_session.begin():`.
    """
    persistent = container.storage().persistent()
    persistent.engine.reset()
    engine = persistent.engine()
    metadata.create_all(engine)

    session = persistent.session()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def course_factory(db_session: Session) -> t.Callable[..., Course]:
    def create_course(name: str = "Introduction to Testing") -> Course:
        with db_session.begin():
            return course_storage.create(name=name, session=db_session)

    return create_course


@pytest.fixture
def test_course(course_factory: t.Callable[..., Course]) -> Course:
    return course_factory()


@pytest.fixture
def user_factory(db_session: Session) -> t.Callable[..., User]:
    """Factory fixture for creating users; emails are unique unless given.

    Usage:
        def test_something(user_factory):
            user = user_factory(name="Ada")
            gone = user_factory(deleted=True)
    """
    counter = itertools.count(1)

    def create_user(email: str | None = None, name: str = "Test User", deleted: bool = False) -> User:
        if email is None:
            email = f"user{next(counter)}@acme.edu"

        with db_session.begin():
            user = user_storage.create(email=email, name=name, session=db_session)
            if deleted:
                user = user_storage.update(user.user_id, deleted=True, session=db_session)
            return user

    return create_user


@pytest.fixture
def test_user(user_factory: t.Callable[..., User]) -> User:
    return user_factory(name="Learner")


@pytest.fixture
def group_factory(db_session: Session, test_course: Course) -> t.Callable[..., Group]:
    def create_group(name: str = "Group A", course_id: CourseID | None = None) -> Group:
        with db_session.begin():
            return group_storage.create(
                course_id=course_id if course_id is not None else test_course.course_id, name=name, session=db_session
            )

    return create_group


@pytest.fixture
def test_group(group_factory: t.Callable[..., Group]) -> Group:
    return group_factory()


@pytest.fixture
def quiz_factory(db_session: Session, test_course: Course) -> t.Callable[..., Quiz]:
    """Factory fixture for quizzes in `test_course`.

    By default the quiz opens at 1000, closes at 2000, allows 3600 seconds and 1 attempt.
    """

    def create_quiz(
        name: str = "Quiz 1",
        course_id: CourseID | None = None,
        time_open: int | None = 1000,
        time_close: int | None = 2000,
        time_limit: int | None = 3600,
        attempts: int | None = 1,
        password: str | None = None,
    ) -> Quiz:
        with db_session.begin():
            return quiz_storage.create(
                course_id=course_id if course_id is not None else test_course.course_id,
                name=name,
                time_open=time_open,
                time_close=time_close,
                time_limit=time_limit,
                attempts=attempts,
                password=password,
                session=db_session,
            )

    return create_quiz


@pytest.fixture
def test_quiz(quiz_factory: t.Callable[..., Quiz]) -> Quiz:
    return quiz_factory()


@pytest.fixture
def grant(db_session: Session) -> t.Callable[..., None]:
    """Grant capabilities to a user in a course"""

    def grant_capabilities(user_id: UserID, course_id: CourseID, *capabilities: Capability) -> None:
        with db_session.begin():
            for c in capabilities:
                capability_storage.grant(user_id, course_id, c, session=db_session)

    return grant_capabilities


@pytest.fixture
def instructor(user_factory: t.Callable[..., User], grant: t.Callable[..., None], test_course: Course) -> User:
    """A user who can manage overrides in `test_course`"""
    user = user_factory(name="Instructor")
    grant(user.user_id, test_course.course_id, Capability.ManageOverrides)
    return user


@pytest.fixture
def override_cache() -> OverrideCache:
    return OverrideCache(MemoryCache(namespace="test"))


@pytest.fixture
def override_events() -> OverrideEventEmitter:
    return OverrideEventEmitter()


@pytest.fixture
def sql_manager(
    db_session: Session,
    override_cache: OverrideCache,
    override_events: OverrideEventEmitter,
) -> t.Callable[[UserID], OverrideManager]:
    """Build a database-backed manager acting for the given user"""

    def create_manager(actor_id: UserID) -> OverrideManager:
        return provide_override_manager(actor_id, session=db_session, cache=override_cache, events=override_events)

    return create_manager
