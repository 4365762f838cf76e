"""CLI commands for managing courses, their members and quizzes."""

from __future__ import annotations

from sqlalchemy.orm import Session

import quizzical.lib.cli as click
from quizzical.core import di
from quizzical.model import Capability, CourseID, UserID
from quizzical.storage import capability as capability_storage
from quizzical.storage import course as course_storage
from quizzical.storage import group as group_storage
from quizzical.storage import quiz as quiz_storage
from quizzical.storage import user as user_storage


@click.group("course")
def course():
    """Manage courses, users, groups and quizzes."""
    ...


@course.command("create")
@click.argument("name")
@di.inject
def course_create(name: str, session: Session = di.Provide["storage.persistent.session"]) -> None:
    """Create a course named NAME."""
    with session.begin():
        created = course_storage.create(name=name, session=session)
    click.echo(f"Created course: {created.name}")
    click.echo(f"  ID: {created.course_id}")


@course.command("add-user")
@click.argument("email")
@click.argument("name")
@di.inject
def course_add_user(email: str, name: str, session: Session = di.Provide["storage.persistent.session"]) -> None:
    """Create a user account.

    EMAIL must not belong to another account.
    """
    with session.begin():
        if user_storage.get(email=email, session=session):
            click.echo(f"Error: User with email '{email}' already exists.", err=True)
            raise SystemExit(1)
        created = user_storage.create(email=email, name=name, session=session)
    click.echo(f"Created user: {created.name}")
    click.echo(f"  ID: {created.user_id}")
    click.echo(f"  Email: {created.email}")


@course.command("remove-user")
@click.argument("user_id", type=int)
@di.inject
def course_remove_user(user_id: int, session: Session = di.Provide["storage.persistent.session"]) -> None:
    """Mark a user account deleted; overrides can no longer name it."""
    with session.begin():
        try:
            user_storage.update(UserID(user_id), deleted=True, session=session)
        except KeyError as e:
            raise click.ClickException(str(e)) from e
    click.echo(f"Deleted user {user_id}")


@course.command("add-group")
@click.argument("course_id", type=int)
@click.argument("name")
@di.inject
def course_add_group(course_id: int, name: str, session: Session = di.Provide["storage.persistent.session"]) -> None:
    """Create a group NAME in the course COURSE_ID."""
    with session.begin():
        if not course_storage.get(CourseID(course_id), session=session):
            click.echo(f"Error: Course {course_id} not found.", err=True)
            raise SystemExit(1)
        created = group_storage.create(course_id=CourseID(course_id), name=name, session=session)
    click.echo(f"Created group: {created.name}")
    click.echo(f"  ID: {created.group_id}")


@course.command("add-quiz")
@click.argument("course_id", type=int)
@click.argument("name")
@click.option("--open", "time_open", type=int, help="open time, unix seconds")
@click.option("--close", "time_close", type=int, help="close time, unix seconds")
@click.option("--time-limit", type=int, help="seconds")
@click.option("--attempts", type=int)
@click.option("--password")
@di.inject
def course_add_quiz(
    course_id: int,
    name: str,
    time_open: int | None,
    time_close: int | None,
    time_limit: int | None,
    attempts: int | None,
    password: str | None,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Create a quiz NAME in the course COURSE_ID."""
    with session.begin():
        if not course_storage.get(CourseID(course_id), session=session):
            click.echo(f"Error: Course {course_id} not found.", err=True)
            raise SystemExit(1)
        created = quiz_storage.create(
            course_id=CourseID(course_id),
            name=name,
            time_open=time_open,
            time_close=time_close,
            time_limit=time_limit,
            attempts=attempts,
            password=password,
            session=session,
        )
    click.echo(f"Created quiz: {created.name}")
    click.echo(f"  ID: {created.quiz_id}")


@course.command("grant")
@click.argument("user_id", type=int)
@click.argument("course_id", type=int)
@click.argument("capability", type=click.EnumType(Capability))
@di.inject
def course_grant(
    user_id: int,
    course_id: int,
    capability: Capability,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Grant USER_ID a CAPABILITY in the course COURSE_ID."""
    with session.begin():
        capability_storage.grant(UserID(user_id), CourseID(course_id), capability, session=session)
    click.echo(f"Granted {capability.value} to user {user_id} in course {course_id}")


command = course
