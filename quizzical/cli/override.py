"""CLI commands for quiz overrides."""

from __future__ import annotations

import typing as t

import pydantic as p

import quizzical.lib.cli as click
from quizzical.api import OverrideRecord
from quizzical.core import di
from quizzical.model import OverrideID, QuizID, UserID
from quizzical.override import OverrideError, OverrideManager

ManagerFactory = t.Callable[..., OverrideManager]

actor_option = click.option(
    "--actor", "-a", "actor_id", type=int, required=True, help="id of the user performing the operation"
)


@click.group("override")
def override():
    """Inspect and change per-user and per-group quiz overrides."""
    ...


@override.command("list")
@click.argument("quiz_id", type=int)
@actor_option
@di.inject
def override_list(
    quiz_id: int,
    actor_id: int,
    manager_factory: ManagerFactory = di.Provide["override.manager.provider"],
) -> None:
    """Print the overrides of QUIZ_ID, one JSON object per line."""
    manager = manager_factory(actor_id=UserID(actor_id))
    try:
        overrides = manager.get_all_overrides(QuizID(quiz_id))
    except OverrideError as e:
        raise click.ClickException(str(e)) from e
    for o in overrides:
        click.echo(OverrideRecord.from_override(o).model_dump_json())


@override.command("show")
@click.argument("override_id", type=int)
@actor_option
@di.inject
def override_show(
    override_id: int,
    actor_id: int,
    manager_factory: ManagerFactory = di.Provide["override.manager.provider"],
) -> None:
    manager = manager_factory(actor_id=UserID(actor_id))
    try:
        o = manager.get_override(OverrideID(override_id))
    except OverrideError as e:
        raise click.ClickException(str(e)) from e
    click.echo(OverrideRecord.from_override(o).model_dump_json(indent=2))


@override.command("upsert")
@click.argument("quiz_id", type=int)
@actor_option
@click.option("--id", "override_id", type=int, help="update this override instead of creating one")
@click.option("--user", "user_id", type=int, help="the user this override applies to")
@click.option("--group", "group_id", type=int, help="the group this override applies to")
@click.option("--open", "time_open", type=int, help="open time, unix seconds")
@click.option("--close", "time_close", type=int, help="close time, unix seconds")
@click.option("--time-limit", type=int, help="seconds")
@click.option("--attempts", type=int)
@click.option("--password")
@di.inject
def override_upsert(
    quiz_id: int,
    actor_id: int,
    override_id: int | None,
    user_id: int | None,
    group_id: int | None,
    time_open: int | None,
    time_close: int | None,
    time_limit: int | None,
    attempts: int | None,
    password: str | None,
    manager_factory: ManagerFactory = di.Provide["override.manager.provider"],
) -> None:
    """Create or update the override of one user or group in QUIZ_ID.

    Give exactly one of --user, --group when creating. Settings left out keep
    their current value when updating.
    """
    given = {
        "id": override_id,
        "userid": user_id,
        "groupid": group_id,
        "timeopen": time_open,
        "timeclose": time_close,
        "timelimit": time_limit,
        "attempts": attempts,
        "password": password,
    }
    formdata = {"quizid": quiz_id, **{k: v for k, v in given.items() if v is not None}}

    manager = manager_factory(actor_id=UserID(actor_id))
    try:
        saved = manager.upsert_override(formdata)
    except (OverrideError, p.ValidationError) as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Saved override {saved}")


@override.command("delete")
@click.argument("override_ids", type=int, nargs=-1, required=True)
@actor_option
@di.inject
def override_delete(
    override_ids: tuple[int, ...],
    actor_id: int,
    manager_factory: ManagerFactory = di.Provide["override.manager.provider"],
) -> None:
    """Delete each of OVERRIDE_IDS."""
    manager = manager_factory(actor_id=UserID(actor_id))
    for override_id in override_ids:
        try:
            manager.delete_override(OverrideID(override_id))
        except OverrideError as e:
            raise click.ClickException(f"{override_id}: {e}") from e
        click.echo(f"Deleted override {override_id}")


@override.command("delete-all")
@click.argument("quiz_id", type=int)
@actor_option
@click.option("--audit/--no-audit", default=True, help="emit a deletion event per override")
@click.confirmation_option(prompt="Delete every override of this quiz?")
@di.inject
def override_delete_all(
    quiz_id: int,
    actor_id: int,
    audit: bool,
    manager_factory: ManagerFactory = di.Provide["override.manager.provider"],
) -> None:
    manager = manager_factory(actor_id=UserID(actor_id))
    try:
        n = manager.delete_all_overrides(QuizID(quiz_id), audit=audit)
    except OverrideError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Deleted {n} override(s)")


command = override
