"""greenlog CLI - garden activity feed and recurring tasks."""

import json
import logging
import sys
from datetime import datetime

import click

from .config import load_config
from .core.activity import (
    ActivityFilters,
    ActivityType,
    format_activity_description,
    format_relative_time,
    get_activity_icon,
    group_by_day,
)
from .core.recurrence import preview_occurrences
from .errors import GreenlogError
from .workflows import build_feed, complete_task, get_store, pending_tasks


def _resolve_user(user: str | None, config) -> str:
    user = user or config.default_user_id
    if not user:
        click.echo("Error: no user given. Pass --user or set DEFAULT_USER_ID.", err=True)
        sys.exit(1)
    return user


@click.group()
@click.version_option(package_name="greenlog")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """greenlog - Garden tracking CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


@main.command()
@click.option("--user", "user", help="User id (defaults to DEFAULT_USER_ID)")
@click.option(
    "--type",
    "types",
    multiple=True,
    type=click.Choice([t.value for t in ActivityType]),
    help="Only show these activity types",
)
@click.option("--plant", "plant_id", help="Only activities for this plant id")
@click.option("--space", "space_id", help="Only activities for this space id")
@click.option("--limit", type=int, help="Maximum number of activities")
@click.option("--public-only", is_flag=True, help="Only public activities")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def feed(user, types, plant_id, space_id, limit, public_only, as_json):
    """Show the recent activity feed."""
    config = load_config()
    user_id = _resolve_user(user, config)
    filters = ActivityFilters(
        types=list(types),
        public_only=public_only,
        limit=limit if limit is not None else config.feed_limit,
        plant_id=plant_id,
        space_id=space_id,
    )

    try:
        activities = build_feed(get_store(config), user_id, filters)
    except GreenlogError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": a.id,
                        "type": a.type.value,
                        "timestamp": a.timestamp.isoformat(),
                        "icon": get_activity_icon(a.type),
                        "description": format_activity_description(a),
                    }
                    for a in activities
                ],
                indent=2,
            )
        )
        return

    if not activities:
        click.echo("No activity yet.")
        return

    local_tz = datetime.now().astimezone().tzinfo
    for day, group in group_by_day(activities, local_tz):
        click.echo(f"### {day.strftime('%A, %B %d')}")
        for activity in group:
            when = format_relative_time(activity.timestamp)
            click.echo(f"  [{get_activity_icon(activity.type)}] {format_activity_description(activity)} ({when})")
        click.echo()


@main.command()
@click.argument("task_id")
def complete(task_id: str):
    """Mark a task completed and schedule its next occurrence."""
    config = load_config()
    try:
        result = complete_task(get_store(config), task_id)
    except GreenlogError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Completed: {result.task.title}")
    if result.successor:
        click.echo(f"Next occurrence due {result.successor.due_date.date().isoformat()}")


@main.command()
@click.option("--user", "user", help="User id (defaults to DEFAULT_USER_ID)")
@click.option("--overdue", is_flag=True, help="Only tasks due before today")
@click.option("--within", "within_days", type=int, help="Only tasks due within the next N days")
@click.option("--preview", type=int, default=0, help="Show the next N recurrence dates")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def tasks(user, overdue: bool, within_days: int | None, preview: int, as_json: bool):
    """List pending tasks, soonest due first."""
    config = load_config()
    user_id = _resolve_user(user, config)
    try:
        pending = pending_tasks(get_store(config), user_id, overdue=overdue, within_days=within_days)
    except GreenlogError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": t.id,
                        "title": t.title,
                        "priority": t.priority,
                        "due_date": t.due_date.date().isoformat(),
                        "recurrence": t.recurrence.type if t.recurrence else None,
                        "upcoming": [d.date().isoformat() for d in preview_occurrences(t, preview)],
                    }
                    for t in pending
                ],
                indent=2,
            )
        )
        return

    if not pending:
        click.echo("No pending tasks.")
        return

    for task in pending:
        repeat = f" (repeats {task.recurrence.type}, interval {task.recurrence.interval})" if task.recurrence else ""
        click.echo(f"[{task.priority:6}] {task.title} - due {task.due_date.date().isoformat()}{repeat}")
        for upcoming in preview_occurrences(task, preview):
            click.echo(f"          then {upcoming.date().isoformat()}")
