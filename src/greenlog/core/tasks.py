"""Pure task agenda logic - no I/O dependencies."""

from datetime import datetime, timedelta

from .records import Task


def start_of_day(value: datetime) -> datetime:
    """Midnight of the same day, keeping the timezone."""
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def filter_pending(tasks: list[Task]) -> list[Task]:
    """Pending tasks, soonest due first."""
    return sorted((t for t in tasks if not t.is_completed), key=lambda t: t.due_date)


def filter_overdue(tasks: list[Task], as_of: datetime) -> list[Task]:
    """
    Pending tasks due before the start of as_of's day.

    Pure function - no I/O.
    """
    today = start_of_day(as_of)
    return [t for t in filter_pending(tasks) if t.due_date < today]


def filter_upcoming(tasks: list[Task], as_of: datetime, days: int = 7) -> list[Task]:
    """
    Pending tasks due from the start of today through the next N days.

    Pure function - no I/O.
    """
    today = start_of_day(as_of)
    horizon = today + timedelta(days=days)
    return [t for t in filter_pending(tasks) if today <= t.due_date <= horizon]
