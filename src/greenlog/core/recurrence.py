"""Pure recurrence logic - no I/O dependencies."""

import calendar
from dataclasses import replace
from datetime import datetime, timedelta

from .records import RecurrenceType, Task, TaskStatus


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the end of the target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def advance_due_date(due: datetime, recurrence_type: str, interval: int = 1) -> datetime:
    """
    Next due date for a recurrence rule.

    Unknown recurrence types advance by a single day.
    """
    match recurrence_type:
        case RecurrenceType.DAILY.value:
            return due + timedelta(days=interval)
        case RecurrenceType.WEEKLY.value:
            return due + timedelta(weeks=interval)
        case RecurrenceType.MONTHLY.value:
            return add_months(due, interval)
        case _:
            return due + timedelta(days=1)


def next_occurrence(task: Task) -> Task | None:
    """
    The pending task that follows a completed occurrence.

    Returns None for non-recurring tasks and for series whose end date falls
    before the next due date. The successor has no id until it is stored.
    Pure function - no I/O.
    """
    recurrence = task.recurrence
    if recurrence is None:
        return None

    next_due = advance_due_date(task.due_date, recurrence.type, recurrence.interval)
    if recurrence.end_date is not None and next_due > recurrence.end_date:
        return None

    return Task(
        id=None,
        user_id=task.user_id,
        title=task.title,
        due_date=next_due,
        priority=task.priority,
        status=TaskStatus.PENDING.value,
        description=task.description,
        plant_id=task.plant_id,
        space_id=task.space_id,
        recurrence=replace(recurrence),
    )


def preview_occurrences(task: Task, count: int = 3) -> list[datetime]:
    """Due dates of the next ``count`` occurrences, stopping at the end date."""
    dates = []
    current = task
    for _ in range(count):
        successor = next_occurrence(current)
        if successor is None:
            break
        dates.append(successor.due_date)
        current = successor
    return dates
