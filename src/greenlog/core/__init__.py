"""Functional core - pure business logic with no I/O."""

from .records import Note, Task, Plant, Space, Recurrence
from .activity import (
    Activity,
    ActivityFilters,
    ActivityType,
    generate_activities,
    format_activity_description,
    get_activity_icon,
)
from .recurrence import advance_due_date, next_occurrence, preview_occurrences

__all__ = [
    # Records
    "Note",
    "Task",
    "Plant",
    "Space",
    "Recurrence",
    # Activity feed
    "Activity",
    "ActivityFilters",
    "ActivityType",
    "generate_activities",
    "format_activity_description",
    "get_activity_icon",
    # Recurrence
    "advance_due_date",
    "next_occurrence",
    "preview_occurrences",
]
