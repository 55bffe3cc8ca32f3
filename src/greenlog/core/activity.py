"""Pure activity feed synthesis - no I/O dependencies.

Activities are never stored. They are rebuilt from notes, tasks, plants and
spaces on every call, so the same inputs always produce the same feed.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from enum import Enum
from typing import ClassVar, Union

from .records import Note, Plant, Space, Task

CONTENT_PREVIEW_LENGTH = 150


class ActivityType(str, Enum):
    NOTE_CREATED = "note_created"
    TASK_COMPLETED = "task_completed"
    PLANT_ADDED = "plant_added"
    PLANT_HARVESTED = "plant_harvested"
    PLANT_STATUS_CHANGED = "plant_status_changed"
    SPACE_CREATED = "space_created"


# Payloads


@dataclass(frozen=True)
class NoteCreatedData:
    note_id: str
    content: str
    category: str
    plant_id: str | None = None
    plant_name: str | None = None
    space_id: str | None = None
    space_name: str | None = None


@dataclass(frozen=True)
class TaskCompletedData:
    task_id: str
    title: str
    plant_id: str | None = None
    plant_name: str | None = None
    space_id: str | None = None
    space_name: str | None = None


@dataclass(frozen=True)
class PlantAddedData:
    plant_id: str
    plant_name: str
    variety: str
    space_id: str | None = None
    space_name: str | None = None


@dataclass(frozen=True)
class PlantHarvestedData:
    plant_id: str
    plant_name: str
    variety: str
    harvest_date: datetime
    notes: str | None = None
    space_id: str | None = None


@dataclass(frozen=True)
class PlantStatusChangedData:
    plant_id: str
    plant_name: str
    old_status: str
    new_status: str


@dataclass(frozen=True)
class SpaceCreatedData:
    space_id: str
    space_name: str
    space_type: str


# Activities - one class per discriminant


@dataclass(frozen=True)
class NoteCreated:
    type: ClassVar[ActivityType] = ActivityType.NOTE_CREATED

    id: str
    user_id: str
    timestamp: datetime
    data: NoteCreatedData
    is_public: bool = True


@dataclass(frozen=True)
class TaskCompleted:
    type: ClassVar[ActivityType] = ActivityType.TASK_COMPLETED

    id: str
    user_id: str
    timestamp: datetime
    data: TaskCompletedData
    is_public: bool = True


@dataclass(frozen=True)
class PlantAdded:
    type: ClassVar[ActivityType] = ActivityType.PLANT_ADDED

    id: str
    user_id: str
    timestamp: datetime
    data: PlantAddedData
    is_public: bool = True


@dataclass(frozen=True)
class PlantHarvested:
    type: ClassVar[ActivityType] = ActivityType.PLANT_HARVESTED

    id: str
    user_id: str
    timestamp: datetime
    data: PlantHarvestedData
    is_public: bool = True


@dataclass(frozen=True)
class PlantStatusChanged:
    type: ClassVar[ActivityType] = ActivityType.PLANT_STATUS_CHANGED

    id: str
    user_id: str
    timestamp: datetime
    data: PlantStatusChangedData
    is_public: bool = True


@dataclass(frozen=True)
class SpaceCreated:
    type: ClassVar[ActivityType] = ActivityType.SPACE_CREATED

    id: str
    user_id: str
    timestamp: datetime
    data: SpaceCreatedData
    is_public: bool = True


Activity = Union[
    NoteCreated,
    TaskCompleted,
    PlantAdded,
    PlantHarvested,
    PlantStatusChanged,
    SpaceCreated,
]


@dataclass
class ActivityFilters:
    """Optional narrowing of a generated feed."""

    types: list[str] = field(default_factory=list)
    public_only: bool = False
    limit: int | None = None
    plant_id: str | None = None
    space_id: str | None = None


def _note_activities(notes, plants_by_id, spaces_by_id) -> list[Activity]:
    activities = []
    for note in notes:
        if note.created_at is None:
            continue
        plant = plants_by_id.get(note.plant_id) if note.plant_id else None
        space = spaces_by_id.get(note.space_id) if note.space_id else None
        activities.append(
            NoteCreated(
                id=f"note-{note.id}",
                user_id=note.user_id,
                timestamp=note.created_at,
                data=NoteCreatedData(
                    note_id=note.id,
                    content=note.content[:CONTENT_PREVIEW_LENGTH],
                    category=note.category,
                    plant_id=note.plant_id,
                    plant_name=plant.name if plant else None,
                    space_id=note.space_id,
                    space_name=space.name if space else None,
                ),
            )
        )
    return activities


def _task_activities(tasks, plants_by_id, spaces_by_id) -> list[Activity]:
    activities = []
    for task in tasks:
        # Completed without a completion time: nothing to place on the timeline
        if not task.is_completed or task.completed_at is None:
            continue
        plant = plants_by_id.get(task.plant_id) if task.plant_id else None
        space = spaces_by_id.get(task.space_id) if task.space_id else None
        activities.append(
            TaskCompleted(
                id=f"task-{task.id}",
                user_id=task.user_id,
                timestamp=task.completed_at,
                data=TaskCompletedData(
                    task_id=task.id,
                    title=task.title,
                    plant_id=task.plant_id,
                    plant_name=plant.name if plant else None,
                    space_id=task.space_id,
                    space_name=space.name if space else None,
                ),
            )
        )
    return activities


def _plant_activities(plants, spaces_by_id) -> list[Activity]:
    activities = []
    for plant in plants:
        space_id = plant.space_id or None
        space = spaces_by_id.get(space_id) if space_id else None
        if plant.created_at is not None:
            activities.append(
                PlantAdded(
                    id=f"plant-added-{plant.id}",
                    user_id=plant.user_id,
                    timestamp=plant.created_at,
                    data=PlantAddedData(
                        plant_id=plant.id,
                        plant_name=plant.name,
                        variety=plant.variety,
                        space_id=space_id,
                        space_name=space.name if space else None,
                    ),
                )
            )
        if plant.is_harvested and plant.actual_harvest_date is not None:
            activities.append(
                PlantHarvested(
                    id=f"plant-harvested-{plant.id}",
                    user_id=plant.user_id,
                    timestamp=plant.actual_harvest_date,
                    data=PlantHarvestedData(
                        plant_id=plant.id,
                        plant_name=plant.name,
                        variety=plant.variety,
                        harvest_date=plant.actual_harvest_date,
                        notes=plant.notes,
                        space_id=space_id,
                    ),
                )
            )
    return activities


def _space_activities(spaces) -> list[Activity]:
    return [
        SpaceCreated(
            id=f"space-{space.id}",
            user_id=space.user_id,
            timestamp=space.created_at,
            data=SpaceCreatedData(
                space_id=space.id,
                space_name=space.name,
                space_type=space.type,
            ),
        )
        for space in spaces
        if space.created_at is not None
    ]


def _type_value(activity_type) -> str:
    # Filters and callers may pass enum members or plain strings
    return activity_type.value if isinstance(activity_type, ActivityType) else str(activity_type)


def _matches_plant(activity: Activity, plant_id: str) -> bool:
    return getattr(activity.data, "plant_id", None) == plant_id


def _matches_space(activity: Activity, space_id: str) -> bool:
    return getattr(activity.data, "space_id", None) == space_id


def generate_activities(
    notes: list[Note],
    tasks: list[Task],
    plants: list[Plant],
    spaces: list[Space],
    filters: ActivityFilters | None = None,
) -> list[Activity]:
    """
    Build the activity feed from one user's records, most recent first.

    Pure function - no I/O. Inputs must carry native datetimes, either all
    naive or all timezone-aware. Ties keep source order: notes, tasks,
    plants, then spaces.
    """
    plants_by_id = {p.id: p for p in plants}
    spaces_by_id = {s.id: s for s in spaces}

    activities: list[Activity] = []
    activities.extend(_note_activities(notes, plants_by_id, spaces_by_id))
    activities.extend(_task_activities(tasks, plants_by_id, spaces_by_id))
    activities.extend(_plant_activities(plants, spaces_by_id))
    activities.extend(_space_activities(spaces))

    activities.sort(key=lambda a: a.timestamp, reverse=True)

    if filters is None:
        return activities

    if filters.types:
        wanted = {_type_value(t) for t in filters.types}
        activities = [a for a in activities if a.type.value in wanted]

    if filters.public_only:
        activities = [a for a in activities if a.is_public]

    if filters.plant_id:
        activities = [a for a in activities if _matches_plant(a, filters.plant_id)]

    if filters.space_id:
        activities = [a for a in activities if _matches_space(a, filters.space_id)]

    # A limit of 0 or None means no cap
    if filters.limit:
        activities = activities[: max(filters.limit, 0)]

    return activities


def format_activity_description(activity: Activity) -> str:
    """Human-readable sentence for an activity. Never raises."""
    match activity:
        case NoteCreated(data=data):
            if data.plant_name:
                return f"Added a {data.category} note for {data.plant_name}"
            if data.space_name:
                return f"Added a {data.category} note for {data.space_name}"
            return f"Added a {data.category} note"
        case TaskCompleted(data=data):
            return f"Completed task: {data.title}"
        case PlantAdded(data=data):
            return f"Added {data.plant_name} ({data.variety})"
        case PlantHarvested(data=data):
            return f"Harvested {data.plant_name}"
        case PlantStatusChanged(data=data):
            return f"{data.plant_name} status changed to {data.new_status}"
        case SpaceCreated(data=data):
            return f"Created new {data.space_type} space: {data.space_name}"
        case _:
            return "Unknown activity"


DEFAULT_ICON = "Activity"

ACTIVITY_ICONS = {
    ActivityType.NOTE_CREATED.value: "StickyNote",
    ActivityType.TASK_COMPLETED.value: "CheckCircle2",
    ActivityType.PLANT_ADDED.value: "Sprout",
    ActivityType.PLANT_HARVESTED.value: "Sparkles",
    ActivityType.PLANT_STATUS_CHANGED.value: "TrendingUp",
    ActivityType.SPACE_CREATED.value: "Building2",
}


def get_activity_icon(activity_type: str) -> str:
    """Icon name for an activity type, DEFAULT_ICON when unknown."""
    return ACTIVITY_ICONS.get(_type_value(activity_type), DEFAULT_ICON)


def format_relative_time(timestamp: datetime, now: datetime | None = None) -> str:
    """
    Short relative age of a timestamp ("3 hours ago").

    Entries older than a week are shown as a date.
    """
    now = now or datetime.now(timestamp.tzinfo)
    seconds = int((now - timestamp).total_seconds())

    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    days = hours // 24
    if days < 7:
        return f"{days} day{'s' if days != 1 else ''} ago"
    return timestamp.strftime("%b %d, %Y")


def group_by_day(activities: list[Activity], tz: tzinfo | None = None) -> list[tuple[date, list[Activity]]]:
    """
    Group a sorted feed into consecutive (day, activities) sections.

    With tz, days are taken in that timezone instead of each timestamp's own.
    """
    groups: list[tuple[date, list[Activity]]] = []
    for activity in activities:
        stamp = activity.timestamp.astimezone(tz) if tz else activity.timestamp
        day = stamp.date()
        if groups and groups[-1][0] == day:
            groups[-1][1].append(activity)
        else:
            groups.append((day, [activity]))
    return groups
