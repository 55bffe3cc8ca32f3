"""Pure source record types - no I/O dependencies.

Documents use camelCase keys (``userId``, ``dueDate``). Dates are expected
to be native datetimes; ISO-8601 strings are accepted as well so JSON-backed
stores can hand documents over unchanged.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum

from greenlog.errors import RecordError


class NoteCategory(str, Enum):
    OBSERVATION = "observation"
    FEEDING = "feeding"
    PRUNING = "pruning"
    ISSUE = "issue"
    MILESTONE = "milestone"
    GENERAL = "general"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class PlantStatus(str, Enum):
    SEEDLING = "seedling"
    VEGETATIVE = "vegetative"
    FLOWERING = "flowering"
    HARVESTED = "harvested"
    REMOVED = "removed"


class RecurrenceType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def parse_datetime(value) -> datetime | None:
    """Coerce a document value to a datetime (None stays None)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str):
        try:
            # fromisoformat only accepts a trailing Z from 3.11 on
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise RecordError(f"Invalid date value: {value!r}")
    raise RecordError(f"Unsupported date value: {value!r}")


def _require(data: dict, key: str):
    if data.get(key) is None:
        raise RecordError(f"Document {data.get('id', '?')!r} is missing {key!r}")
    return data[key]


def _int_value(data: dict, key: str, default: int) -> int:
    value = data.get(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise RecordError(f"Document {data.get('id', '?')!r} has non-numeric {key!r}: {value!r}")


def _enum_value(enum_cls, value, default):
    """Enum member for value, or default when value is unknown."""
    try:
        return enum_cls(value)
    except ValueError:
        return default


@dataclass
class Recurrence:
    """How a task repeats after completion."""

    type: str
    interval: int = 1
    end_date: datetime | None = None

    @classmethod
    def from_doc(cls, data: dict) -> "Recurrence":
        interval = _int_value(data, "interval", 1)
        return cls(
            type=str(_require(data, "type")),
            interval=max(interval, 1),
            end_date=parse_datetime(data.get("endDate")),
        )

    def to_doc(self) -> dict:
        return {"type": self.type, "interval": self.interval, "endDate": self.end_date}


@dataclass
class Note:
    """A journal note, optionally attached to a plant or space."""

    id: str
    user_id: str
    content: str
    category: str
    created_at: datetime
    plant_id: str | None = None
    space_id: str | None = None
    photos: list[str] = field(default_factory=list)
    timestamp: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_doc(cls, data: dict) -> "Note":
        return cls(
            id=_require(data, "id"),
            user_id=_require(data, "userId"),
            content=data.get("content") or "",
            category=data.get("category") or NoteCategory.GENERAL.value,
            created_at=parse_datetime(_require(data, "createdAt")),
            plant_id=data.get("plantId"),
            space_id=data.get("spaceId"),
            photos=list(data.get("photos") or []),
            timestamp=parse_datetime(data.get("timestamp")),
            updated_at=parse_datetime(data.get("updatedAt")),
        )


@dataclass
class Task:
    """A garden task. Each occurrence of a recurring task is its own record."""

    id: str | None
    user_id: str
    title: str
    due_date: datetime
    priority: str = TaskPriority.MEDIUM.value
    status: str = TaskStatus.PENDING.value
    description: str = ""
    plant_id: str | None = None
    space_id: str | None = None
    recurrence: Recurrence | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED.value

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    @classmethod
    def from_doc(cls, data: dict) -> "Task":
        recurrence = data.get("recurrence")
        if recurrence is not None and not isinstance(recurrence, dict):
            raise RecordError(f"Document {data.get('id', '?')!r} has malformed 'recurrence'")
        priority = _enum_value(TaskPriority, data.get("priority"), TaskPriority.MEDIUM)
        status = _enum_value(TaskStatus, data.get("status"), TaskStatus.PENDING)
        return cls(
            id=_require(data, "id"),
            user_id=_require(data, "userId"),
            title=data.get("title") or "",
            due_date=parse_datetime(_require(data, "dueDate")),
            priority=priority.value,
            status=status.value,
            description=data.get("description") or "",
            plant_id=data.get("plantId"),
            space_id=data.get("spaceId"),
            recurrence=Recurrence.from_doc(recurrence) if recurrence else None,
            completed_at=parse_datetime(data.get("completedAt")),
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
        )

    def to_doc(self) -> dict:
        """Document fields for writing. Store-managed fields are left out."""
        return {
            "userId": self.user_id,
            "plantId": self.plant_id,
            "spaceId": self.space_id,
            "title": self.title,
            "description": self.description,
            "dueDate": self.due_date,
            "priority": self.priority,
            "status": self.status,
            "recurrence": self.recurrence.to_doc() if self.recurrence else None,
            "completedAt": self.completed_at,
        }


@dataclass
class Plant:
    """A plant growing in a space."""

    id: str
    user_id: str
    space_id: str
    name: str
    variety: str
    status: str
    created_at: datetime
    planted_date: datetime | None = None
    expected_harvest_date: datetime | None = None
    actual_harvest_date: datetime | None = None
    notes: str | None = None

    @property
    def is_harvested(self) -> bool:
        return self.status == PlantStatus.HARVESTED.value

    @classmethod
    def from_doc(cls, data: dict) -> "Plant":
        return cls(
            id=_require(data, "id"),
            user_id=_require(data, "userId"),
            space_id=data.get("spaceId") or "",
            name=data.get("name") or "",
            variety=data.get("variety") or "",
            status=data.get("status") or PlantStatus.SEEDLING.value,
            created_at=parse_datetime(_require(data, "createdAt")),
            planted_date=parse_datetime(data.get("plantedDate")),
            expected_harvest_date=parse_datetime(data.get("expectedHarvestDate")),
            actual_harvest_date=parse_datetime(data.get("actualHarvestDate")),
            notes=data.get("notes"),
        )


@dataclass
class Space:
    """A grow space (tent, bed, greenhouse, ...)."""

    id: str
    user_id: str
    name: str
    type: str
    created_at: datetime
    plant_count: int = 0

    @classmethod
    def from_doc(cls, data: dict) -> "Space":
        return cls(
            id=_require(data, "id"),
            user_id=_require(data, "userId"),
            name=data.get("name") or "",
            type=data.get("type") or "",
            created_at=parse_datetime(_require(data, "createdAt")),
            plant_count=_int_value(data, "plantCount", 0),
        )
