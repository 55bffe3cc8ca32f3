"""Workflow layer between the CLI and the functional core.

Each function loads what it needs through a DocumentStore, hands it to the
core, and writes back whatever the core decided.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .adapters.file_store import FileDocumentStore
from .adapters.firestore_api import FirestoreAdapter
from .config import Config
from .core.activity import Activity, ActivityFilters, generate_activities
from .core.records import Note, Plant, Space, Task, TaskStatus
from .core.tasks import filter_overdue, filter_pending, filter_upcoming
from .errors import DocumentNotFoundError, GreenlogError, RecordError, TaskAlreadyCompletedError
from .ports.document_store import NOTES, PLANTS, SPACES, TASKS, DocumentStore
from .scheduler import RecurrenceScheduler

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """All records belonging to one user."""

    notes: list[Note] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    plants: list[Plant] = field(default_factory=list)
    spaces: list[Space] = field(default_factory=list)


@dataclass
class CompletionResult:
    """Outcome of completing a task."""

    task: Task
    successor: Task | None = None


def get_store(config: Config) -> DocumentStore:
    """Resolve the configured document store backend."""
    match config.store_backend:
        case "firestore":
            return FirestoreAdapter(config)
        case "file" | "":
            return FileDocumentStore(config.data_path)
        case other:
            raise GreenlogError(f"Unknown store backend: {other!r}")


def _load_records(store: DocumentStore, collection: str, user_id: str, record_cls) -> list:
    """Convert documents to records, skipping the ones that don't parse."""
    records = []
    for doc in store.list_by_user(collection, user_id):
        try:
            records.append(record_cls.from_doc(doc))
        except RecordError as e:
            logger.warning(f"Skipping malformed {collection} document: {e}")
    return records


def load_snapshot(store: DocumentStore, user_id: str) -> Snapshot:
    """Load every source collection for a user."""
    return Snapshot(
        notes=_load_records(store, NOTES, user_id, Note),
        tasks=_load_records(store, TASKS, user_id, Task),
        plants=_load_records(store, PLANTS, user_id, Plant),
        spaces=_load_records(store, SPACES, user_id, Space),
    )


def build_feed(
    store: DocumentStore,
    user_id: str,
    filters: ActivityFilters | None = None,
) -> list[Activity]:
    """Load a user's records and generate their activity feed."""
    snapshot = load_snapshot(store, user_id)
    return generate_activities(
        snapshot.notes,
        snapshot.tasks,
        snapshot.plants,
        snapshot.spaces,
        filters,
    )


def pending_tasks(
    store: DocumentStore,
    user_id: str,
    overdue: bool = False,
    within_days: int | None = None,
    as_of: datetime | None = None,
) -> list[Task]:
    """
    Pending tasks for a user, soonest due first.

    overdue keeps tasks due before today; within_days keeps tasks due from
    today through that many days ahead. Days are local unless as_of says
    otherwise.
    """
    tasks = _load_records(store, TASKS, user_id, Task)
    as_of = as_of or datetime.now(timezone.utc).astimezone()
    if overdue:
        return filter_overdue(tasks, as_of)
    if within_days is not None:
        return filter_upcoming(tasks, as_of, within_days)
    return filter_pending(tasks)


def complete_task(
    store: DocumentStore,
    task_id: str,
    now: datetime | None = None,
) -> CompletionResult:
    """
    Mark a task completed, then schedule its next occurrence.

    The two steps are separate writes. If creating the successor fails the
    error propagates and the task stays completed.
    """
    doc = store.get(TASKS, task_id)
    if doc is None:
        raise DocumentNotFoundError(f"Task {task_id} not found")

    task = Task.from_doc(doc)
    if task.is_completed:
        raise TaskAlreadyCompletedError(f"Task {task_id} is already completed")

    now = now or datetime.now(timezone.utc)
    store.update(TASKS, task_id, {"status": TaskStatus.COMPLETED.value, "completedAt": now})
    task.status = TaskStatus.COMPLETED.value
    task.completed_at = now
    logger.info(f"Completed task {task_id}")

    successor = RecurrenceScheduler(store).on_task_completed(task)
    return CompletionResult(task=task, successor=successor)
