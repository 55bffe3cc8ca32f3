"""Recurring task scheduler - materializes the next occurrence of a task."""

import logging
from dataclasses import replace

from .core.records import Task
from .core.recurrence import next_occurrence
from .ports.document_store import TASKS, DocumentStore

logger = logging.getLogger(__name__)


class RecurrenceScheduler:
    """
    Creates the successor of a completed recurring task.

    Each occurrence is its own task document; nothing links successive
    occurrences besides their due dates.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def on_task_completed(self, task: Task) -> Task | None:
        """
        Persist the next occurrence of a just-completed task.

        Returns the stored successor, or None when the task does not recur
        or its series has ended. Store errors propagate to the caller and
        are not retried; the completed task is left as is.
        """
        successor = next_occurrence(task)
        if successor is None:
            if task.recurrence is not None:
                logger.info(f"Recurring task {task.id} reached its end date")
            return None

        doc_id = self.store.create(TASKS, successor.to_doc())
        logger.info(f"Scheduled next occurrence of {task.id} as {doc_id} due {successor.due_date.date()}")
        return replace(successor, id=doc_id)
