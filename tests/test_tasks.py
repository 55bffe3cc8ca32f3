"""Tests for task agenda filtering."""

from datetime import datetime, timezone

import pytest

from greenlog.core.records import Task
from greenlog.core.tasks import filter_overdue, filter_pending, filter_upcoming, start_of_day

UTC = timezone.utc


def make_task(task_id: str, due: datetime, status: str = "pending") -> Task:
    return Task(id=task_id, user_id="u1", title=task_id, due_date=due, status=status)


@pytest.fixture
def as_of():
    return datetime(2024, 4, 10, 15, 30, tzinfo=UTC)


@pytest.fixture
def tasks():
    return [
        make_task("later", datetime(2024, 4, 20, tzinfo=UTC)),
        make_task("yesterday", datetime(2024, 4, 9, 23, tzinfo=UTC)),
        make_task("this-morning", datetime(2024, 4, 10, 6, tzinfo=UTC)),
        make_task("done", datetime(2024, 4, 1, tzinfo=UTC), status="completed"),
        make_task("horizon", datetime(2024, 4, 17, tzinfo=UTC)),
    ]


def test_start_of_day_keeps_timezone(as_of):
    assert start_of_day(as_of) == datetime(2024, 4, 10, tzinfo=UTC)


def test_pending_sorted_and_excludes_completed(tasks):
    assert [t.id for t in filter_pending(tasks)] == ["yesterday", "this-morning", "horizon", "later"]


def test_overdue_is_before_today(tasks, as_of):
    assert [t.id for t in filter_overdue(tasks, as_of)] == ["yesterday"]


def test_task_due_earlier_today_is_not_overdue(tasks, as_of):
    assert "this-morning" not in {t.id for t in filter_overdue(tasks, as_of)}


def test_upcoming_includes_today_through_horizon(tasks, as_of):
    assert [t.id for t in filter_upcoming(tasks, as_of, days=7)] == ["this-morning", "horizon"]


def test_upcoming_default_window(tasks, as_of):
    assert filter_upcoming(tasks, as_of) == filter_upcoming(tasks, as_of, days=7)


def test_empty():
    assert filter_overdue([], datetime(2024, 1, 1, tzinfo=UTC)) == []
