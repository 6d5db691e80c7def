"""Shared builders for tests."""

from datetime import UTC, datetime, timedelta

from task_tracker.models import Task, TaskStatus

BASE_TIME = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)


def make_task(
    title: str,
    *,
    minutes: int = 0,
    status: TaskStatus = TaskStatus.PENDING,
) -> Task:
    """Build a task directly, created ``minutes`` after BASE_TIME."""
    created = BASE_TIME + timedelta(minutes=minutes)
    return Task(
        id=f"task-{int(created.timestamp() * 1000)}-{len(title):09d}",
        title=title,
        status=status,
        created_at=created,
        updated_at=created,
    )
