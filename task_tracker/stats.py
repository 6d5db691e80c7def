"""Completion statistics derived from a task store.

Statistics are recomputed on every call; the store may change between calls.
"""

from task_tracker.models import TaskStats
from task_tracker.store import TaskStore


def completion_rate(completed: int, total: int) -> int:
    """Percentage of completed tasks, rounded half up. Zero when there are no tasks."""
    if total <= 0:
        return 0
    # Integer form of floor(completed / total * 100 + 0.5); round() would use banker's rounding.
    return (200 * completed + total) // (2 * total)


def build_stats(total: int, completed: int) -> TaskStats:
    """Assemble TaskStats from a total and a completed count."""
    return TaskStats(
        total_tasks=total,
        completed_tasks=completed,
        pending_tasks=total - completed,
        completion_rate=completion_rate(completed, total),
    )


def derive_stats(store: TaskStore) -> TaskStats:
    """Snapshot the store's counts into a TaskStats."""
    total, completed = store.counts()
    return build_stats(total, completed)
