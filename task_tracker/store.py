"""In-memory task storage.

The store is the only owner of task state. Tasks are kept in insertion order
and handed out as immutable values, so nothing a caller does to a returned
task can change what the store holds. Nothing is persisted; a store lives as
long as the process (or test) that constructed it.
"""

import logging
import secrets
import string
import threading
import time
from datetime import UTC, datetime
from typing import Any

from task_tracker.errors import InvalidStatus, InvalidTaskId, InvalidTitle, TaskNotFound
from task_tracker.models import Task, TaskStatus
from task_tracker.validation import TASK_ID_PREFIX, parse_status, parse_title, validate_task_id

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 9


def _now() -> datetime:
    """Current UTC time truncated to millisecond precision."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def generate_task_id() -> str:
    """Return a new id of the form task-<epoch ms>-<9 base36 chars>."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
    return f"{TASK_ID_PREFIX}{time.time_ns() // 1_000_000}-{suffix}"


class TaskStore:
    """Simple in-memory task storage.

    Every operation holds an internal lock, so mutations are serialized even
    when requests are served from a thread pool.

    Lookups and commands treat a missing id differently: ``get`` returns None,
    while ``update_status`` and ``delete`` raise TaskNotFound.
    """

    def __init__(self) -> None:
        """Initialize an empty task store."""
        self._tasks: list[Task] = []
        self._lock = threading.RLock()

    def _index_of(self, task_id: str) -> int | None:
        try:
            validate_task_id(task_id)
        except InvalidTaskId:
            return None
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        return None

    def _new_id(self) -> str:
        live = {task.id for task in self._tasks}
        task_id = generate_task_id()
        while task_id in live:
            task_id = generate_task_id()
        return task_id

    def create(self, title: Any) -> Task:
        """Create a new pending task and return it.

        Raises InvalidTitle when the title is missing, not a string, blank
        after trimming, or longer than 200 characters.
        """
        try:
            clean_title = parse_title(title)
        except InvalidTitle:
            logger.error("Invalid task title provided")
            raise
        with self._lock:
            now = _now()
            task = Task(
                id=self._new_id(),
                title=clean_title,
                status=TaskStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            self._tasks.append(task)
        logger.info('Task created: %s - "%s"', task.id, task.title)
        return task

    def list_all(self) -> list[Task]:
        """Return all tasks in insertion order, as a new list."""
        with self._lock:
            tasks = list(self._tasks)
        logger.info("Retrieved %d tasks", len(tasks))
        return tasks

    def get(self, task_id: str) -> Task | None:
        """Get a task by its ID, or None if not found."""
        with self._lock:
            index = self._index_of(task_id)
            task = None if index is None else self._tasks[index]
        if task is None:
            logger.warning("Task not found: %s", task_id)
        else:
            logger.info("Retrieved task: %s", task_id)
        return task

    def update_status(self, task_id: str, status: Any) -> Task:
        """Set a task's status and refresh its updated_at.

        Any transition is allowed, including setting the current status
        again. Raises InvalidStatus for values other than pending/completed
        and TaskNotFound for unknown ids.
        """
        try:
            new_status = parse_status(status)
        except InvalidStatus:
            logger.error("Invalid status: %r", status)
            raise
        with self._lock:
            index = self._index_of(task_id)
            if index is None:
                logger.error("Cannot update: task not found - %s", task_id)
                raise TaskNotFound(task_id)
            previous = self._tasks[index]
            # updated_at must never move backwards, even if the wall clock does
            updated_at = max(_now(), previous.updated_at)
            task = previous.model_copy(update={"status": new_status, "updated_at": updated_at})
            self._tasks[index] = task
        logger.info(
            "Task status updated: %s - %s -> %s",
            task_id,
            previous.status.value,
            new_status.value,
        )
        return task

    def delete(self, task_id: str) -> Task:
        """Remove a task permanently and return it. Raises TaskNotFound."""
        with self._lock:
            index = self._index_of(task_id)
            if index is None:
                logger.error("Cannot delete: task not found - %s", task_id)
                raise TaskNotFound(task_id)
            task = self._tasks.pop(index)
        logger.info('Task deleted: %s - "%s"', task_id, task.title)
        return task

    def count(self) -> int:
        """Number of live tasks."""
        with self._lock:
            return len(self._tasks)

    def completed_count(self) -> int:
        """Number of live tasks whose status is completed."""
        with self._lock:
            return sum(1 for task in self._tasks if task.is_completed)

    def counts(self) -> tuple[int, int]:
        """Total and completed counts, read together under one lock."""
        with self._lock:
            return len(self._tasks), sum(1 for task in self._tasks if task.is_completed)

    def clear(self) -> None:
        """Clear all tasks. Useful for testing."""
        with self._lock:
            self._tasks.clear()
        logger.info("All tasks cleared")
