"""Parse raw client input into validated values before it reaches the store."""

import re
from typing import Any

from task_tracker.errors import InvalidStatus, InvalidTaskId, InvalidTitle
from task_tracker.models import TaskStatus

MIN_TITLE_LENGTH = 1
MAX_TITLE_LENGTH = 200
MAX_INPUT_LENGTH = 1000
TASK_ID_PREFIX = "task-"

_UNSAFE_CHARS = re.compile(r"[<>]")
_JS_PROTOCOL = re.compile(r"javascript:", re.IGNORECASE)


def parse_title(raw: Any) -> str:
    """Return the trimmed title, or raise InvalidTitle."""
    if raw is None or raw == "":
        raise InvalidTitle("Task title is required")
    if not isinstance(raw, str):
        raise InvalidTitle("Task title must be a string")
    title = raw.strip()
    if len(title) < MIN_TITLE_LENGTH:
        raise InvalidTitle("Task title cannot be empty")
    if len(title) > MAX_TITLE_LENGTH:
        raise InvalidTitle(f"Task title must be {MAX_TITLE_LENGTH} characters or less")
    return title


def parse_status(raw: Any) -> TaskStatus:
    """Return the TaskStatus named by raw, or raise InvalidStatus.

    Only the exact lowercase values are accepted.
    """
    if isinstance(raw, TaskStatus):
        return raw
    if raw is None or raw == "":
        raise InvalidStatus("Status is required")
    if not isinstance(raw, str) or raw not in TaskStatus.values():
        raise InvalidStatus(f"Status must be one of: {', '.join(TaskStatus.values())}")
    return TaskStatus(raw)


def validate_task_id(raw: Any) -> str:
    """Superficial shape check on a task id; not an identity guarantee."""
    if not raw or not isinstance(raw, str):
        raise InvalidTaskId("Task ID is required and must be a string")
    if not raw.startswith(TASK_ID_PREFIX):
        raise InvalidTaskId("Invalid task ID format")
    return raw


def sanitize_input(raw: Any) -> str:
    """Trim, strip angle brackets and javascript: and cap the length. Non-strings become ""."""
    if not isinstance(raw, str):
        return ""
    cleaned = _UNSAFE_CHARS.sub("", raw.strip())
    cleaned = _JS_PROTOCOL.sub("", cleaned)
    return cleaned[:MAX_INPUT_LENGTH]
