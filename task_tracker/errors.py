"""Failures raised by the task store and its input parsers.

All of these are expected, client-caused conditions. The request layer maps
them to HTTP status codes; the store never retries them.
"""


class StoreError(Exception):
    """Base class for task store failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidTitle(StoreError):
    """The title is missing, not a string, blank, or too long."""


class InvalidStatus(StoreError):
    """The status is not one of the allowed values."""


class InvalidTaskId(StoreError):
    """The task id is not shaped like one the store hands out."""


class TaskNotFound(StoreError):
    """No live task has the given id."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with ID {task_id} not found")
        self.task_id = task_id
