"""Pydantic models for the Task Tracker API.

Attribute names are snake_case in Python and camelCase on the wire.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with millisecond precision."""
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ApiModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskStatus(str, Enum):
    """The two states a task can be in."""

    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def values(cls) -> list[str]:
        """The allowed status strings, in declaration order."""
        return [member.value for member in cls]


class Task(ApiModel):
    """A task record. Instances are immutable; the store replaces them on update."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque unique identifier (task-<ms>-<random>)")
    title: str = Field(..., description="The task title, 1-200 characters")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Completion status")
    created_at: datetime = Field(..., description="When the task was created")
    updated_at: datetime = Field(..., description="When the task status last changed")

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED


class TaskCreate(BaseModel):
    """Request body for creating a new task.

    The title is left untyped here; it is parsed by the store so that a
    missing or non-string title is reported the same way as an empty one.
    """

    title: Any = Field(default=None, description="The task title (required, 1-200 characters)")


class TaskUpdate(BaseModel):
    """Request body for changing a task's status."""

    status: Any = Field(default=None, description="New status: pending or completed")


class TaskStats(ApiModel):
    """Aggregate completion statistics."""

    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    completion_rate: int = 0


class Pagination(ApiModel):
    """Pagination metadata for a slice of tasks."""

    page: int = 1
    page_size: int = 10
    total_pages: int = 0
    total_items: int = 0
    has_next_page: bool = False
    has_prev_page: bool = False


class Page(Pagination):
    """One page of tasks together with its metadata."""

    items: list[Task] = Field(default_factory=list)

    @property
    def pagination(self) -> Pagination:
        return Pagination.model_validate(self.model_dump(exclude={"items"}))


class Envelope(ApiModel, Generic[T]):
    """Uniform success wrapper used on every API response."""

    success: bool = True
    message: str
    data: T


class TaskListEnvelope(Envelope[list[Task]]):
    """Envelope for task listings; pagination is present only when requested."""

    count: int
    pagination: Pagination | None = None


class ErrorResponse(ApiModel):
    """Uniform failure wrapper."""

    success: bool = False
    message: str
    error: str | None = None


class MemoryUsage(ApiModel):
    """Process memory figures in megabytes."""

    rss: int
    max_rss: int


class HealthResponse(ApiModel):
    """Response from the health check endpoint."""

    status: str = "healthy"
    uptime: int
    timestamp: str
    memory: MemoryUsage
    version: str = "1.0.0"
