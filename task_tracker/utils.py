"""Helpers for filtering, searching, sorting and paginating task sequences.

These work on a sequence supplied by the caller, never the store, and never
modify it. Malformed input is passed through (or produces an empty result)
instead of raising.
"""

import locale
import logging
import unicodedata
from collections.abc import Sequence
from typing import Any

from task_tracker.models import Page, Task, TaskStats, TaskStatus
from task_tracker.stats import build_stats

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

SORT_FIELDS = ("createdAt", "title")
SORT_ORDERS = ("asc", "desc")

logger = logging.getLogger(__name__)


def use_system_collation() -> None:
    """Collate titles with the host locale (LC_COLLATE from the environment)."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.warning("Host locale unavailable; title sort falls back to C collation")


def _title_key(task: Task) -> tuple[str, str]:
    """Sort key: accent-folded title first, locale collation as the tiebreak."""
    folded = unicodedata.normalize("NFKD", task.title).encode("ascii", "ignore").decode()
    return folded.casefold(), locale.strxfrm(task.title.casefold())


def _is_task_sequence(tasks: Any) -> bool:
    return isinstance(tasks, Sequence) and not isinstance(tasks, str | bytes)


def filter_by_status(tasks: Any, status: Any) -> Any:
    """Keep tasks whose status equals ``status``. A missing status is a no-op."""
    if not status or not _is_task_sequence(tasks):
        return tasks
    return [task for task in tasks if task.status == status]


def search_tasks(tasks: Any, term: Any) -> Any:
    """Case-insensitive substring search over titles. An empty term is a no-op."""
    if not term or not isinstance(term, str) or not _is_task_sequence(tasks):
        return tasks
    needle = term.strip().casefold()
    return [task for task in tasks if needle in task.title.casefold()]


def sort_by_date(tasks: Any, order: str = "desc") -> Any:
    if not _is_task_sequence(tasks):
        return tasks
    return sorted(tasks, key=lambda t: t.created_at, reverse=order != "asc")


def sort_by_title(tasks: Any, order: str = "asc") -> Any:
    """Sort by title ignoring case and accents, then by locale collation."""
    if not _is_task_sequence(tasks):
        return tasks
    return sorted(
        tasks,
        key=_title_key,
        reverse=order == "desc",
    )


def sort_tasks(tasks: Any, sort_by: str | None = None, order: str | None = None) -> Any:
    """Dispatch to sort_by_date or sort_by_title. Unknown fields leave the order alone."""
    if sort_by == "title":
        return sort_by_title(tasks, order or "asc")
    if sort_by == "createdAt":
        return sort_by_date(tasks, order or "desc")
    return tasks


def paginate(tasks: Any, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    """Slice one 1-based page out of tasks.

    The requested page is clamped into [1, total_pages]; with no items the
    page is 1. Page sizes below 1 fall back to the default, sizes above
    MAX_PAGE_SIZE are capped.
    """
    if not _is_task_sequence(tasks):
        return Page(page=1, page_size=DEFAULT_PAGE_SIZE)

    if not isinstance(page_size, int) or page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    page_size = min(page_size, MAX_PAGE_SIZE)
    if not isinstance(page, int):
        page = 1

    total_items = len(tasks)
    total_pages = -(-total_items // page_size)
    current = max(1, min(page, total_pages or 1))
    start = (current - 1) * page_size

    return Page(
        items=list(tasks[start : start + page_size]),
        page=current,
        page_size=page_size,
        total_pages=total_pages,
        total_items=total_items,
        has_next_page=current < total_pages,
        has_prev_page=current > 1,
    )


def task_statistics(tasks: Any) -> TaskStats:
    """Completion statistics over an arbitrary sequence of tasks."""
    if not _is_task_sequence(tasks):
        return TaskStats()
    items: list[Task] = list(tasks)
    completed = sum(1 for task in items if task.status == TaskStatus.COMPLETED)
    return build_stats(len(items), completed)
