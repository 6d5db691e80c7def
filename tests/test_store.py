"""Tests for the in-memory task store."""

import re
import threading
from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from task_tracker import store as store_module
from task_tracker.errors import InvalidStatus, InvalidTitle, TaskNotFound
from task_tracker.models import TaskStatus
from task_tracker.store import TaskStore, generate_task_id

ID_PATTERN = re.compile(r"^task-\d+-[a-z0-9]{9}$")


def test_create_returns_pending_task_with_trimmed_title(store: TaskStore) -> None:
    """Test that a new task is pending and its title is trimmed."""
    task = store.create("  Buy groceries  ")
    assert task.title == "Buy groceries"
    assert task.status == TaskStatus.PENDING
    assert task.created_at == task.updated_at
    assert task.created_at.tzinfo is not None
    assert task.created_at.microsecond % 1000 == 0


@pytest.mark.parametrize("title", ["", "   ", "\t\n", None, 42, ["a"], "x" * 201])
def test_create_rejects_invalid_titles(store: TaskStore, title: object) -> None:
    """Test that blank, missing, non-string and too-long titles are rejected."""
    with pytest.raises(InvalidTitle):
        store.create(title)
    assert store.count() == 0


def test_create_accepts_boundary_lengths(store: TaskStore) -> None:
    """Test the 1 and 200 character limits, measured after trimming."""
    assert store.create("a").title == "a"
    assert store.create("  " + "x" * 200 + "  ").title == "x" * 200


def test_ids_are_unique_and_prefixed(store: TaskStore) -> None:
    """Test that many rapid creates produce distinct, well-formed ids."""
    ids = [store.create(f"Task {i}").id for i in range(500)]
    assert len(set(ids)) == 500
    assert all(ID_PATTERN.match(task_id) for task_id in ids)


def test_generate_task_id_format() -> None:
    assert ID_PATTERN.match(generate_task_id())


def test_new_id_redraws_on_collision(store: TaskStore, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that an id already held by a live task is never reused."""
    ids = iter(["task-1-aaaaaaaaa", "task-1-aaaaaaaaa", "task-1-bbbbbbbbb"])
    monkeypatch.setattr(store_module, "generate_task_id", lambda: next(ids))

    first = store.create("First")
    second = store.create("Second")
    assert first.id == "task-1-aaaaaaaaa"
    assert second.id == "task-1-bbbbbbbbb"


def test_list_all_preserves_insertion_order(store: TaskStore) -> None:
    titles = ["Task 1", "Task 2", "Task 3"]
    for title in titles:
        store.create(title)
    assert [t.title for t in store.list_all()] == titles
    assert len(store.list_all()) == store.count()


def test_list_all_returns_independent_snapshot(store: TaskStore) -> None:
    """Test that mutating the returned list does not affect the store."""
    store.create("Keep me")
    snapshot = store.list_all()
    snapshot.clear()
    assert store.count() == 1
    assert len(store.list_all()) == 1


def test_returned_tasks_cannot_be_mutated(store: TaskStore) -> None:
    """Test that returned tasks are immutable values."""
    task = store.create("Immutable")
    with pytest.raises(ValidationError):
        task.title = "Changed"  # type: ignore[misc]
    assert store.get(task.id).title == "Immutable"


def test_get_returns_task_or_none(store: TaskStore) -> None:
    task = store.create("Find me")
    assert store.get(task.id) == task
    assert store.get("task-0-missing00") is None
    assert store.get("non-existent-id") is None


def test_update_status_round_trip(store: TaskStore) -> None:
    """Test completing and reopening a task keeps its identity fields."""
    task = store.create("Round trip")
    completed = store.update_status(task.id, "completed")
    reopened = store.update_status(task.id, "pending")

    assert completed.status == TaskStatus.COMPLETED
    assert reopened.status == TaskStatus.PENDING
    assert (reopened.id, reopened.title, reopened.created_at) == (
        task.id,
        task.title,
        task.created_at,
    )
    assert task.updated_at <= completed.updated_at <= reopened.updated_at
    assert reopened.updated_at >= reopened.created_at


def test_update_status_accepts_enum_member(store: TaskStore) -> None:
    task = store.create("Enum")
    assert store.update_status(task.id, TaskStatus.COMPLETED).is_completed


def test_update_status_noop_still_refreshes_updated_at(
    store: TaskStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test that setting the current status again is legal and bumps updated_at."""
    start = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
    ticks = iter([start, start + timedelta(seconds=1)])
    monkeypatch.setattr(store_module, "_now", lambda: next(ticks))

    task = store.create("Already pending")
    updated = store.update_status(task.id, "pending")
    assert updated.status == TaskStatus.PENDING
    assert updated.updated_at == start + timedelta(seconds=1)


def test_updated_at_never_moves_backwards(
    store: TaskStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test that a clock stepping backwards does not rewind updated_at."""
    start = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
    ticks = iter([start, start - timedelta(minutes=5)])
    monkeypatch.setattr(store_module, "_now", lambda: next(ticks))

    task = store.create("Clock skew")
    updated = store.update_status(task.id, "completed")
    assert updated.updated_at == start


def test_update_status_does_not_change_previous_copy(store: TaskStore) -> None:
    task = store.create("Snapshot")
    store.update_status(task.id, "completed")
    assert task.status == TaskStatus.PENDING
    assert store.get(task.id).status == TaskStatus.COMPLETED


@pytest.mark.parametrize("status", ["done", "Completed", "PENDING", "", None, 1])
def test_update_status_rejects_unknown_values(store: TaskStore, status: object) -> None:
    task = store.create("Strict")
    with pytest.raises(InvalidStatus):
        store.update_status(task.id, status)
    assert store.get(task.id).status == TaskStatus.PENDING


def test_invalid_status_message_lists_allowed_values(store: TaskStore) -> None:
    task = store.create("Message")
    with pytest.raises(InvalidStatus, match="pending, completed"):
        store.update_status(task.id, "archived")


def test_update_status_unknown_id(store: TaskStore) -> None:
    with pytest.raises(TaskNotFound) as excinfo:
        store.update_status("task-0-missing00", "completed")
    assert excinfo.value.task_id == "task-0-missing00"


def test_update_status_checks_status_before_id(store: TaskStore) -> None:
    with pytest.raises(InvalidStatus):
        store.update_status("non-existent-id", "done")


def test_delete_removes_task(store: TaskStore) -> None:
    """Test that deleting returns the task and removes it permanently."""
    keep = store.create("Keep")
    gone = store.create("Delete me")

    removed = store.delete(gone.id)

    assert removed == gone
    assert store.get(gone.id) is None
    assert store.count() == 1
    assert [t.id for t in store.list_all()] == [keep.id]


def test_delete_unknown_id(store: TaskStore) -> None:
    with pytest.raises(TaskNotFound, match="non-existent-id"):
        store.delete("non-existent-id")


def test_counts(store: TaskStore) -> None:
    ids = [store.create(f"Task {i}").id for i in range(3)]
    store.update_status(ids[0], "completed")
    store.update_status(ids[2], "completed")
    assert store.count() == 3
    assert store.completed_count() == 2


def test_clear(store: TaskStore) -> None:
    store.create("One")
    store.create("Two")
    store.clear()
    assert store.count() == 0
    assert store.list_all() == []


def test_separate_instances_are_isolated() -> None:
    first, second = TaskStore(), TaskStore()
    first.create("Only in first")
    assert second.count() == 0


def test_concurrent_creates_are_serialized(store: TaskStore) -> None:
    """Test that creates from many threads all land with distinct ids."""

    def worker() -> None:
        for i in range(100):
            store.create(f"Task {i}")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    tasks = store.list_all()
    assert store.count() == 800
    assert len({t.id for t in tasks}) == 800
