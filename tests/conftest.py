"""Shared fixtures for tasklist tests.

Storage in tests:
- Use MemorySlotStore for store/persistence tests so nothing touches disk.
- Use tmp_path for FileSlotStore and CLI tests so runs are isolated and cleaned up.
"""

from __future__ import annotations

import pytest

from tasklist.persistence import PersistenceAdapter
from tasklist.storage import MemorySlotStore, SlotStore
from tasklist.store import TaskStore
from tasklist.tasks.model import Priority, Task


class FlakySlotStore(SlotStore):
    """Memory store whose writes raise ``OSError`` for the first *failures* calls."""

    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.writes = 0
        self.slots: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.slots.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        if self.writes <= self.failures:
            raise OSError("disk full")
        self.slots[key] = value

    def delete(self, key: str) -> None:
        self.slots.pop(key, None)


def _make_task(
    id: str,
    title: str = "",
    completed: bool = False,
    due: str | None = None,
    priority: Priority = Priority.NORMAL,
    tags: list[str] | None = None,
    order: int = 0,
    selected: bool = False,
) -> Task:
    return Task(
        id=id,
        title=title or f"Task {id}",
        completed=completed,
        due=due,
        priority=priority,
        tags=tags or [],
        order=order,
        selected=selected,
    )


@pytest.fixture
def make_task():
    """Factory fixture that creates Task instances."""
    return _make_task


@pytest.fixture
def slots() -> MemorySlotStore:
    return MemorySlotStore()


@pytest.fixture
def adapter(slots: MemorySlotStore) -> PersistenceAdapter:
    return PersistenceAdapter(slots)


@pytest.fixture
def store(adapter: PersistenceAdapter) -> TaskStore:
    """An empty, loaded store without the example tasks."""
    s = TaskStore(adapter)
    s.load(seed_if_empty=False)
    return s


@pytest.fixture
def abcd_store(adapter: PersistenceAdapter) -> TaskStore:
    """Store holding tasks A, B, C, D in that order (orders 0..3)."""
    tasks = [_make_task(tid, order=i) for i, tid in enumerate("ABCD")]
    return TaskStore(adapter, tasks)


@pytest.fixture
def flaky_slots():
    """Factory for a slot store that fails its first N writes."""
    return FlakySlotStore
