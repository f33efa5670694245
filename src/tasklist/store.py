"""Authoritative in-memory task collection and its mutation operations."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date
from typing import Any

from tasklist import log
from tasklist.persistence import PersistenceAdapter
from tasklist.tasks.model import (
    InvalidTaskError,
    Priority,
    Task,
    new_task_id,
    normalize_due,
    parse_tags,
)

Listener = Callable[["TaskStore"], None]

UPDATABLE_FIELDS = frozenset({"title", "completed", "due", "priority", "tags", "selected"})


def _coerce_priority(value: object) -> Priority:
    if isinstance(value, Priority):
        return value
    try:
        return Priority(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(p.value for p in Priority)
        raise InvalidTaskError(f"Unknown priority {value!r}; expected one of: {allowed}") from None


class TaskStore:
    """Owns the task list and keeps its ordering invariants.

    Usage::

        store = TaskStore(PersistenceAdapter(FileSlotStore(path)))
        store.load()
        task = store.create("Write report", tags=["work"])
        store.update(task.id, completed=True)
        store.reorder(moved_id, target_id)

    The list is held in insertion order; ``Task.order`` defines display order.
    Every successful mutation saves the whole collection and then notifies
    subscribers.  Operations that reference a missing id are silent no-ops.
    Callers only ever receive copies of the stored tasks.
    """

    def __init__(self, persistence: PersistenceAdapter, tasks: Iterable[Task] = ()) -> None:
        self._persistence = persistence
        self._tasks: list[Task] = [t.copy() for t in tasks]
        self._listeners: list[Listener] = []
        self.last_save_ok = True

    # ── loading ──────────────────────────────────────────────────

    def load(self, *, seed_if_empty: bool = True) -> None:
        """Replace the collection with the persisted one.

        When nothing usable is stored and *seed_if_empty* is set, the example
        tasks are installed in memory only; the first real mutation saves them.
        """
        self._tasks = self._persistence.load()
        log.debug(f"Loaded {len(self._tasks)} task(s)")
        if not self._tasks and seed_if_empty:
            self._tasks = self._seed_tasks()
            log.debug("Installed example tasks")

    def _seed_tasks(self) -> list[Task]:
        today = date.today().isoformat()
        # fixed ids so a seed task can be addressed before the first save
        seeds = [
            ("welcome0", "Welcome to Enchanting To‑Do ✨", today, Priority.NORMAL, ["welcome"]),
            ("tipsedit", "Edit tasks inline by typing", None, Priority.LOW, ["tips"]),
            ("prodrag0", "Drag to reorder items", None, Priority.HIGH, ["pro"]),
        ]
        return [
            Task(id=tid, title=title, due=due, priority=priority, tags=tags, order=order)
            for order, (tid, title, due, priority, tags) in enumerate(seeds)
        ]

    # ── queries ──────────────────────────────────────────────────

    def tasks(self) -> list[Task]:
        """Return copies of all tasks in insertion order."""
        return [t.copy() for t in self._tasks]

    def get(self, task_id: str) -> Task | None:
        task = self._find(task_id)
        return task.copy() if task else None

    def __len__(self) -> int:
        return len(self._tasks)

    def _find(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return -1

    # ── observers ────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* after every successful mutation.  Returns an unsubscribe hook."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self) -> None:
        self.last_save_ok = self._persistence.save(self._tasks)
        for listener in list(self._listeners):
            listener(self)

    # ── mutations ────────────────────────────────────────────────

    def create(
        self,
        title: str,
        tags: Iterable[str] | str = (),
        due: object = None,
        priority: Priority | str = Priority.NORMAL,
    ) -> Task:
        clean_title = (title or "").strip()
        if not clean_title:
            raise InvalidTaskError("Task title cannot be blank")

        next_order = max((t.order for t in self._tasks), default=-1) + 1
        task = Task(
            id=new_task_id({t.id for t in self._tasks}),
            title=clean_title,
            due=normalize_due(due),
            priority=_coerce_priority(priority),
            tags=parse_tags(tags),
            order=next_order,
        )
        self._tasks.append(task)
        log.debug(f"Created task {task.id} order={task.order}")
        self._commit()
        return task.copy()

    def update(self, task_id: str, **changes: Any) -> Task | None:
        """Merge *changes* into the task with *task_id*.

        A title that trims to empty is dropped from the changes and the old
        title kept.  Returns the updated copy, or ``None`` if the id is unknown.
        """
        unknown = sorted(set(changes) - UPDATABLE_FIELDS)
        if unknown:
            raise InvalidTaskError(f"Cannot update field(s): {', '.join(unknown)}")

        task = self._find(task_id)
        if task is None:
            log.debug(f"update: no task {task_id}")
            return None

        if "title" in changes:
            title = str(changes["title"] or "").strip()
            if title:
                changes["title"] = title
            else:
                log.debug(f"update: blank title ignored for {task_id}")
                del changes["title"]
        if "due" in changes:
            changes["due"] = normalize_due(changes["due"])
        if "priority" in changes:
            changes["priority"] = _coerce_priority(changes["priority"])
        if "tags" in changes:
            changes["tags"] = parse_tags(changes["tags"])
        for flag in ("completed", "selected"):
            if flag in changes:
                changes[flag] = bool(changes[flag])

        if not changes:
            return task.copy()

        for name, value in changes.items():
            setattr(task, name, value)
        self._commit()
        return task.copy()

    def toggle(self, task_id: str, completed: bool) -> Task | None:
        return self.update(task_id, completed=completed)

    def select(self, task_id: str, selected: bool = True) -> Task | None:
        return self.update(task_id, selected=selected)

    def delete(self, task_id: str) -> bool:
        """Remove the task.  Survivors keep their ``order`` values (gaps allowed)."""
        index = self._index_of(task_id)
        if index == -1:
            log.debug(f"delete: no task {task_id}")
            return False
        del self._tasks[index]
        self._commit()
        return True

    def reorder(self, moved_id: str, target_id: str) -> bool:
        """Move *moved_id* to the target's position, then renumber ``order`` densely.

        Both positions are taken before the moved task is removed, so moving
        up lands just before the target and moving down lands just after it.
        """
        if not moved_id or moved_id == target_id:
            return False
        from_idx = self._index_of(moved_id)
        to_idx = self._index_of(target_id)
        if from_idx == -1 or to_idx == -1:
            log.debug(f"reorder: unknown id in ({moved_id}, {target_id})")
            return False

        moved = self._tasks.pop(from_idx)
        self._tasks.insert(to_idx, moved)
        self._renumber()
        self._commit()
        return True

    def bulk_complete_selected(self) -> int:
        """Complete every selected task and clear its selection.

        Unselected tasks are untouched.  Always saves, even when nothing was
        selected.  Returns how many tasks went from active to completed.
        """
        newly_completed = 0
        for task in self._tasks:
            if not task.selected:
                continue
            if not task.completed:
                task.completed = True
                newly_completed += 1
            task.selected = False
        self._commit()
        return newly_completed

    def clear_completed(self) -> int:
        """Remove completed tasks and renumber the rest to ``0..n-1``."""
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if not t.completed]
        self._renumber()
        self._commit()
        return before - len(self._tasks)

    def _renumber(self) -> None:
        for index, task in enumerate(self._tasks):
            task.order = index
