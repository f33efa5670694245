"""Serialize the task collection to and from a single durable slot."""

from __future__ import annotations

import json
from collections.abc import Sequence

from rich.markup import escape

from tasklist import log
from tasklist.storage import SlotStore
from tasklist.tasks.model import Task

STORAGE_KEY = "enchanting_todos_v1"


class PersistenceAdapter:
    """Load/save the full collection as one JSON array under *key*.

    ``load`` never raises: a missing, unreadable or malformed slot yields an
    empty list so that a corrupt store can never block start-up.  ``save``
    reports failure through its return value instead of raising.
    """

    def __init__(self, slots: SlotStore, key: str = STORAGE_KEY, retries: int = 1) -> None:
        self.slots = slots
        self.key = key
        self.retries = max(0, retries)

    def load(self) -> list[Task]:
        try:
            raw = self.slots.get(self.key)
        except (OSError, ValueError) as exc:
            log.warn(f"Could not read task store ({escape(str(exc))}); starting empty")
            return []
        if not raw:
            return []

        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            log.warn(f"Task store is not valid JSON ({escape(exc.msg)}); starting empty")
            return []
        except RecursionError:
            log.warn("Task store is nested too deeply to decode; starting empty")
            return []
        if not isinstance(parsed, list):
            log.warn("Task store does not hold a list; starting empty")
            return []

        tasks: list[Task] = []
        seen: set[str] = set()
        for index, entry in enumerate(parsed):
            if not isinstance(entry, dict):
                log.debug(f"Skipping non-object record at index {index}")
                continue
            try:
                task = Task.from_dict(entry, fallback_order=index)
            except ValueError as exc:
                log.debug(f"Skipping record at index {index}: {escape(str(exc))}")
                continue
            if task.id in seen:
                log.debug(f"Skipping duplicate id {task.id} at index {index}")
                continue
            seen.add(task.id)
            tasks.append(task)
        return tasks

    def save(self, tasks: Sequence[Task]) -> bool:
        """Overwrite the slot with *tasks*.  Returns ``False`` if every attempt failed."""
        payload = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)
        attempts = self.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                self.slots.set(self.key, payload)
                return True
            except OSError as exc:
                if attempt < attempts:
                    log.debug(f"Save attempt {attempt}/{attempts} failed: {escape(str(exc))}")
                    continue
                log.error(f"Could not save tasks after {attempts} attempt(s): {escape(str(exc))}")
        return False
