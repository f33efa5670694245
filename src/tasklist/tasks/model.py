"""Task data model and the small value helpers shared by the store and views."""

from __future__ import annotations

import secrets
import string
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

ID_ALPHABET = string.digits + string.ascii_lowercase
ID_LENGTH = 8


class Priority(str, Enum):
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"

    @classmethod
    def coerce(cls, raw: object) -> Priority:
        """Return the matching priority, or ``NORMAL`` for anything unrecognized."""
        if isinstance(raw, Priority):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.NORMAL


class InvalidTaskError(ValueError):
    """Raised when a task operation is given input that can never be valid."""


@dataclass
class Task:
    id: str
    title: str
    completed: bool = False
    due: str | None = None
    priority: Priority = Priority.NORMAL
    tags: list[str] = field(default_factory=list)
    order: int = 0
    selected: bool = False

    def copy(self) -> Task:
        return Task(
            id=self.id,
            title=self.title,
            completed=self.completed,
            due=self.due,
            priority=self.priority,
            tags=list(self.tags),
            order=self.order,
            selected=self.selected,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted record layout. ``due`` is omitted when unset."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "priority": self.priority.value,
            "tags": list(self.tags),
            "order": self.order,
            "selected": self.selected,
        }
        if self.due:
            data["due"] = self.due
        return data

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], *, fallback_order: int = 0) -> Task:
        """Build a task from a persisted record.

        ``id`` and ``title`` are required strings; every other field falls back
        to its default when absent or of the wrong type.
        """
        tid = raw.get("id")
        title = raw.get("title")
        if not isinstance(tid, str) or not tid:
            raise ValueError(f"task record has no usable id: {tid!r}")
        if not isinstance(title, str):
            raise ValueError(f"task {tid} has no usable title")

        tags = raw.get("tags")
        order = raw.get("order")
        return cls(
            id=tid,
            title=title,
            completed=raw.get("completed") is True,
            due=normalize_due(raw.get("due")),
            priority=Priority.coerce(raw.get("priority")),
            tags=[str(t) for t in tags if t] if isinstance(tags, list) else [],
            # bool is an int subclass; a stray true/false is not an order
            order=order if isinstance(order, int) and not isinstance(order, bool) else fallback_order,
            selected=raw.get("selected") is True,
        )


def new_task_id(existing: Collection[str] = ()) -> str:
    """Return a short random base-36 token not present in *existing*."""
    while True:
        tid = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))
        if tid not in existing:
            return tid


def parse_tags(raw: str | Iterable[str] | None) -> list[str]:
    """Split comma-separated tags, trimming each and dropping empties.

    An iterable is treated as already split; each item is converted with
    ``str`` and trimmed, and ``None`` items are dropped.
    """
    if not raw:
        return []
    parts = raw.split(",") if isinstance(raw, str) else (str(p) for p in raw if p is not None)
    return [p.strip() for p in parts if p.strip()]


def normalize_due(value: object) -> str | None:
    """Return *value* as a stored due string (ISO date when possible) or ``None``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    return text or None
