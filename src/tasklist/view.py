"""Filtered, sorted projections of the task list and display text helpers."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum

from tasklist.tasks.model import Task


class StatusFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class PriorityFilter(str, Enum):
    ALL = "all"
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


@dataclass(frozen=True)
class Filters:
    query: str = ""
    status: StatusFilter = StatusFilter.ALL
    priority: PriorityFilter = PriorityFilter.ALL

    @classmethod
    def parse(cls, query: str = "", status: str = "all", priority: str = "all") -> Filters:
        """Build filters from raw strings.  Raises ``ValueError`` on unknown values."""
        return cls(
            query=query or "",
            status=StatusFilter(status.lower()),
            priority=PriorityFilter(priority.lower()),
        )


def haystack(task: Task) -> str:
    """Lowercased text the query is matched against: title then space-joined tags."""
    return f"{task.title} {' '.join(task.tags)}".lower()


def matches(task: Task, filters: Filters) -> bool:
    if filters.status == StatusFilter.ACTIVE and task.completed:
        return False
    if filters.status == StatusFilter.COMPLETED and not task.completed:
        return False
    if filters.priority != PriorityFilter.ALL and task.priority.value != filters.priority.value:
        return False
    query = filters.query.lower()
    if query and query not in haystack(task):
        return False
    return True


def project(tasks: Iterable[Task], filters: Filters | None = None) -> list[Task]:
    """Return the tasks to display: sorted by ``order`` (stable), then filtered.

    The input is never mutated and a new list is returned on every call.
    """
    filters = filters or Filters()
    ordered = sorted(tasks, key=lambda t: t.order)
    return [t for t in ordered if matches(t, filters)]


def format_due(due: str | None, today: date | None = None) -> str:
    """Describe a due date relative to *today* at day granularity."""
    if not due:
        return ""
    today = today or date.today()
    try:
        due_day = date.fromisoformat(due)
    except ValueError:
        return f"Due {due}"

    diff = (due_day - today).days
    if diff < 0:
        return f"Overdue by {-diff}d"
    if diff == 0:
        return "Due today"
    if diff == 1:
        return "Due tomorrow"
    return f"Due in {diff}d"


def format_tags(tags: Sequence[str]) -> str:
    if not tags:
        return ""
    return "#" + "  #".join(tags)


def remaining_summary(tasks: Sequence[Task]) -> str:
    """Counter line: active count and total, e.g. ``2 items left • 5 total``."""
    active = sum(1 for t in tasks if not t.completed)
    noun = "item" if active == 1 else "items"
    return f"{active} {noun} left • {len(tasks)} total"
