"""tasklist CLI: the terminal front end over the task store.

Installed as ``tasklist`` console_script via pip.
"""

from __future__ import annotations

from datetime import datetime

import click
from rich.markup import escape

from tasklist import __version__
from tasklist import log as tlog
from tasklist.config import Config, build_store
from tasklist.store import TaskStore
from tasklist.tasks.model import InvalidTaskError, Priority, Task
from tasklist.view import (
    Filters,
    PriorityFilter,
    StatusFilter,
    format_due,
    format_tags,
    project,
    remaining_summary,
)

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

PRIORITY_CHOICE = click.Choice([p.value for p in Priority], case_sensitive=False)
DUE_TYPE = click.DateTime(formats=["%Y-%m-%d"])

_PRIORITY_STYLE: dict[Priority, str] = {
    Priority.HIGH: "bold red",
    Priority.NORMAL: "blue",
    Priority.LOW: "dim",
}


# ── Store access ─────────────────────────────────────────────────────


def _store(ctx: click.Context) -> TaskStore:
    """Build the store on first use and cache it on the shared context object."""
    state = ctx.ensure_object(dict)
    if "store" not in state:
        cfg: Config = state["config"]
        store = build_store(cfg)
        if state.get("show"):
            store.subscribe(lambda s: _render(project(s.tasks())))
        state["store"] = store
    return state["store"]


def _resolve_id(store: TaskStore, raw: str) -> str:
    """Accept a full id or a unique prefix.  Unknown ids pass through unchanged."""
    raw = raw.strip()
    ids = [t.id for t in store.tasks()]
    if raw in ids:
        return raw
    candidates = [tid for tid in ids if tid.startswith(raw)]
    if len(candidates) > 1:
        raise click.BadParameter(
            f"'{raw}' matches several tasks: {', '.join(sorted(candidates))}.",
            param_hint="ID",
        )
    if candidates:
        return candidates[0]
    return raw


def _ensure_saved(ctx: click.Context, store: TaskStore) -> None:
    if not store.last_save_ok:
        tlog.error("Changes were not saved; see the error above.")
        ctx.exit(1)


def _title_from_words(words: tuple[str, ...]) -> str:
    title = " ".join(words).strip()
    if not title:
        raise click.BadParameter("Title cannot be blank.", param_hint="TITLE")
    return title


# ── Rendering ────────────────────────────────────────────────────────


def _task_line(position: int, task: Task) -> str:
    check = "[green]x[/green]" if task.completed else " "
    marker = "[magenta]*[/magenta]" if task.selected else " "
    style = _PRIORITY_STYLE[task.priority]
    badge = f"[{style}]{task.priority.value.upper():<6}[/{style}]"
    title = escape(task.title)
    if task.completed:
        title = f"[strike dim]{title}[/strike dim]"

    parts = [f"{position:>3}.{marker}[dim]{task.id}[/dim] \\[{check}] {badge} {title}"]
    tags = format_tags(task.tags)
    if tags:
        parts.append(f"[cyan]{escape(tags)}[/cyan]")
    due = format_due(task.due)
    if due:
        due_style = "red" if due.startswith("Overdue") else "yellow"
        parts.append(f"[{due_style}]{escape(due)}[/{due_style}]")
    return "  ".join(parts)


def _render(visible: list[Task], all_tasks: list[Task] | None = None) -> None:
    if not visible:
        tlog.console.print("[dim](no tasks)[/dim]")
    for position, task in enumerate(visible, start=1):
        tlog.console.print(_task_line(position, task))
    tlog.console.print("")
    tlog.console.print(f"[bold]{remaining_summary(all_tasks if all_tasks is not None else visible)}[/bold]")


# ── Main group ───────────────────────────────────────────────────────


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "--store",
    "store_dir",
    default="",
    type=click.Path(file_okay=False),
    help="Directory holding the task store (default: $TASKLIST_HOME or the app dir)",
)
@click.option("--no-seed", is_flag=True, help="Do not install example tasks into an empty store")
@click.option("--show", is_flag=True, help="Print the task list after every change")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="tasklist")
@click.pass_context
def main(ctx: click.Context, store_dir: str, no_seed: bool, show: bool, verbose: bool) -> None:
    """tasklist: keep a local, ordered list of short tasks.

    \b
    EXAMPLES:
      tasklist add Buy milk -t errands,home --due 2026-05-01
      tasklist list --status active --priority high -q milk
      tasklist move 3f9k 8a2c          # place 3f9k at 8a2c's position
      tasklist select 3f9k 8a2c && tasklist complete-selected
    """
    tlog.set_verbose(verbose)
    cfg = Config(store_dir=store_dir, seed_on_empty=not no_seed, verbose=verbose)
    tlog.debug(f"Store directory: {cfg.store_dir}")
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg
    ctx.obj["show"] = show


# ── Commands ─────────────────────────────────────────────────────────


@main.command("add")
@click.argument("title", nargs=-1, required=True)
@click.option("-t", "--tags", default="", help="Comma-separated tags (e.g. work,urgent)")
@click.option("--due", type=DUE_TYPE, default=None, help="Due date (YYYY-MM-DD)")
@click.option("-p", "--priority", type=PRIORITY_CHOICE, default="normal", show_default=True)
@click.pass_context
def add_cmd(ctx: click.Context, title: tuple[str, ...], tags: str, due: datetime | None, priority: str) -> None:
    """Add a task at the end of the list."""
    store = _store(ctx)
    try:
        task = store.create(_title_from_words(title), tags=tags, due=due, priority=priority)
    except InvalidTaskError as exc:
        raise click.UsageError(str(exc)) from None
    _ensure_saved(ctx, store)
    tlog.success(f"Added {task.id}: {escape(task.title)}")


@main.command("list")
@click.option("-q", "--query", default="", help="Case-insensitive text to find in title or tags")
@click.option(
    "-s",
    "--status",
    type=click.Choice([s.value for s in StatusFilter], case_sensitive=False),
    default="all",
    show_default=True,
)
@click.option(
    "-p",
    "--priority",
    type=click.Choice([p.value for p in PriorityFilter], case_sensitive=False),
    default="all",
    show_default=True,
)
@click.pass_context
def list_cmd(ctx: click.Context, query: str, status: str, priority: str) -> None:
    """Show tasks in display order, optionally filtered."""
    store = _store(ctx)
    tasks = store.tasks()
    visible = project(tasks, Filters.parse(query=query, status=status, priority=priority))
    _render(visible, tasks)


@main.command("edit")
@click.argument("task_id", metavar="ID")
@click.option("--title", default=None, help="New title")
@click.option("-t", "--tags", default=None, help="Replace tags (comma-separated; '' clears)")
@click.option("--due", type=DUE_TYPE, default=None, help="New due date (YYYY-MM-DD)")
@click.option("--clear-due", is_flag=True, help="Remove the due date")
@click.option("-p", "--priority", type=PRIORITY_CHOICE, default=None)
@click.pass_context
def edit_cmd(
    ctx: click.Context,
    task_id: str,
    title: str | None,
    tags: str | None,
    due: datetime | None,
    clear_due: bool,
    priority: str | None,
) -> None:
    """Change fields of a task; fields not given are left as they are."""
    if due is not None and clear_due:
        raise click.UsageError("Use either --due or --clear-due, not both.")

    changes: dict[str, object] = {}
    if title is not None:
        if not title.strip():
            tlog.warn("Title cannot be blank; keeping the current title.")
        else:
            changes["title"] = title
    if tags is not None:
        changes["tags"] = tags
    if clear_due:
        changes["due"] = None
    elif due is not None:
        changes["due"] = due
    if priority is not None:
        changes["priority"] = priority
    if not changes:
        tlog.info("Nothing to change.")
        return

    store = _store(ctx)
    tid = _resolve_id(store, task_id)
    try:
        updated = store.update(tid, **changes)
    except InvalidTaskError as exc:
        raise click.UsageError(str(exc)) from None
    if updated is None:
        tlog.warn(f"No task with id {escape(tid)}.")
        return
    _ensure_saved(ctx, store)
    tlog.success(f"Updated {updated.id}")


def _set_completed(ctx: click.Context, task_id: str, completed: bool) -> None:
    store = _store(ctx)
    tid = _resolve_id(store, task_id)
    if store.toggle(tid, completed) is None:
        tlog.warn(f"No task with id {escape(tid)}.")
        return
    _ensure_saved(ctx, store)
    tlog.success(f"{tid} marked {'completed' if completed else 'active'}")


@main.command("done")
@click.argument("task_id", metavar="ID")
@click.pass_context
def done_cmd(ctx: click.Context, task_id: str) -> None:
    """Mark a task completed."""
    _set_completed(ctx, task_id, True)


@main.command("undo")
@click.argument("task_id", metavar="ID")
@click.pass_context
def undo_cmd(ctx: click.Context, task_id: str) -> None:
    """Mark a task active again."""
    _set_completed(ctx, task_id, False)


@main.command("rm")
@click.argument("task_id", metavar="ID")
@click.pass_context
def rm_cmd(ctx: click.Context, task_id: str) -> None:
    """Delete a task."""
    store = _store(ctx)
    tid = _resolve_id(store, task_id)
    if not store.delete(tid):
        tlog.warn(f"No task with id {escape(tid)}.")
        return
    _ensure_saved(ctx, store)
    tlog.success(f"Removed {tid}")


@main.command("move")
@click.argument("task_id", metavar="ID")
@click.argument("target_id", metavar="TARGET_ID")
@click.pass_context
def move_cmd(ctx: click.Context, task_id: str, target_id: str) -> None:
    """Move task ID to TARGET_ID's position in the list."""
    store = _store(ctx)
    moved = _resolve_id(store, task_id)
    target = _resolve_id(store, target_id)
    if not store.reorder(moved, target):
        tlog.warn("Nothing moved (unknown id, or both ids are the same task).")
        return
    _ensure_saved(ctx, store)
    tlog.success(f"Moved {moved}")


@main.command("select")
@click.argument("task_ids", metavar="ID...", nargs=-1, required=True)
@click.option("--clear", is_flag=True, help="Unselect instead of select")
@click.pass_context
def select_cmd(ctx: click.Context, task_ids: tuple[str, ...], clear: bool) -> None:
    """Mark tasks for complete-selected."""
    store = _store(ctx)
    for raw in task_ids:
        tid = _resolve_id(store, raw)
        if store.select(tid, not clear) is None:
            tlog.warn(f"No task with id {escape(tid)}.")
            continue
        _ensure_saved(ctx, store)
    selected = sum(1 for t in store.tasks() if t.selected)
    tlog.info(f"{selected} task(s) selected")


@main.command("complete-selected")
@click.pass_context
def complete_selected_cmd(ctx: click.Context) -> None:
    """Complete every selected task and clear the selection."""
    store = _store(ctx)
    count = store.bulk_complete_selected()
    _ensure_saved(ctx, store)
    tlog.success(f"Completed {count} task(s)")


@main.command("clear-completed")
@click.pass_context
def clear_completed_cmd(ctx: click.Context) -> None:
    """Delete all completed tasks."""
    store = _store(ctx)
    count = store.clear_completed()
    _ensure_saved(ctx, store)
    tlog.success(f"Removed {count} completed task(s)")

