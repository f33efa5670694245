"""CLI tests: every command runs in-process against a temporary store."""

from __future__ import annotations

from pathlib import Path

import pytest

from tasklist.cli import main
from tasklist.config import Config, build_store
from tasklist.persistence import PersistenceAdapter
from tasklist.storage import FileSlotStore


@pytest.fixture
def cli_runner():
    """Click CliRunner for invoking the CLI in-process."""
    from click.testing import CliRunner
    return CliRunner()


@pytest.fixture
def run(cli_runner, tmp_path: Path):
    """Invoke the CLI against an isolated, unseeded store under tmp_path."""

    def _run(*args: str):
        return cli_runner.invoke(main, ["--store", str(tmp_path), "--no-seed", *args])

    return _run


def _saved(tmp_path: Path):
    return PersistenceAdapter(FileSlotStore(tmp_path)).load()


def _add(run, tmp_path: Path, *args: str) -> str:
    r = run("add", *args)
    assert r.exit_code == 0, r.output
    return _saved(tmp_path)[-1].id


# ── Help and version ──────────────────────────────────────────────────


class TestCliHelpAndVersion:
    def test_help_long(self, cli_runner):
        r = cli_runner.invoke(main, ["--help"])
        assert r.exit_code == 0
        assert "tasklist" in r.output

    def test_help_short(self, cli_runner):
        r = cli_runner.invoke(main, ["-h"])
        assert r.exit_code == 0

    def test_version(self, cli_runner):
        r = cli_runner.invoke(main, ["--version"])
        assert r.exit_code == 0
        assert "tasklist" in r.output.lower()

    @pytest.mark.parametrize(
        "cmd",
        ["add", "list", "edit", "done", "undo", "rm", "move", "select", "complete-selected", "clear-completed"],
    )
    def test_subcommand_help(self, cli_runner, cmd):
        r = cli_runner.invoke(main, [cmd, "--help"])
        assert r.exit_code == 0


# ── add ───────────────────────────────────────────────────────────────


class TestAdd:
    def test_add_with_all_fields(self, run, tmp_path):
        r = run("add", "Buy", "milk", "-t", "errands, home", "--due", "2026-05-01", "-p", "high")
        assert r.exit_code == 0, r.output
        (task,) = _saved(tmp_path)
        assert task.title == "Buy milk"
        assert task.tags == ["errands", "home"]
        assert task.due == "2026-05-01"
        assert task.priority.value == "high"
        assert task.order == 0

    def test_blank_title_rejected(self, run, tmp_path):
        r = run("add", "   ")
        assert r.exit_code == 2
        assert _saved(tmp_path) == []

    def test_bad_due_date_rejected(self, run, tmp_path):
        r = run("add", "x", "--due", "tomorrow")
        assert r.exit_code == 2
        assert _saved(tmp_path) == []

    def test_bad_priority_rejected(self, run):
        assert run("add", "x", "-p", "urgent").exit_code == 2


# ── list ──────────────────────────────────────────────────────────────


class TestList:
    def test_lists_in_display_order_with_counter(self, run, tmp_path):
        _add(run, tmp_path, "Alpha")
        _add(run, tmp_path, "Bravo")
        r = run("list")
        assert r.exit_code == 0
        assert r.output.index("Alpha") < r.output.index("Bravo")
        assert "2 items left" in r.output

    def test_filters(self, run, tmp_path):
        _add(run, tmp_path, "Alpha", "-p", "high")
        bravo = _add(run, tmp_path, "Bravo", "-t", "zulu")
        run("done", bravo)
        r = run("list", "-s", "active")
        assert "Alpha" in r.output
        assert "Bravo" not in r.output
        r = run("list", "-q", "ZULU")
        assert "Bravo" in r.output
        assert "Alpha" not in r.output
        r = run("list", "-p", "low")
        assert "(no tasks)" in r.output

    def test_seeded_store_shows_examples(self, cli_runner, tmp_path):
        r = cli_runner.invoke(main, ["--store", str(tmp_path), "list"])
        assert r.exit_code == 0
        assert "Drag to reorder items" in r.output
        assert "3 items left" in r.output

    def test_seed_ids_usable_in_next_command(self, cli_runner, tmp_path):
        base = ["--store", str(tmp_path)]
        listed = cli_runner.invoke(main, [*base, "list"])
        assert "welcome0" in listed.output
        r = cli_runner.invoke(main, [*base, "done", "welcome0"])
        assert r.exit_code == 0
        assert "No task with id" not in r.output
        saved = {t.id: t.completed for t in _saved(tmp_path)}
        assert saved == {"welcome0": True, "tipsedit": False, "prodrag0": False}

    def test_corrupt_store_still_lists(self, run, tmp_path):
        (tmp_path / "enchanting_todos_v1.json").write_text("{{{", encoding="utf-8")
        r = run("list")
        assert r.exit_code == 0
        assert "(no tasks)" in r.output

    def test_markup_in_title_is_literal(self, run, tmp_path):
        _add(run, tmp_path, "[bold]not bold[/bold]")
        assert "[bold]not bold[/bold]" in run("list").output


# ── edit / done / undo / rm ───────────────────────────────────────────


class TestEdit:
    def test_edit_fields(self, run, tmp_path):
        tid = _add(run, tmp_path, "Old", "--due", "2026-01-01")
        r = run("edit", tid, "--title", "New", "-t", "a,b", "--clear-due", "-p", "low")
        assert r.exit_code == 0, r.output
        (task,) = _saved(tmp_path)
        assert (task.title, task.tags, task.due, task.priority.value) == ("New", ["a", "b"], None, "low")

    def test_blank_title_keeps_old(self, run, tmp_path):
        tid = _add(run, tmp_path, "Keep")
        r = run("edit", tid, "--title", "  ")
        assert r.exit_code == 0
        assert _saved(tmp_path)[0].title == "Keep"

    def test_due_and_clear_due_conflict(self, run, tmp_path):
        tid = _add(run, tmp_path, "x")
        assert run("edit", tid, "--due", "2026-01-01", "--clear-due").exit_code == 2

    def test_unknown_id_warns(self, run):
        r = run("edit", "nope", "--title", "x")
        assert r.exit_code == 0
        assert "No task with id nope" in r.output

    def test_id_prefix(self, run, tmp_path):
        tid = _add(run, tmp_path, "Prefix me")
        assert run("done", tid[:5]).exit_code == 0
        assert _saved(tmp_path)[0].completed is True


class TestDoneUndoRm:
    def test_done_then_undo(self, run, tmp_path):
        tid = _add(run, tmp_path, "x")
        run("done", tid)
        assert _saved(tmp_path)[0].completed is True
        run("undo", tid)
        assert _saved(tmp_path)[0].completed is False

    def test_rm(self, run, tmp_path):
        a = _add(run, tmp_path, "A")
        _add(run, tmp_path, "B")
        assert run("rm", a).exit_code == 0
        assert [t.title for t in _saved(tmp_path)] == ["B"]

    def test_rm_unknown_is_noop(self, run, tmp_path):
        _add(run, tmp_path, "A")
        r = run("rm", "zzzzzzzzz")
        assert r.exit_code == 0
        assert "No task with id" in r.output
        assert len(_saved(tmp_path)) == 1


# ── move / select / bulk ──────────────────────────────────────────────


class TestMoveAndBulk:
    def test_move(self, run, tmp_path):
        ids = [_add(run, tmp_path, name) for name in ("A", "B", "C", "D")]
        assert run("move", ids[3], ids[1]).exit_code == 0
        ordered = sorted(_saved(tmp_path), key=lambda t: t.order)
        assert [t.title for t in ordered] == ["A", "D", "B", "C"]

    def test_move_same_task_is_noop(self, run, tmp_path):
        a = _add(run, tmp_path, "A")
        r = run("move", a, a)
        assert r.exit_code == 0
        assert "Nothing moved" in r.output

    def test_select_and_complete_selected(self, run, tmp_path):
        a = _add(run, tmp_path, "A")
        b = _add(run, tmp_path, "B")
        _add(run, tmp_path, "C")
        assert run("select", a, b).exit_code == 0
        run("select", b, "--clear")
        r = run("complete-selected")
        assert r.exit_code == 0
        assert "Completed 1 task(s)" in r.output
        done = {t.title: (t.completed, t.selected) for t in _saved(tmp_path)}
        assert done == {"A": (True, False), "B": (False, False), "C": (False, False)}

    def test_clear_completed(self, run, tmp_path):
        a = _add(run, tmp_path, "A")
        _add(run, tmp_path, "B")
        c = _add(run, tmp_path, "C")
        run("done", a)
        run("done", c)
        r = run("clear-completed")
        assert r.exit_code == 0
        assert "Removed 2 completed task(s)" in r.output
        saved = _saved(tmp_path)
        assert [(t.title, t.order) for t in saved] == [("B", 0)]

    def test_show_renders_after_change(self, cli_runner, tmp_path):
        r = cli_runner.invoke(main, ["--store", str(tmp_path), "--no-seed", "--show", "add", "Shown"])
        assert r.exit_code == 0
        assert "1 item left" in r.output


def test_failed_save_exits_nonzero(run, tmp_path, monkeypatch):
    def boom(self, key, value):
        raise OSError("read-only")

    monkeypatch.setattr(FileSlotStore, "set", boom)
    r = run("add", "Unsaved")
    assert r.exit_code == 1


def test_store_dir_from_env(cli_runner, tmp_path, monkeypatch):
    monkeypatch.setenv("TASKLIST_HOME", str(tmp_path))
    r = cli_runner.invoke(main, ["--no-seed", "add", "From env"])
    assert r.exit_code == 0
    store = build_store(Config(store_dir=str(tmp_path)))
    assert [t.title for t in store.tasks()] == ["From env"]
