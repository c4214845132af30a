# tests/test_render.py

from __future__ import annotations

import io
from datetime import datetime, timezone

from rich.console import Console

from task_tui.core.state import Mode, Screen, ViewSnapshot
from task_tui.tasks.task_models import Task
from task_tui.ui.render import build_footer, build_task_detail, render_frame

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _text(renderable, height: int = 30) -> str:
    console = Console(record=True, width=120, height=height, file=io.StringIO())
    console.print(renderable)
    return console.export_text()


def _snapshot(**kwargs) -> ViewSnapshot:
    values = dict(
        screen=Screen.HOME,
        mode=Mode.NORMAL,
        tasks=(),
        selected=None,
        input_text="",
        status="",
    )
    values.update(kwargs)
    return ViewSnapshot(**values)


def test_home_screen_shows_menu_and_help() -> None:
    out = _text(render_frame(_snapshot()))

    for title in ("Home", "Tasks", "Add", "Progress", "Delete", "Exit"):
        assert title in out
    assert "Welcome" in out
    assert "'p' to progress the currently selected task" in out


def test_tasks_screen_lists_tasks_and_shows_selected_detail() -> None:
    milk = Task.create(1, "milk", now=T0)
    eggs = Task.create(2, "eggs", now=T0)
    eggs.progress(now=T0)
    snap = _snapshot(screen=Screen.TASKS, tasks=(milk, eggs), selected=1)

    out = _text(render_frame(snap))

    assert "milk" in out
    assert "> eggs" in out
    assert "started" in out
    assert "Created At" in out


def test_empty_tasks_screen_has_a_hint() -> None:
    out = _text(render_frame(_snapshot(screen=Screen.TASKS)))
    assert "No tasks yet" in out


def test_detail_adds_finished_column_once_done() -> None:
    task = Task.create(3, "ship", now=T0)
    assert "Finished At" not in _text(build_task_detail(task), height=10)

    task.progress(now=T0)
    task.progress(now=T0)
    task.progress(now=T0)
    out = _text(build_task_detail(task), height=10)
    assert "done" in out
    assert "Finished At" in out


def test_footer_shows_entry_buffer_or_status() -> None:
    editing = _text(build_footer(_snapshot(mode=Mode.EDITING, input_text="buy mi")), height=5)
    assert "New task: buy mi" in editing

    status = _text(build_footer(_snapshot(status="Deleted task 4")), height=5)
    assert "Deleted task 4" in status
