# src/task_tui/ui/render.py

"""
View layer: ViewSnapshot -> rich renderable.

Pure functions only. Nothing here touches the store or mutates state.
"""

from __future__ import annotations

from datetime import datetime

from rich.align import Align
from rich.console import Group, RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.keymap import MENU_TITLES, KeyBindings, build_default_bindings
from ..core.state import Mode, Screen, ViewSnapshot
from ..tasks.task_models import Task, TaskState

APP_TITLE = "task-TUI"

_STATE_STYLES = {
    TaskState.PENDING: "white",
    TaskState.STARTED: "cyan",
    TaskState.IN_PROGRESS: "yellow",
    TaskState.DONE: "green",
}


def format_ts(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _panel(body: RenderableType, title: str) -> Panel:
    return Panel(body, title=title, title_align="left", border_style="white")


def build_menu(active: Screen) -> Panel:
    """Tab bar; the first letter of each title is the shortcut key."""
    text = Text()
    for i, title in enumerate(MENU_TITLES):
        if i:
            text.append(" | ", style="white")
        highlighted = i == active.tab_index
        text.append(title[0], style="bold yellow underline" if highlighted else "yellow underline")
        text.append(title[1:], style="bold yellow" if highlighted else "white")
    return _panel(text, "Menu")


def build_home(bindings: KeyBindings) -> Panel:
    lines: list[RenderableType] = [
        Text(""),
        Text("Welcome"),
        Text(""),
        Text("to"),
        Text(""),
        Text(APP_TITLE, style="bold white"),
        Text(""),
    ]
    lines.extend(Text(f"Press {line}") for line in bindings.build_help())
    body = Group(*(Align.center(line) for line in lines))
    return _panel(body, Screen.HOME.label)


def build_task_list(snapshot: ViewSnapshot) -> Panel:
    text = Text()
    for i, task in enumerate(snapshot.tasks):
        if i:
            text.append("\n")
        if i == snapshot.selected:
            text.append(f"> {task.name}", style="bold black on yellow")
        else:
            text.append(f"  {task.name}")
    if not snapshot.tasks:
        text.append("No tasks yet. Press 'a' to add one.", style="dim")
    return _panel(text, Screen.TASKS.label)


def build_task_detail(task: Task | None) -> Panel:
    if task is None:
        return _panel(Text(""), "Detail")

    table = Table(expand=True, box=None, header_style="bold")
    table.add_column("ID", ratio=1)
    table.add_column("Name", ratio=6)
    table.add_column("State", ratio=2)
    table.add_column("Created At", ratio=4)
    row = [
        str(task.id),
        task.name,
        Text(task.state.value, style=_STATE_STYLES[task.state]),
        format_ts(task.created_at),
    ]
    if task.started_at is not None:
        table.add_column("Started At", ratio=4)
        row.append(format_ts(task.started_at))
    if task.finished_at is not None:
        table.add_column("Finished At", ratio=4)
        row.append(format_ts(task.finished_at))
    table.add_row(*row)
    return _panel(table, "Detail")


def build_footer(snapshot: ViewSnapshot) -> Panel:
    if snapshot.mode is Mode.EDITING:
        text = Text()
        text.append("New task: ", style="bold")
        text.append(snapshot.input_text)
        text.append("_", style="blink")
        text.append("   (Enter to save, Esc to cancel)", style="dim")
        return _panel(text, "Add")

    text = Text(snapshot.status or f"{APP_TITLE} - press 'h' for help", style="bright_cyan")
    return _panel(Align.center(text), "Status")


def render_frame(snapshot: ViewSnapshot, bindings: KeyBindings | None = None) -> Layout:
    bindings = bindings or build_default_bindings()

    root = Layout(name="root")
    root.split_column(
        Layout(build_menu(snapshot.screen), name="menu", size=3),
        Layout(name="body", minimum_size=2),
        Layout(build_footer(snapshot), name="footer", size=3),
    )

    if snapshot.screen is Screen.TASKS:
        root["body"].split_row(
            Layout(build_task_list(snapshot), name="list", ratio=1),
            Layout(build_task_detail(snapshot.selected_task), name="detail", ratio=4),
        )
    else:
        root["body"].update(build_home(bindings))

    return root
