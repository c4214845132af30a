# src/task_tui/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..tasks.task_models import Task
from .ports import TaskRepo
from .selection import Selection


class Screen(Enum):
    """Which view is active. Also the source of the menu-bar label."""

    HOME = "home"
    TASKS = "tasks"

    @property
    def label(self) -> str:
        return _SCREEN_LABELS[self]

    @property
    def tab_index(self) -> int:
        return list(Screen).index(self)


_SCREEN_LABELS = {
    Screen.HOME: "Home",
    Screen.TASKS: "Tasks",
}


class Mode(Enum):
    NORMAL = "normal"
    EDITING = "editing"


@dataclass
class AppState:
    settings: object
    store: TaskRepo

    screen: Screen = Screen.HOME
    mode: Mode = Mode.NORMAL
    selection: Selection = field(default_factory=Selection)

    # Last list read from the store; replaced on every loop iteration.
    tasks: list[Task] = field(default_factory=list)

    # Add-task entry buffer (only meaningful in Mode.EDITING).
    input_text: str = ""

    # One-line outcome of the last intent, shown in the footer.
    status: str = ""


@dataclass(frozen=True, slots=True)
class ViewSnapshot:
    """Read-only copy of everything the view needs for one frame."""

    screen: Screen
    mode: Mode
    tasks: tuple[Task, ...]
    selected: int | None
    input_text: str
    status: str

    @property
    def selected_task(self) -> Task | None:
        if self.selected is None or not 0 <= self.selected < len(self.tasks):
            return None
        return self.tasks[self.selected]
