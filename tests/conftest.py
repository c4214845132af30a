# tests/conftest.py

from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tui.core.controller import Controller
from task_tui.core.state import AppState
from task_tui.tasks.task_store import TaskStore

from .fakes import FakeUtcClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the user's environment and home directory.
    """
    return SimpleNamespace(
        app_name="task-tui",
        log_level="WARNING",
        log_dir=tmp_path / "logs",
        db_path=tmp_path / "data" / "db.json",
        atomic_writes=False,
        tick_rate_ms=200,
        tick_rate=0.2,
        alt_screen=False,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.db_path)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, store=store)


@pytest.fixture()
def clock() -> FakeUtcClock:
    return FakeUtcClock()


@pytest.fixture()
def controller(state: AppState, clock: FakeUtcClock) -> Controller:
    c = Controller(state, clock=clock)
    c.refresh()
    return c


@pytest.fixture()
def restore_root_logging():
    """Put the root logger back the way pytest set it up."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
