# src/task_tui/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- takes the settings loaded once at startup,
- ensures the data and log directories exist,
- wires the file store into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.log_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(settings.db_path, atomic_writes=settings.atomic_writes)
    logger.info("Task store at %s (atomic_writes=%s)", store.path, settings.atomic_writes)

    return AppState(settings=settings, store=store)
