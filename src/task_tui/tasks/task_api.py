# src/task_tui/tasks/task_api.py

"""
Task mutations over the store.

Each helper is one read-modify-write cycle: load the current list from the
store, change it, save it back. Store errors propagate to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from ..core.ports import TaskRepo
from .task_models import Task, generate_task_name

logger = logging.getLogger(__name__)


def next_task_id(tasks: Sequence[Task]) -> int:
    """One greater than the current maximum id, or 1 for an empty list."""
    return max((t.id for t in tasks), default=0) + 1


def add_task(store: TaskRepo, name: str | None, *, now: datetime | None = None) -> tuple[list[Task], Task]:
    """Append a new PENDING task. A blank name gets a generated one."""
    tasks = store.load()
    name = (name or "").strip() or generate_task_name()
    task = Task.create(next_task_id(tasks), name, now=now)
    tasks.append(task)
    saved = store.save(tasks)
    logger.info("Task added id=%s name=%r", task.id, task.name)
    return saved, task


def progress_task_at(store: TaskRepo, index: int | None, *, now: datetime | None = None) -> tuple[list[Task], Task | None]:
    """Advance the lifecycle of the task at `index`. No-op without a valid index."""
    tasks = store.load()
    if index is None or not 0 <= index < len(tasks):
        return tasks, None

    task = tasks[index]
    before = task.state
    task.progress(now=now)
    saved = store.save(tasks)
    logger.info("Task %s %s -> %s", task.id, before.value, task.state.value)
    return saved, task


def remove_task_at(store: TaskRepo, index: int | None) -> tuple[list[Task], Task | None]:
    """Delete the task at `index`. No-op without a valid index."""
    tasks = store.load()
    if index is None or not 0 <= index < len(tasks):
        return tasks, None

    removed = tasks.pop(index)
    saved = store.save(tasks)
    logger.info("Task deleted id=%s", removed.id)
    return saved, removed
