# src/task_tui/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The controller depends on Protocols instead of concrete implementations,
so the file store and the terminal can be replaced by fakes in tests.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task
    from .events import Event, Key


class TaskRepo(Protocol):
    """Whole-document task persistence."""
    def load(self) -> list[Task]: ...
    def save(self, tasks: Iterable[Task]) -> list[Task]: ...


class KeyReader(Protocol):
    """
    Input device seen by the event source.

    poll() waits up to `timeout` seconds and reports whether input is ready;
    read() consumes it and returns a decoded key, or None for bytes that do
    not map to a key. Both raise on device failure.
    """

    def poll(self, timeout: float) -> bool: ...
    def read(self) -> Key | None: ...


class EventStream(Protocol):
    """Consumer side of the event channel. recv() blocks; it raises once the channel is closed."""
    def recv(self) -> Event: ...
