# src/task_tui/errors.py

"""
Error taxonomy.

Every failure the session can die from derives from TaskTuiError, so the
entry point can restore the terminal and map them all to one exit code.
"""

from __future__ import annotations


class TaskTuiError(Exception):
    """Base class for all task-tui failures."""


class StoreReadError(TaskTuiError):
    """The store file could not be opened or does not decode as a task list."""


class StoreWriteError(TaskTuiError):
    """The store file could not be written."""


class InvalidStateError(TaskTuiError):
    """A lifecycle token is not one of the known states."""

    def __init__(self, token: object) -> None:
        super().__init__(f"input was not a valid task state: {token!r}")
        self.token = token


class EventSourceFailure(TaskTuiError):
    """The input device or the event channel failed; the session cannot go on."""


class TerminalSessionError(TaskTuiError):
    """Entering or leaving raw mode / the alternate screen failed."""
