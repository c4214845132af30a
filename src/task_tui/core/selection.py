# src/task_tui/core/selection.py

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Selection:
    """
    Focused position in the current task list.

    Invariant (after validate()): index is None when the list is empty,
    otherwise 0 <= index < length. The index is positional, not a task id.
    """

    index: int | None = None

    def validate(self, length: int) -> int | None:
        if length <= 0:
            self.index = None
        elif self.index is None or self.index < 0:
            self.index = 0
        elif self.index >= length:
            self.index = length - 1
        return self.index

    def next(self, length: int) -> int | None:
        """Move down one row, wrapping from the last row to the first."""
        if length <= 0:
            return self.validate(length)
        if self.index is None or self.index >= length - 1:
            self.index = 0
        else:
            self.index += 1
        return self.index

    def previous(self, length: int) -> int | None:
        """Move up one row, wrapping from the first row to the last."""
        if length <= 0:
            return self.validate(length)
        if self.index is None or self.index <= 0 or self.index >= length:
            self.index = length - 1
        else:
            self.index -= 1
        return self.index

    def after_delete(self, removed: int, length: int) -> int | None:
        """
        Re-point after the row at `removed` was deleted; `length` is the new size.

        Deleting any row but the first moves the selection one row up; deleting
        the first keeps it on the (new) first row.
        """
        self.index = removed - 1 if removed > 0 else 0
        return self.validate(length)
