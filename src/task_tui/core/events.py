# src/task_tui/core/events.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class KeyCode(StrEnum):
    CHAR = "char"
    ENTER = "enter"
    ESC = "esc"
    BACKSPACE = "backspace"
    TAB = "tab"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True, slots=True)
class Key:
    code: KeyCode
    char: str = ""

    @classmethod
    def of(cls, char: str) -> Key:
        return cls(KeyCode.CHAR, char)

    @property
    def name(self) -> str:
        """Binding name: the character itself for CHAR keys, the code otherwise."""
        return self.char if self.code is KeyCode.CHAR else self.code.value


@dataclass(frozen=True, slots=True)
class InputEvent:
    key: Key


@dataclass(frozen=True, slots=True)
class TickEvent:
    pass


Event = InputEvent | TickEvent
