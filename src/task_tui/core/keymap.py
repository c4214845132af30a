# src/task_tui/core/keymap.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from .events import Key

logger = logging.getLogger(__name__)


class Intent(StrEnum):
    QUIT = "quit"
    HOME = "home"
    TASKS = "tasks"
    BEGIN_ADD = "add"
    ADVANCE = "progress"
    DELETE = "delete"
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True, slots=True)
class Binding:
    key: str
    intent: Intent
    help_text: str
    aliases: tuple[str, ...] = ()


class KeyBindings:
    """Key -> intent registry for the normal (navigation) mode."""

    def __init__(self) -> None:
        self._intents: dict[str, Intent] = {}
        self._help: list[Binding] = []

    def register(
        self,
        key: str,
        intent: Intent,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        for name in (key, *aliases):
            if name in self._intents:
                logger.warning("Key %r rebound from %s to %s", name, self._intents[name], intent)
            self._intents[name] = intent
        self._help.append(Binding(key=key, intent=intent, help_text=help_text, aliases=tuple(aliases)))

    def resolve(self, key: Key) -> Intent | None:
        """Return the intent bound to `key`, or None if it is unbound."""
        return self._intents.get(key.name)

    def bindings(self) -> list[Binding]:
        return list(self._help)

    def build_help(self) -> list[str]:
        lines = []
        for b in self._help:
            keys = " / ".join((b.key, *b.aliases))
            lines.append(f"'{keys}' to {b.help_text}")
        return lines


def build_default_bindings() -> KeyBindings:
    kb = KeyBindings()
    kb.register("h", Intent.HOME, "go to the home screen")
    kb.register("t", Intent.TASKS, "access tasks")
    kb.register("a", Intent.BEGIN_ADD, "add a new task")
    kb.register("p", Intent.ADVANCE, "progress the currently selected task")
    kb.register("d", Intent.DELETE, "delete the currently selected task")
    kb.register("down", Intent.DOWN, "select the next task", aliases=["j"])
    kb.register("up", Intent.UP, "select the previous task", aliases=["k"])
    kb.register("e", Intent.QUIT, "exit", aliases=["q"])
    return kb


# Tab titles shown in the menu bar; the first letter is the shortcut.
MENU_TITLES = ("Home", "Tasks", "Add", "Progress", "Delete", "Exit")
