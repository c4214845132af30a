# src/task_tui/core/controller.py

"""
Main loop.

Single-threaded: render, block on the next event, apply it, repeat. The
blocking recv() is the only suspension point, and every intent (including
its store read-modify-write) finishes before the next event is taken.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from ..tasks.task_api import add_task, progress_task_at, remove_task_at
from ..tasks.task_models import utc_now
from .events import Event, InputEvent, Key, KeyCode, TickEvent
from .keymap import Intent, KeyBindings, build_default_bindings
from .ports import EventStream
from .state import AppState, Mode, Screen, ViewSnapshot

logger = logging.getLogger(__name__)

DrawFn = Callable[[ViewSnapshot], None]


class Controller:
    def __init__(
        self,
        state: AppState,
        *,
        bindings: KeyBindings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.state = state
        self.bindings = bindings or build_default_bindings()
        self._clock = clock

    # ---- state access ----

    def refresh(self) -> None:
        """Reload the list from the store and re-validate the selection against it."""
        self.state.tasks = self.state.store.load()
        self.state.selection.validate(len(self.state.tasks))

    def snapshot(self) -> ViewSnapshot:
        st = self.state
        return ViewSnapshot(
            screen=st.screen,
            mode=st.mode,
            tasks=tuple(replace(t) for t in st.tasks),
            selected=st.selection.index,
            input_text=st.input_text,
            status=st.status,
        )

    # ---- loop ----

    def run(self, events: EventStream, draw: DrawFn) -> None:
        """
        Drive the session until the user quits.

        Store errors and a closed event channel propagate out of here; the
        caller's terminal session guard restores the terminal.
        """
        logger.info("Controller loop started.")
        while True:
            self.refresh()
            draw(self.snapshot())
            event = events.recv()
            if not self.handle_event(event):
                logger.info("Quit requested.")
                return

    def handle_event(self, event: Event) -> bool:
        """Apply one event. Returns False when the loop should stop."""
        if isinstance(event, TickEvent):
            return True
        if isinstance(event, InputEvent):
            return self.handle_key(event.key)
        logger.warning("Ignoring unknown event %r", event)
        return True

    def handle_key(self, key: Key) -> bool:
        if self.state.mode is Mode.EDITING:
            self._handle_entry_key(key)
            return True

        intent = self.bindings.resolve(key)
        if intent is None:
            return True
        logger.debug("Key %s -> %s", key.name, intent.value)
        return self.apply(intent)

    # ---- intents ----

    def apply(self, intent: Intent) -> bool:
        st = self.state
        if intent is Intent.QUIT:
            return False
        if intent is Intent.HOME:
            st.screen = Screen.HOME
        elif intent is Intent.TASKS:
            st.screen = Screen.TASKS
        elif intent is Intent.BEGIN_ADD:
            st.mode = Mode.EDITING
            st.input_text = ""
        elif intent is Intent.ADVANCE:
            self._advance()
        elif intent is Intent.DELETE:
            self._delete()
        elif intent is Intent.DOWN:
            st.selection.next(len(st.tasks))
        elif intent is Intent.UP:
            st.selection.previous(len(st.tasks))
        return True

    def _handle_entry_key(self, key: Key) -> None:
        st = self.state
        if key.code is KeyCode.ENTER:
            self._commit_add(st.input_text)
        elif key.code is KeyCode.ESC:
            st.mode = Mode.NORMAL
            st.input_text = ""
            st.status = "Add cancelled"
        elif key.code is KeyCode.BACKSPACE:
            st.input_text = st.input_text[:-1]
        elif key.code is KeyCode.CHAR and key.char.isprintable():
            st.input_text += key.char

    def _commit_add(self, name: str) -> None:
        st = self.state
        st.mode = Mode.NORMAL
        st.input_text = ""
        tasks, task = add_task(st.store, name, now=self._clock())
        st.tasks = tasks
        st.selection.validate(len(tasks))
        st.status = f"Added task {task.id}"

    def _advance(self) -> None:
        st = self.state
        if st.selection.index is None or not st.tasks:
            return
        tasks, task = progress_task_at(st.store, st.selection.index, now=self._clock())
        st.tasks = tasks
        st.selection.validate(len(tasks))
        if task is not None:
            st.status = f"Task {task.id} is {task.state.value}"

    def _delete(self) -> None:
        st = self.state
        index = st.selection.index
        if index is None or not st.tasks:
            return
        tasks, removed = remove_task_at(st.store, index)
        st.tasks = tasks
        if removed is None:
            st.selection.validate(len(tasks))
            return
        st.selection.after_delete(index, len(tasks))
        st.status = f"Deleted task {removed.id}"
