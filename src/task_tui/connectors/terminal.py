# src/task_tui/connectors/terminal.py

"""
Terminal access: the raw-mode session guard and the stdin key reader.

Raw (cbreak) mode is process-wide state. TerminalSession sets it exactly once
and restores it on every way out of the `with` block, including errors.
"""

from __future__ import annotations

import logging
import os
import select
import sys
import termios
import threading
import tty
from typing import Any, TextIO

from rich.console import Console, RenderableType
from rich.live import Live

from ..core.events import Key, KeyCode
from ..errors import TerminalSessionError

logger = logging.getLogger(__name__)

# How long to wait for the tail of an escape sequence after ESC.
ESC_SEQUENCE_TIMEOUT = 0.02

_ESCAPE_KEYS = {
    b"[A": KeyCode.UP,
    b"OA": KeyCode.UP,
    b"[B": KeyCode.DOWN,
    b"OB": KeyCode.DOWN,
    b"[C": KeyCode.RIGHT,
    b"OC": KeyCode.RIGHT,
    b"[D": KeyCode.LEFT,
    b"OD": KeyCode.LEFT,
}

_CONTROL_KEYS = {
    b"\r": KeyCode.ENTER,
    b"\n": KeyCode.ENTER,
    b"\t": KeyCode.TAB,
    b"\x7f": KeyCode.BACKSPACE,
    b"\x08": KeyCode.BACKSPACE,
    b"\x1b": KeyCode.ESC,
}


def decode_key(data: bytes) -> Key | None:
    """Map the raw bytes of one key press to a Key (None if unrecognized)."""
    if not data:
        return None

    code = _CONTROL_KEYS.get(data)
    if code is not None:
        return Key(code)

    if data.startswith(b"\x1b"):
        tail = data[1:]
        # Modified arrows arrive as ESC [ 1 ; <mod> <letter>.
        if tail.startswith(b"[1;") and len(tail) >= 5:
            tail = b"[" + tail[-1:]
        code = _ESCAPE_KEYS.get(tail)
        return Key(code) if code is not None else None

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if len(text) != 1 or not text.isprintable():
        return None
    return Key.of(text)


def _utf8_tail_length(lead: int) -> int:
    if lead >= 0xF0:
        return 3
    if lead >= 0xE0:
        return 2
    if lead >= 0xC0:
        return 1
    return 0


class TerminalKeyReader:
    """KeyReader over a terminal file descriptor (select + os.read)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._fd = (stream or sys.stdin).fileno()

    def poll(self, timeout: float) -> bool:
        ready, _, _ = select.select([self._fd], [], [], max(0.0, timeout))
        return bool(ready)

    def read(self) -> Key | None:
        data = os.read(self._fd, 1)
        if not data:
            raise EOFError("terminal input closed")

        if data == b"\x1b":
            if self.poll(ESC_SEQUENCE_TIMEOUT):
                data += os.read(self._fd, 8)
        else:
            tail = _utf8_tail_length(data[0])
            if tail:
                data += os.read(self._fd, tail)

        return decode_key(data)


class TerminalSession:
    """
    Session guard for the full-screen UI.

    open():  start the rich Live display (alternate screen, hidden cursor),
             then switch stdin to cbreak mode.
    close(): restore the saved stdin mode, then stop the Live display.
    Both steps run once; close() is idempotent and safe after a failed open().
    """

    _lock = threading.Lock()
    _active: TerminalSession | None = None

    def __init__(
        self,
        console: Console,
        *,
        stdin: TextIO | None = None,
        alt_screen: bool = True,
    ) -> None:
        self.console = console
        self._stdin = stdin or sys.stdin
        self._alt_screen = bool(alt_screen)
        self._live: Live | None = None
        self._fd: int | None = None
        self._saved_mode: list[Any] | None = None

    @property
    def active(self) -> bool:
        return TerminalSession._active is self

    def __enter__(self) -> TerminalSession:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.close()
            return False
        # Already unwinding: restore what we can, keep the original error.
        try:
            self.close()
        except TerminalSessionError:
            logger.exception("Terminal restore failed while handling %s.", exc_type.__name__)
        return False

    def open(self) -> None:
        with TerminalSession._lock:
            if TerminalSession._active is not None:
                raise TerminalSessionError("a terminal session is already active")
            TerminalSession._active = self

        try:
            self._live = Live(
                console=self.console,
                screen=self._alt_screen,
                auto_refresh=False,
                transient=not self._alt_screen,
                redirect_stdout=False,
                redirect_stderr=False,
            )
            self._live.start()

            self._fd = self._stdin.fileno()
            self._saved_mode = termios.tcgetattr(self._fd)
            tty.setcbreak(self._fd)
        except (termios.error, OSError, ValueError) as exc:
            try:
                self.close()
            except TerminalSessionError:
                logger.debug("Cleanup after failed open also failed.", exc_info=True)
            raise TerminalSessionError(f"cannot enter raw terminal mode: {exc}") from exc

        logger.info("Terminal session opened (alt_screen=%s).", self._alt_screen)

    def close(self) -> None:
        if not self.active:
            return

        errors: list[BaseException] = []

        if self._fd is not None and self._saved_mode is not None:
            try:
                termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_mode)
            except (termios.error, OSError, ValueError) as exc:
                errors.append(exc)
        self._saved_mode = None
        self._fd = None

        if self._live is not None:
            try:
                self._live.stop()
            except OSError as exc:
                errors.append(exc)
            self._live = None

        with TerminalSession._lock:
            TerminalSession._active = None

        if errors:
            raise TerminalSessionError(f"cannot restore terminal: {errors[0]}") from errors[0]
        logger.info("Terminal session closed.")

    def draw(self, renderable: RenderableType) -> None:
        if self._live is None:
            raise TerminalSessionError("terminal session is not open")
        self._live.update(renderable, refresh=True)
