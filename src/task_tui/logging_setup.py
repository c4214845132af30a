# src/task_tui/logging_setup.py

"""
Logging for a full-screen app.

While the session is open, rich owns the terminal and anything written to
stderr lands in the alternate screen buffer, which is discarded on exit. The
log file is therefore the real record; the console handler only carries the
few lines a user should see after the terminal is restored.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "task-tui.log"

# Loggers that only run while the session owns the screen.
_SESSION_LOGGERS = ("task_tui.connectors.",)


def parse_level(name: str | None, default: int = logging.WARNING) -> int:
    """Map a level name like "debug" to its number; unknown names give `default`."""
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else default


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console policy:
    - task_tui logs pass at the handler level
    - session-time loggers (terminal, event source) only at WARNING+
    - everything else only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith(_SESSION_LOGGERS):
            return record.levelno >= logging.WARNING
        if name.startswith("task_tui."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(settings) -> Path:
    """
    Install the console and file handlers from `settings` (log_dir, log_level).

    The file gets everything at DEBUG. Call once, before the terminal session
    starts. Returns the log file path.
    """
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(threadName)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(parse_level(getattr(settings, "log_level", None)))
    console.setFormatter(logging.Formatter("%(app)s: %(message)s", defaults={"app": settings.app_name}))
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    return log_file
