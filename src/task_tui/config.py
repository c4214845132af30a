# src/task_tui/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a default, so a bare `task-tui` works on first run.
- Values are read once at startup; nothing here changes during a session.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASK_TUI"

# Store location relative to the user's home directory.
DEFAULT_DB_PATH = Path("data") / "db.json"
DEFAULT_TICK_RATE_MS = 200
MIN_TICK_RATE_MS = 10


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_dir: Path

    # ---- Store ----
    db_path: Path
    atomic_writes: bool

    # ---- Terminal ----
    tick_rate_ms: int
    alt_screen: bool

    @property
    def tick_rate(self) -> float:
        """Tick interval in seconds."""
        return self.tick_rate_ms / 1000.0

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "task-tui").strip() or "task-tui"
        log_level = _env(_k("LOG_LEVEL"), "WARNING").strip().upper() or "WARNING"

        db_path = _env_path(_k("DB_PATH"), Path.home() / DEFAULT_DB_PATH)
        log_dir = _env_path(_k("LOG_DIR"), db_path.parent)
        atomic_writes = _env_bool(_k("ATOMIC_WRITES"), False)

        tick_rate_ms = max(MIN_TICK_RATE_MS, _env_int(_k("TICK_RATE_MS"), DEFAULT_TICK_RATE_MS))
        alt_screen = _env_bool(_k("ALT_SCREEN"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_dir=log_dir,
            db_path=db_path,
            atomic_writes=atomic_writes,
            tick_rate_ms=tick_rate_ms,
            alt_screen=alt_screen,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
