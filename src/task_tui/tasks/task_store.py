# src/task_tui/tasks/task_store.py

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from ..errors import StoreReadError, StoreWriteError
from .task_models import Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    JSON file task store.

    The whole task list lives in one document (a JSON array of task records).
    There is no cache: every load() rereads the file and every save() rewrites
    it in full, sorted by id.

    - An absent file, an empty file and a literal `null` document all decode
      to an empty list (first run).
    - The file and its parent directory are created on first use, once per
      store instance.
    - Single writer: only the controller thread calls load()/save().
    """

    def __init__(self, db_path: str | Path, *, atomic_writes: bool = False) -> None:
        self._db_path = Path(db_path)
        self._atomic_writes = bool(atomic_writes)
        self._provisioned = False

    @property
    def path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _ensure_file(self, error_cls: type[StoreReadError] | type[StoreWriteError]) -> None:
        if self._provisioned:
            return
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            if not self._db_path.exists():
                self._db_path.touch()
                logger.info("TaskStore created db=%s", self._db_path)
        except OSError as exc:
            raise error_cls(f"cannot provision task store {self._db_path}: {exc}") from exc
        self._provisioned = True

    def _read_text(self) -> str:
        try:
            return self._db_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreReadError(f"cannot read task store {self._db_path}: {exc}") from exc

    def _write_text(self, text: str) -> None:
        try:
            if self._atomic_writes:
                tmp = self._db_path.with_suffix(self._db_path.suffix + ".tmp")
                tmp.write_text(text, encoding="utf-8")
                os.replace(tmp, self._db_path)
            else:
                # Truncate, then write the whole document.
                with open(self._db_path, "w", encoding="utf-8") as f:
                    f.write(text)
        except OSError as exc:
            raise StoreWriteError(f"cannot write task store {self._db_path}: {exc}") from exc

    @staticmethod
    def decode(text: str) -> list[Task]:
        """Decode a store document. Empty text and `null` mean no tasks."""
        if not text.strip():
            return []

        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StoreReadError(f"task store is not valid JSON: {exc}") from exc

        if data is None:
            return []
        if not isinstance(data, list):
            raise StoreReadError(f"task store must hold a list, got {type(data).__name__}")

        tasks: list[Task] = []
        seen: set[int] = set()
        for pos, record in enumerate(data):
            try:
                task = Task.from_record(record)
            except ValueError as exc:
                raise StoreReadError(f"bad task record at position {pos}: {exc}") from exc
            if task.id in seen:
                raise StoreReadError(f"duplicate task id {task.id} in task store")
            seen.add(task.id)
            tasks.append(task)
        return tasks

    @staticmethod
    def encode(tasks: Iterable[Task]) -> str:
        return json.dumps([t.to_record() for t in tasks], ensure_ascii=False, indent=2)

    # ---- public API ----

    def load(self) -> list[Task]:
        self._ensure_file(StoreReadError)
        tasks = self.decode(self._read_text())
        logger.debug("TaskStore loaded %d task(s) from %s", len(tasks), self._db_path)
        return tasks

    def save(self, tasks: Iterable[Task]) -> list[Task]:
        """
        Replace the file contents with `tasks`, sorted by ascending id.

        Returns the sorted list so the caller's view matches what was written.
        """
        self._ensure_file(StoreWriteError)
        ordered = sorted(tasks, key=lambda t: t.id)
        self._write_text(self.encode(ordered))
        logger.debug("TaskStore saved %d task(s) to %s", len(ordered), self._db_path)
        return ordered
