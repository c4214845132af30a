# src/task_tui/tasks/task_models.py

from __future__ import annotations

import random
import string
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from ..errors import InvalidStateError

GENERATED_NAME_LENGTH = 10


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TaskState(StrEnum):
    """
    Task lifecycle state.

    The only transition is `advance()`, which moves one step forward:
    pending -> started -> in progress -> done. Done is terminal.
    """

    PENDING = "pending"
    STARTED = "started"
    IN_PROGRESS = "in progress"
    DONE = "done"

    @classmethod
    def from_token(cls, raw: object) -> TaskState:
        """Decode the persisted/display token. Unknown tokens never default to PENDING."""
        if not isinstance(raw, str):
            raise InvalidStateError(raw)
        try:
            return cls(raw)
        except ValueError:
            raise InvalidStateError(raw) from None

    def advance(self) -> TaskState:
        order = list(TaskState)
        idx = order.index(self)
        return order[min(idx + 1, len(order) - 1)]

    @property
    def is_terminal(self) -> bool:
        return self is TaskState.DONE


def generate_task_name(rng: random.Random | None = None) -> str:
    """Random alphanumeric name used when a task is added without one."""
    rng = rng or random.Random()
    alphabet = string.ascii_letters + string.digits
    return "".join(rng.choice(alphabet) for _ in range(GENERATED_NAME_LENGTH))


def _format_ts(value: datetime) -> str:
    return value.isoformat()


def _parse_ts(raw: Any, field_name: str) -> datetime:
    if not isinstance(raw, str):
        raise ValueError(f"{field_name} must be an ISO-8601 string")
    dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(slots=True)
class Task:
    id: int
    name: str
    state: TaskState
    created_at: datetime
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @classmethod
    def create(cls, task_id: int, name: str, *, now: datetime | None = None) -> Task:
        if task_id < 1:
            raise ValueError("task id must be positive")
        name = (name or "").strip()
        if not name:
            raise ValueError("task name is required")
        return cls(
            id=task_id,
            name=name,
            state=TaskState.PENDING,
            created_at=now or utc_now(),
        )

    def progress(self, *, now: datetime | None = None) -> None:
        """
        Step the lifecycle forward.

        Entering STARTED stamps started_at, entering DONE stamps finished_at.
        A timestamp that is already set is never overwritten, so progressing
        a DONE task changes nothing.
        """
        if self.state.is_terminal:
            return

        now = now or utc_now()
        self.state = self.state.advance()

        if self.state is TaskState.STARTED and self.started_at is None:
            self.started_at = now
        elif self.state is TaskState.DONE and self.finished_at is None:
            self.finished_at = now

    # ---- persistence ----

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "state": self.state.value,
            "created_at": _format_ts(self.created_at),
        }
        if self.started_at is not None:
            record["started_at"] = _format_ts(self.started_at)
        if self.finished_at is not None:
            record["finished_at"] = _format_ts(self.finished_at)
        return record

    @classmethod
    def from_record(cls, record: Any) -> Task:
        """
        Build a Task from one decoded store record.

        Raises InvalidStateError for an unknown state token and ValueError for
        any other shape problem (the store turns those into StoreReadError).
        """
        if not isinstance(record, dict):
            raise ValueError("task record must be an object")

        for key in ("id", "name", "state", "created_at"):
            if key not in record:
                raise ValueError(f"task record is missing {key!r}")

        task_id = record["id"]
        if isinstance(task_id, bool) or not isinstance(task_id, int) or task_id < 1:
            raise ValueError(f"task id must be a positive integer, got {task_id!r}")

        name = record["name"]
        if not isinstance(name, str) or not name:
            raise ValueError(f"task {task_id} has an empty name")

        state = TaskState.from_token(record["state"])

        started_raw = record.get("started_at")
        finished_raw = record.get("finished_at")

        task = cls(
            id=task_id,
            name=name,
            state=state,
            created_at=_parse_ts(record["created_at"], "created_at"),
            started_at=None if started_raw is None else _parse_ts(started_raw, "started_at"),
            finished_at=None if finished_raw is None else _parse_ts(finished_raw, "finished_at"),
        )
        task._check_timestamps()
        return task

    def _check_timestamps(self) -> None:
        if self.started_at is not None and self.state is TaskState.PENDING:
            raise ValueError(f"task {self.id} is pending but has started_at")
        if self.finished_at is not None and self.state is not TaskState.DONE:
            raise ValueError(f"task {self.id} is {self.state.value} but has finished_at")

        stamps = [ts for ts in (self.created_at, self.started_at, self.finished_at) if ts is not None]
        if stamps != sorted(stamps):
            raise ValueError(f"task {self.id} timestamps are out of order")
