# src/task_tui/connectors/event_source.py

"""
Event source.

One background thread merges terminal input and a wall-clock tick into a
single ordered channel:
- wait up to the remaining tick interval for input; forward a key at once,
- once a full interval has passed since the last tick, forward a Tick.

The thread only ever writes to the channel. If the input device fails the
channel is closed with the error, and the consumer's next recv() raises
EventSourceFailure.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable

from ..core.events import Event, InputEvent, TickEvent
from ..core.ports import KeyReader
from ..errors import EventSourceFailure

logger = logging.getLogger(__name__)


class _Closed:
    __slots__ = ("error",)

    def __init__(self, error: BaseException | None) -> None:
        self.error = error


class EventChannel:
    """Single-producer / single-consumer ordered event queue that can be closed."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[Event | _Closed]" = queue.Queue()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, event: Event) -> None:
        if self._closed.is_set():
            raise EventSourceFailure("event channel is closed")
        self._queue.put(event)

    def close(self, error: BaseException | None = None) -> None:
        """Close the channel; events already queued are still delivered first."""
        if self._closed.is_set():
            return
        self._closed.set()
        self._queue.put(_Closed(error))

    def recv(self, timeout: float | None = None) -> Event:
        """
        Block for the next event.

        Raises EventSourceFailure once the channel has been closed, and
        queue.Empty if `timeout` expires first.
        """
        item = self._queue.get(timeout=timeout)
        if isinstance(item, _Closed):
            # Keep the marker queued so later calls fail the same way.
            self._queue.put(item)
            if item.error is not None:
                raise EventSourceFailure(f"event source stopped: {item.error}") from item.error
            raise EventSourceFailure("event source stopped")
        return item


class EventSource:
    """Producer thread feeding an EventChannel from a KeyReader and a tick clock."""

    def __init__(
        self,
        reader: KeyReader,
        *,
        tick_rate: float,
        channel: EventChannel | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if tick_rate <= 0:
            raise ValueError("tick_rate must be positive")
        self.reader = reader
        self.tick_rate = float(tick_rate)
        self.channel = channel or EventChannel()
        self._clock = clock
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("event source already started")
        self._thread = threading.Thread(target=self._run, name="event-source", daemon=True)
        self._thread.start()
        logger.info("Event source started (tick=%.3fs).", self.tick_rate)

    def stop(self, timeout: float | None = None) -> None:
        """Ask the thread to finish and wait for it (bounded by one poll)."""
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout if timeout is not None else self.tick_rate * 2 + 0.5)
            if self._thread.is_alive():
                logger.warning("Event source thread did not stop in time.")

    @property
    def alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        try:
            self.pump()
        except Exception as exc:
            # File log only; main() reports the error once the terminal is restored.
            logger.info("Event source failed; closing the event channel.", exc_info=True)
            self.channel.close(exc)
        else:
            self.channel.close()
        finally:
            logger.info("Event source finished.")

    def pump(self, max_iterations: int | None = None) -> None:
        """
        The producer loop; runs until stop() or `max_iterations` polls.

        Runs on the event-source thread in production and is called directly
        by tests with fake readers and clocks.
        """
        last_tick = self._clock()
        iterations = 0

        while not self._stop.is_set():
            if max_iterations is not None and iterations >= max_iterations:
                return
            iterations += 1

            timeout = max(0.0, self.tick_rate - (self._clock() - last_tick))
            if self.reader.poll(timeout):
                key = self.reader.read()
                if key is not None:
                    self.channel.send(InputEvent(key))

            if self._clock() - last_tick >= self.tick_rate:
                self.channel.send(TickEvent())
                last_tick = self._clock()
