# tests/test_event_source.py

from __future__ import annotations

import logging
import queue

import pytest

from task_tui.connectors.event_source import EventChannel, EventSource
from task_tui.core.events import InputEvent, Key, KeyCode, TickEvent
from task_tui.errors import EventSourceFailure

from .fakes import FakeKeyReader, FakeMonotonic, IdleKeyReader


def test_channel_preserves_order_and_fails_after_close() -> None:
    ch = EventChannel()
    ch.send(TickEvent())
    ch.send(InputEvent(Key.of("a")))
    ch.close()

    assert ch.recv() == TickEvent()
    assert ch.recv() == InputEvent(Key.of("a"))
    with pytest.raises(EventSourceFailure):
        ch.recv()
    # stays closed
    with pytest.raises(EventSourceFailure):
        ch.recv()
    with pytest.raises(EventSourceFailure):
        ch.send(TickEvent())


def test_channel_close_carries_the_cause() -> None:
    ch = EventChannel()
    cause = OSError("tty gone")
    ch.close(cause)

    with pytest.raises(EventSourceFailure) as info:
        ch.recv()
    assert info.value.__cause__ is cause


def test_channel_recv_timeout() -> None:
    with pytest.raises(queue.Empty):
        EventChannel().recv(timeout=0.01)


def test_input_is_forwarded_before_the_tick() -> None:
    clock = FakeMonotonic()
    reader = FakeKeyReader([Key.of("a"), Key(KeyCode.DOWN)], clock=clock)
    source = EventSource(reader, tick_rate=0.2, clock=clock)

    source.pump(max_iterations=3)

    ch = source.channel
    assert ch.recv(timeout=0) == InputEvent(Key.of("a"))
    assert ch.recv(timeout=0) == InputEvent(Key(KeyCode.DOWN))
    assert ch.recv(timeout=0) == TickEvent()
    with pytest.raises(queue.Empty):
        ch.recv(timeout=0)


def test_idle_input_still_ticks_every_interval() -> None:
    clock = FakeMonotonic()
    reader = FakeKeyReader(clock=clock)
    source = EventSource(reader, tick_rate=0.2, clock=clock)

    source.pump(max_iterations=4)

    events = [source.channel.recv(timeout=0) for _ in range(4)]
    assert events == [TickEvent()] * 4
    assert reader.polls == pytest.approx([0.2] * 4)
    assert clock.now == pytest.approx(0.8)


def test_unmapped_bytes_are_dropped() -> None:
    clock = FakeMonotonic()
    reader = FakeKeyReader([None, Key.of("a")], clock=clock)
    source = EventSource(reader, tick_rate=0.2, clock=clock)

    source.pump(max_iterations=2)

    assert source.channel.recv(timeout=0) == InputEvent(Key.of("a"))


def test_reader_failure_closes_channel() -> None:
    reader = FakeKeyReader([Key.of("a"), OSError("read failed")])
    source = EventSource(reader, tick_rate=5.0)
    source.start()

    assert source.channel.recv(timeout=2.0) == InputEvent(Key.of("a"))
    with pytest.raises(EventSourceFailure) as info:
        source.channel.recv(timeout=2.0)
    assert isinstance(info.value.__cause__, OSError)

    source.stop(timeout=2.0)
    assert not source.alive


def test_thread_ticks_and_stops() -> None:
    source = EventSource(IdleKeyReader(), tick_rate=0.02)
    source.start()
    try:
        assert source.channel.recv(timeout=2.0) == TickEvent()
    finally:
        source.stop(timeout=2.0)

    assert not source.alive
    assert source.channel.closed

    drained = 0
    with pytest.raises(EventSourceFailure):
        while True:
            source.channel.recv(timeout=1.0)
            drained += 1
            assert drained < 1000


def test_start_twice_and_bad_tick_rate() -> None:
    with pytest.raises(ValueError):
        EventSource(IdleKeyReader(), tick_rate=0)

    source = EventSource(IdleKeyReader(), tick_rate=0.02)
    source.start()
    try:
        with pytest.raises(RuntimeError):
            source.start()
    finally:
        source.stop(timeout=2.0)


def test_reader_failure_is_not_logged_as_an_error(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="task_tui.connectors.event_source")
    source = EventSource(FakeKeyReader([OSError("read failed")]), tick_rate=5.0)
    source.start()

    with pytest.raises(EventSourceFailure):
        source.channel.recv(timeout=2.0)
    source.stop(timeout=2.0)

    failures = [r for r in caplog.records if r.exc_info]
    assert len(failures) == 1
    assert failures[0].levelno < logging.WARNING
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
