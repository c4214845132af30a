# tests/test_main.py

from __future__ import annotations

import logging
import signal
from types import SimpleNamespace

import pytest

from task_tui.cli import main as cli_main
from task_tui.cli.bootstrap import create_initial_state
from task_tui.errors import StoreReadError
from task_tui.logging_setup import LOG_FILE_NAME, _ConsoleNoiseFilter, parse_level, setup_logging


class _Stdin:
    def __init__(self, tty: bool) -> None:
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty

    def fileno(self) -> int:
        return 0


@pytest.fixture()
def cli(monkeypatch: pytest.MonkeyPatch, settings: SimpleNamespace, restore_root_logging) -> pytest.MonkeyPatch:
    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(signal, "signal", lambda *args: None)
    return monkeypatch


def test_not_a_terminal(cli: pytest.MonkeyPatch, settings: SimpleNamespace, capsys) -> None:
    cli.setattr("sys.stdin", _Stdin(False))

    assert cli_main.main() == cli_main.EXIT_ERROR
    assert "stdin is not a terminal" in capsys.readouterr().err
    assert (settings.log_dir / LOG_FILE_NAME).exists()


@pytest.mark.parametrize(
    "error, code",
    [
        (StoreReadError("bad json"), cli_main.EXIT_ERROR),
        (KeyboardInterrupt(), cli_main.EXIT_SIGINT),
        (cli_main._Terminated(15), cli_main.EXIT_SIGTERM),
    ],
)
def test_session_errors_map_to_exit_codes(cli: pytest.MonkeyPatch, error: BaseException, code: int) -> None:
    cli.setattr("sys.stdin", _Stdin(True))

    def boom(state, **kwargs):
        raise error

    cli.setattr(cli_main, "run_session", boom)
    assert cli_main.main() == code


def test_clean_quit(cli: pytest.MonkeyPatch) -> None:
    cli.setattr("sys.stdin", _Stdin(True))
    cli.setattr(cli_main, "run_session", lambda state, **kwargs: None)
    assert cli_main.main() == cli_main.EXIT_OK


def test_bootstrap_creates_dirs(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)

    assert settings.db_path.parent.is_dir()
    assert settings.log_dir.is_dir()
    assert state.store.load() == []


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("task_tui.core.controller", logging.INFO))
    assert not f.filter(_record("task_tui.connectors.event_source", logging.INFO))
    assert f.filter(_record("task_tui.connectors.event_source", logging.WARNING))
    assert not f.filter(_record("task_tui.connectors.terminal", logging.INFO))
    assert not f.filter(_record("rich", logging.WARNING))
    assert f.filter(_record("rich", logging.ERROR))


def test_parse_level() -> None:
    assert parse_level("debug") == logging.DEBUG
    assert parse_level(" ERROR ") == logging.ERROR
    assert parse_level("loud") == logging.WARNING
    assert parse_level(None, default=logging.INFO) == logging.INFO


def test_setup_logging_console_is_quiet_file_is_full(settings: SimpleNamespace, restore_root_logging, capsys) -> None:
    log_file = setup_logging(settings)

    log = logging.getLogger("task_tui.core.controller")
    log.info("loop started")
    log.warning("store is slow")
    logging.getLogger("task_tui.connectors.event_source").info("source failed", exc_info=False)
    for h in logging.getLogger().handlers:
        h.flush()

    err = capsys.readouterr().err
    assert "task-tui: store is slow" in err
    assert "loop started" not in err
    assert "source failed" not in err

    text = log_file.read_text(encoding="utf-8")
    assert "loop started" in text
    assert "store is slow" in text
    assert "source failed" in text
