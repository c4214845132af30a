# src/task_tui/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs one full-screen session:
- the event source thread produces keys and ticks,
- the controller loop consumes them on the main thread,
- the terminal session guard restores the terminal on every exit path.
"""

from __future__ import annotations

import logging
import signal
import sys

from rich.console import Console

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.event_source import EventSource
from ..connectors.terminal import TerminalKeyReader, TerminalSession
from ..core.controller import Controller
from ..core.state import AppState
from ..errors import TaskTuiError
from ..logging_setup import setup_logging
from ..ui.render import render_frame

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_SIGINT = 130
EXIT_SIGTERM = 143


class _Terminated(Exception):
    """Raised on the main thread when SIGTERM arrives."""


def _handle_sigterm(signum, _frame) -> None:
    raise _Terminated(signum)


def run_session(state: AppState, *, console: Console | None = None) -> None:
    """Run the interactive session until the user quits. Errors propagate."""
    settings = state.settings
    console = console or Console()
    controller = Controller(state)

    with TerminalSession(console, alt_screen=settings.alt_screen) as session:
        source = EventSource(TerminalKeyReader(), tick_rate=settings.tick_rate)
        source.start()
        try:
            controller.run(
                source.channel,
                draw=lambda snapshot: session.draw(render_frame(snapshot, controller.bindings)),
            )
        finally:
            source.stop()


def main() -> int:
    settings = get_settings()
    log_file = setup_logging(settings)

    logger.info("Starting %s (log=%s)...", settings.app_name, log_file)

    if not sys.stdin.isatty():
        print(f"{settings.app_name}: stdin is not a terminal", file=sys.stderr)
        return EXIT_ERROR

    try:
        signal.signal(signal.SIGTERM, _handle_sigterm)
    except (ValueError, OSError):
        logger.debug("SIGTERM handler not installed.", exc_info=True)

    try:
        state = create_initial_state(settings=settings)
        run_session(state)
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        return EXIT_SIGINT
    except _Terminated:
        logger.info("Terminated by signal.")
        return EXIT_SIGTERM
    except TaskTuiError as exc:
        logger.debug("Fatal error, session aborted.", exc_info=True)
        logger.error("%s: %s", type(exc).__name__, exc)
        return EXIT_ERROR

    logger.info("Bye.")
    return EXIT_OK


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
