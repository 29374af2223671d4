# src/nextup/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (loads tasks, starts the saver), then starts connectors:
- HTTP API in a background thread (optional),
- console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import sys
import threading

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..connectors.http_connector import HttpBackgroundRunner, start_http_in_background
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    logger.info("Tasks in memory: %d", state.task_store.count())

    http_runner: HttpBackgroundRunner | None = None
    if settings.http_enabled:
        http_runner = start_http_in_background(state)
        if http_runner is None:
            # The only fatal condition: we were asked to serve and cannot.
            shutdown_state(state)
            return 1

    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        signal.signal(signal.SIGINT, _handle_signal)
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError):
        # Not in the main thread, or the platform lacks SIGTERM.
        logger.debug("Signal handlers not installed.", exc_info=True)

    try:
        if settings.console_enabled:
            run_console_loop(state)
            stop_main.set()
        else:
            logger.info("Console disabled. Serving HTTP only. Press Ctrl+C to stop.")
            while not stop_main.wait(timeout=1.0):
                if http_runner is not None and not http_runner.is_alive():
                    logger.error("HTTP server thread exited unexpectedly.")
                    break
    finally:
        if http_runner is not None:
            http_runner.stop()
            http_runner.join(timeout=10.0)

        shutdown_state(state)
        logger.info("Bye.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
