# src/nextup/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- builds the task store, loads it from disk and wires the background saver
  into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_persistence import PeriodicSaver, PersistenceGateway
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_file.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, start_saver: bool = True) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore()
    persistence = PersistenceGateway(store, settings.data_file)
    persistence.load()

    saver = PeriodicSaver(
        persistence,
        interval_seconds=getattr(settings, "save_interval_seconds", 30.0),
    )
    if start_saver:
        saver.start()

    return AppState(
        settings=settings,
        task_store=store,
        persistence=persistence,
        saver=saver,
    )


def shutdown_state(state: AppState) -> None:
    """Stop the saver (which flushes once more). No exceptions escape."""
    try:
        state.saver.stop()
    except Exception:
        logger.exception("Failed to stop the periodic saver.")
