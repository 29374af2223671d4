# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from nextup.core.state import AppState
from nextup.tasks.task_persistence import PersistenceGateway
from nextup.tasks.task_store import TaskStore

from .fakes import FakeSaver

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the connectors.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="nextup-test",
        data_file=tmp_path / "tasks.json",
        save_interval_seconds=30.0,
        host="127.0.0.1",
        port=0,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState with a real store and gateway, but a fake saver so nothing
    runs in the background.
    """
    store = TaskStore()
    return AppState(
        settings=settings,
        task_store=store,
        persistence=PersistenceGateway(store, settings.data_file),
        saver=FakeSaver(),
    )
