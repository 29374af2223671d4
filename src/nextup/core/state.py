# src/nextup/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_persistence import PersistenceGateway
from .ports import SaveScheduler, TaskRepo


@dataclass(slots=True)
class AppState:
    """
    Everything a request handler needs, built once by cli.bootstrap.

    Handlers receive this object; there is no module-level task map.
    """

    settings: Any
    task_store: TaskRepo
    persistence: PersistenceGateway
    saver: SaveScheduler
