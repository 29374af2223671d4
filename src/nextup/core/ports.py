# src/nextup/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the service facade and connectors.

The facade depends on Protocols instead of concrete classes, so tests can hand
in fakes and the storage/persistence pieces stay swappable.
"""

from typing import Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """Concurrent task map (see tasks.task_store.TaskStore)."""

    def snapshot(self) -> list[Task]: ...

    def get(self, task_id: str) -> Task | None: ...

    def count(self) -> int: ...

    def upsert(self, task: Task) -> int: ...

    def delete(self, task_id: str) -> int: ...


class SaveScheduler(Protocol):
    """Something that persists the task set soon after being asked to."""

    def request_save(self) -> None: ...

    def stop(self, timeout: float | None = 10.0) -> None: ...
