# src/nextup/tasks/task_api.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.state import AppState
from .ranking import pick_next, rank_tasks
from .task_models import QueryContext, Task

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class MutationResult:
    ok: bool
    count: int

    def to_dict(self) -> dict[str, object]:
        return {"ok": self.ok, "count": self.count}


def all_tasks(state: AppState) -> list[Task]:
    """Every stored task, in no particular order."""
    return state.task_store.snapshot()


def list_tasks(state: AppState, ctx: QueryContext) -> list[Task]:
    """All tasks, best first."""
    # Snapshot under the read lock, score outside it.
    return rank_tasks(state.task_store.snapshot(), ctx)


def next_task(state: AppState, ctx: QueryContext) -> Task | None:
    """The single best task, or None when nothing is stored."""
    return pick_next(state.task_store.snapshot(), ctx)


def upsert_task(state: AppState, task: Task) -> MutationResult:
    """
    Create or replace a task. Raises InvalidTask for an empty id.
    Persistence happens in the background; this never waits on disk.
    """
    count = state.task_store.upsert(task)
    state.saver.request_save()
    logger.info("Task saved id=%s count=%s", task.id, count)
    return MutationResult(ok=True, count=count)


def delete_task(state: AppState, task_id: str) -> MutationResult:
    count = state.task_store.delete(task_id)
    state.saver.request_save()
    logger.info("Task deleted id=%s count=%s", task_id, count)
    return MutationResult(ok=True, count=count)
