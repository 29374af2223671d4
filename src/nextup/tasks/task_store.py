# src/nextup/tasks/task_store.py

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from ..errors import InvalidTask
from .task_models import Task

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Many readers or one writer.

    Waiting writers block new readers, so a steady stream of snapshots
    cannot starve a mutation.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class TaskStore:
    """
    In-memory task map, the single source of truth while the process runs.

    Thread-safety:
    - reads (snapshot/get/count) share the lock
    - writes (upsert/delete/replace_all) are exclusive
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._lock = ReadWriteLock()
        self._tasks: dict[str, Task] = {}
        for t in tasks:
            if t.id:
                self._tasks[t.id] = t

    # ---- reads ----

    def snapshot(self) -> list[Task]:
        with self._lock.read():
            return list(self._tasks.values())

    def get(self, task_id: str) -> Task | None:
        with self._lock.read():
            return self._tasks.get(task_id)

    def count(self) -> int:
        with self._lock.read():
            return len(self._tasks)

    # ---- writes ----

    def upsert(self, task: Task) -> int:
        """Insert or fully replace the task with the same id. Returns the new count."""
        if not task.id:
            raise InvalidTask("id required")

        with self._lock.write():
            self._tasks[task.id] = task
            total = len(self._tasks)

        logger.debug("Task upserted id=%s total=%s", task.id, total)
        return total

    def delete(self, task_id: str) -> int:
        """Remove the task if present. Unknown ids are not an error. Returns the new count."""
        with self._lock.write():
            removed = self._tasks.pop(task_id, None) is not None
            total = len(self._tasks)

        logger.debug("Task delete id=%s removed=%s total=%s", task_id, removed, total)
        return total

    def replace_all(self, tasks: Iterable[Task]) -> int:
        """
        Swap the whole map (used once at startup by the loader).

        Later records win on duplicate ids; records without an id are dropped.
        """
        fresh: dict[str, Task] = {}
        for t in tasks:
            if not t.id:
                logger.warning("Skipping task without id during load")
                continue
            fresh[t.id] = t

        with self._lock.write():
            self._tasks = fresh
            return len(fresh)
