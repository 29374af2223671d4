# src/nextup/tasks/task_persistence.py

from __future__ import annotations

"""
Durable storage for the task set.

The whole set is one JSON array on disk. Writes go to a sibling ".tmp" file
which is then renamed over the real one, so a crash mid-write leaves either
the old file or the new one, never half of either.

Two layers:
- TaskFile: raw read/write, raises LoadFailure / PersistenceFailure
- PersistenceGateway: binds a TaskFile to a TaskStore and never raises

PeriodicSaver owns the only writer thread.
"""

import json
import logging
import os
import threading
from pathlib import Path

from ..errors import InvalidTask, LoadFailure, PersistenceFailure
from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_SAVE_INTERVAL_SECONDS = 30.0


class TaskFile:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @property
    def tmp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> list[Task]:
        """
        Decode the file into tasks.

        A record that does not decode is skipped with a warning; a file that is
        not a JSON array at all raises LoadFailure.
        """
        try:
            raw = self.path.read_text("utf-8")
        except OSError as e:
            raise LoadFailure(f"cannot read {self.path}: {e}") from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise LoadFailure(f"{self.path} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise LoadFailure(f"{self.path} does not contain a JSON array")

        out: list[Task] = []
        for i, item in enumerate(data):
            try:
                out.append(Task.from_dict(item))
            except InvalidTask as e:
                logger.warning("Skipping record #%d in %s: %s", i, self.path, e)
        return out

    def write(self, tasks: list[Task]) -> None:
        payload = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=2)
        tmp = self.tmp_path
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, "utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise PersistenceFailure(f"cannot write {self.path}: {e}") from e


class PersistenceGateway:
    """Save/load the full contents of a TaskStore. Failures are logged, never raised."""

    def __init__(self, store: TaskStore, path: str | Path) -> None:
        self._store = store
        self._file = TaskFile(path)
        # Serializes the background saver against shutdown/explicit saves.
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._file.path

    def load(self) -> int:
        """
        Fill the store from disk. Missing or broken files mean "start empty".

        Returns the number of tasks in the store afterwards.
        """
        if not self._file.exists():
            logger.info("No task file at %s, starting empty", self._file.path)
            return self._store.replace_all([])

        try:
            tasks = self._file.read()
        except LoadFailure as e:
            logger.warning("Task file unusable, starting empty: %s", e)
            return self._store.replace_all([])

        total = self._store.replace_all(tasks)
        logger.info("Loaded %d tasks from %s", total, self._file.path)
        return total

    def save(self) -> bool:
        """Write a snapshot of the store. Returns False on failure; memory stays authoritative."""
        tasks = self._store.snapshot()
        with self._write_lock:
            try:
                self._file.write(tasks)
            except PersistenceFailure:
                logger.exception("Saving tasks failed; will retry on next cycle")
                return False
        logger.debug("Saved %d tasks to %s", len(tasks), self._file.path)
        return True


class PeriodicSaver:
    """
    Background writer.

    Saves whenever request_save() was called (after each mutation) and
    at least every interval_seconds. stop() wakes the thread, joins it,
    then flushes once more so nothing accepted before shutdown is lost.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        interval_seconds: float = DEFAULT_SAVE_INTERVAL_SECONDS,
    ) -> None:
        self._gateway = gateway
        self._interval = max(0.01, float(interval_seconds))
        self._wake = threading.Event()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="nextup-saver", daemon=True)
        self._thread.start()
        logger.info("Periodic saver started (interval=%.1fs)", self._interval)

    def request_save(self) -> None:
        """Ask for a save soon. Safe to call from any thread; never blocks."""
        self._wake.set()

    def stop(self, timeout: float | None = 10.0) -> None:
        self._stop.set()
        self._wake.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Periodic saver did not stop within %ss", timeout)
            self._thread = None
        self._gateway.save()
        logger.info("Periodic saver stopped")

    def _run(self) -> None:
        while not self._stop.is_set():
            self._wake.wait(timeout=self._interval)
            if self._stop.is_set():
                break
            self._wake.clear()
            try:
                self._gateway.save()
            except Exception:
                # save() already logs its own failures; this guards the thread itself.
                logger.exception("Periodic save crashed")
