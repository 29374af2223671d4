# tests/test_task_persistence.py

from __future__ import annotations

import json
import random
import time
from pathlib import Path

import pytest

from nextup.errors import LoadFailure, PersistenceFailure
from nextup.tasks.task_models import Task
from nextup.tasks.task_persistence import PeriodicSaver, PersistenceGateway, TaskFile
from nextup.tasks.task_store import TaskStore


def _wait_for(cond, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if cond():
            return True
        time.sleep(0.01)
    return cond()


def _sample_tasks(n: int) -> list[Task]:
    emotions = ["PLEASANT", "NEUTRAL", "AVERSIVE", "MYSTERY", ""]
    return [
        Task(
            id=f"task-{i}",
            title=f"Task number {i} ✓",
            emotion=emotions[i % len(emotions)],
            minutes_needed=i * 7 - 3,
            importance=(i % 7) - 1,
            due_at=None if i % 3 else f"2026-11-{(i % 28) + 1:02d}T08:30:00+02:00",
        )
        for i in range(n)
    ]


def test_round_trip_is_field_for_field_and_order_independent(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    tasks = _sample_tasks(25)
    shuffled = tasks[:]
    random.Random(3).shuffle(shuffled)

    store = TaskStore()
    for t in shuffled:
        store.upsert(t)
    assert PersistenceGateway(store, path).save() is True

    fresh = TaskStore()
    assert PersistenceGateway(fresh, path).load() == 25
    assert sorted(fresh.snapshot(), key=lambda t: t.id) == sorted(tasks, key=lambda t: t.id)


def test_saved_file_is_a_json_array_of_records(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = TaskStore([Task(id="a", title="x", emotion="NEUTRAL", minutes_needed=5, importance=2)])
    PersistenceGateway(store, path).save()

    data = json.loads(path.read_text("utf-8"))
    assert data == [
        {"id": "a", "title": "x", "emotion": "NEUTRAL", "minutesNeeded": 5, "importance": 2, "dueAt": None}
    ]
    assert not (tmp_path / "tasks.json.tmp").exists()


def test_save_replaces_previous_file(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = TaskStore([Task(id="a"), Task(id="b")])
    gw = PersistenceGateway(store, path)
    gw.save()
    store.delete("a")
    gw.save()

    assert [r["id"] for r in json.loads(path.read_text("utf-8"))] == ["b"]


def test_save_creates_missing_parent_dirs(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "deeper" / "tasks.json"
    assert PersistenceGateway(TaskStore([Task(id="a")]), path).save()
    assert path.exists()


def test_load_missing_file_starts_empty(tmp_path: Path) -> None:
    store = TaskStore([Task(id="stale")])
    assert PersistenceGateway(store, tmp_path / "nope.json").load() == 0
    assert store.count() == 0


@pytest.mark.parametrize("content", ["{not json", '{"id": "a"}', "", "null"])
def test_load_corrupt_file_starts_empty(tmp_path: Path, content: str) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(content, "utf-8")

    store = TaskStore()
    assert PersistenceGateway(store, path).load() == 0
    assert store.count() == 0


def test_load_skips_bad_records_but_keeps_good_ones(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(
        json.dumps(
            [
                {"id": "good", "minutesNeeded": 10},
                {"id": "bad", "minutesNeeded": "lots"},
                "not an object",
                {"id": "", "title": "no id"},
                {"id": "also-good", "dueAt": "whenever"},
            ]
        ),
        "utf-8",
    )

    store = TaskStore()
    assert PersistenceGateway(store, path).load() == 2
    assert store.get("also-good").due_at == "whenever"


def test_task_file_raises_typed_errors(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("[", "utf-8")
    with pytest.raises(LoadFailure):
        TaskFile(broken).read()

    # Renaming a file over a directory fails.
    target_dir = tmp_path / "is_a_dir"
    target_dir.mkdir()
    with pytest.raises(PersistenceFailure):
        TaskFile(target_dir).write([Task(id="a")])


def test_save_failure_is_reported_and_memory_stays_authoritative(tmp_path: Path) -> None:
    target_dir = tmp_path / "is_a_dir"
    target_dir.mkdir()
    store = TaskStore([Task(id="a"), Task(id="b")])

    assert PersistenceGateway(store, target_dir).save() is False
    assert store.count() == 2
    assert target_dir.is_dir()


def test_periodic_saver_writes_on_request(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = TaskStore()
    saver = PeriodicSaver(PersistenceGateway(store, path), interval_seconds=60.0)
    saver.start()
    try:
        store.upsert(Task(id="a"))
        saver.request_save()
        assert _wait_for(lambda: path.exists() and "\"a\"" in path.read_text("utf-8"))
    finally:
        saver.stop(timeout=5.0)
    assert not saver.running


def test_periodic_saver_writes_on_interval_without_requests(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = TaskStore([Task(id="a")])
    saver = PeriodicSaver(PersistenceGateway(store, path), interval_seconds=0.05)
    saver.start()
    try:
        assert _wait_for(path.exists)
    finally:
        saver.stop(timeout=5.0)


def test_periodic_saver_stop_flushes_last_state(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = TaskStore()
    saver = PeriodicSaver(PersistenceGateway(store, path), interval_seconds=60.0)
    saver.start()
    store.upsert(Task(id="late"))
    saver.stop(timeout=5.0)

    assert [r["id"] for r in json.loads(path.read_text("utf-8"))] == ["late"]


def test_periodic_saver_survives_failing_saves(tmp_path: Path) -> None:
    target_dir = tmp_path / "is_a_dir"
    target_dir.mkdir()
    store = TaskStore([Task(id="a")])
    saver = PeriodicSaver(PersistenceGateway(store, target_dir), interval_seconds=0.02)
    saver.start()
    try:
        time.sleep(0.1)
        assert saver.running
    finally:
        saver.stop(timeout=5.0)
