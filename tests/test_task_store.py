# tests/test_task_store.py

from __future__ import annotations

import threading

import pytest

from nextup.errors import InvalidTask
from nextup.tasks.task_models import Task
from nextup.tasks.task_store import ReadWriteLock, TaskStore


def test_upsert_replaces_whole_record() -> None:
    store = TaskStore()
    assert store.upsert(Task(id="a", title="old", minutes_needed=10, importance=5, due_at="x")) == 1
    assert store.upsert(Task(id="a", title="new")) == 1

    got = store.get("a")
    assert got == Task(id="a", title="new")
    assert got.due_at is None


def test_upsert_rejects_empty_id() -> None:
    store = TaskStore()
    with pytest.raises(InvalidTask):
        store.upsert(Task(id=""))
    assert store.count() == 0


def test_delete_is_idempotent() -> None:
    store = TaskStore([Task(id="a"), Task(id="b")])
    assert store.delete("a") == 1
    assert store.delete("a") == 1
    assert store.delete("never-existed") == 1
    assert store.get("a") is None


def test_snapshot_is_independent_copy() -> None:
    store = TaskStore([Task(id="a")])
    snap = store.snapshot()
    snap.append(Task(id="b"))
    snap.clear()

    assert store.count() == 1
    store.upsert(Task(id="c"))
    assert {t.id for t in store.snapshot()} == {"a", "c"}


def test_replace_all_drops_empty_ids_and_keeps_last_duplicate() -> None:
    store = TaskStore([Task(id="old")])
    n = store.replace_all([Task(id="a", title="1"), Task(id=""), Task(id="a", title="2")])
    assert n == 1
    assert store.get("a").title == "2"
    assert store.get("old") is None


def test_concurrent_writers_and_readers_stay_consistent() -> None:
    store = TaskStore()
    errors: list[BaseException] = []
    start = threading.Barrier(8)

    def writer(prefix: str) -> None:
        try:
            start.wait()
            for i in range(200):
                store.upsert(Task(id=f"{prefix}{i}", minutes_needed=i))
                if i % 3 == 0:
                    store.delete(f"{prefix}{i}")
        except BaseException as e:
            errors.append(e)

    def reader() -> None:
        try:
            start.wait()
            for _ in range(200):
                snap = store.snapshot()
                # Every snapshot is internally consistent: unique ids.
                assert len({t.id for t in snap}) == len(snap)
        except BaseException as e:
            errors.append(e)

    threads = [threading.Thread(target=writer, args=(p,)) for p in "wxyz"]
    threads += [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert not errors
    # 200 per writer, every third (i % 3 == 0 -> 67 of them) deleted again.
    assert store.count() == 4 * (200 - 67)


def test_rwlock_allows_parallel_readers() -> None:
    lock = ReadWriteLock()
    both_inside = threading.Barrier(2, timeout=5)

    def read() -> None:
        with lock.read():
            both_inside.wait()

    threads = [threading.Thread(target=read) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)
    assert not both_inside.broken


def test_rwlock_writer_excludes_readers() -> None:
    lock = ReadWriteLock()
    order: list[str] = []
    writer_in = threading.Event()
    release = threading.Event()

    def write() -> None:
        with lock.write():
            writer_in.set()
            release.wait(5)
            order.append("write-done")

    def read() -> None:
        with lock.read():
            order.append("read")

    w = threading.Thread(target=write)
    w.start()
    writer_in.wait(5)
    r = threading.Thread(target=read)
    r.start()
    r.join(timeout=0.2)
    assert order == []

    release.set()
    w.join(timeout=5)
    r.join(timeout=5)
    assert order == ["write-done", "read"]
