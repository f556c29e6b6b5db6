import json
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from application.mutations import ListItems
from application.todo_manager import TodoManager
from core import CorruptStoreError, EmptyMessageError, IndexOutOfRangeError, Record
from infrastructure.json_store import JsonRecordStore
from infrastructure.store_location import StoreLocation

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def _clock(start: datetime):
    ticks = iter(start + timedelta(minutes=i) for i in range(1000))
    return lambda: next(ticks)


@pytest.fixture
def store(tmp_path: Path) -> JsonRecordStore:
    return JsonRecordStore(StoreLocation(tmp_path / "store"))


@pytest.fixture
def seeded(store: JsonRecordStore) -> JsonRecordStore:
    store.save(
        [
            Record(T0, Path("/a/x"), "r1"),
            Record(T0 + timedelta(minutes=1), Path("/b/z"), "outside", completed_at=T0 + timedelta(minutes=2)),
            Record(T0 + timedelta(minutes=3), Path("/a/y"), "r2"),
        ]
    )
    return store


def _manager(store) -> TodoManager:
    return TodoManager(store, clock=_clock(T0 + timedelta(days=1)))


def _snapshot(store: JsonRecordStore):
    stat = store.path.stat()
    return store.path.read_bytes(), stat.st_mtime_ns


def test_list_respects_scope(seeded):
    manager = _manager(seeded)
    assert [r.message for r in manager.list_items([Path("/a")])] == ["r1", "r2"]
    assert [r.message for r in manager.list_items([Path("/a"), Path("/b")])] == ["r1", "outside", "r2"]
    assert [r.message for r in manager.list_items()] == ["r1", "outside", "r2"]


def test_list_is_read_only(seeded):
    before = _snapshot(seeded)
    result = _manager(seeded).run(ListItems(), [Path("/a")])
    assert result.saved is False
    assert _snapshot(seeded) == before


def test_positional_stability_under_filter(seeded):
    manager = _manager(seeded)
    scope = [Path("/a")]

    added = manager.add(["r3"], scope, origin_path=Path("/a/new"))
    assert [r.message for r in manager.list_items(scope)] == ["r1", "r2", "r3"]

    completed = manager.complete(3, scope)
    assert completed.message == added.message
    listing = manager.list_items(scope)
    assert [r.completed for r in listing] == [False, False, True]

    removed = manager.delete(1, scope)
    assert removed.message == "r1"
    listing = manager.list_items(scope)
    assert [r.message for r in listing] == ["r2", "r3"]
    assert listing[1].completed


def test_out_of_scope_records_are_untouched(seeded):
    def outside_item():
        payload = json.loads(seeded.path.read_text(encoding="utf-8"))
        return [item for item in payload if item["path"] == "/b/z"]

    before = outside_item()
    manager = _manager(seeded)
    scope = [Path("/a")]
    manager.add(["new", "one"], scope, origin_path=Path("/a"))
    manager.complete(1, scope)
    manager.delete(2, scope)
    assert outside_item() == before
    assert len(before) == 1


def test_save_restores_canonical_order(store):
    t1, t2, t3 = (T0 + timedelta(minutes=m) for m in (1, 2, 3))
    store.ensure_directory()
    store.path.write_text(
        json.dumps(
            [
                {"timestamp": t3.isoformat(), "path": "/a", "message": "third", "completed": None},
                {"timestamp": t1.isoformat(), "path": "/b", "message": "first", "completed": None},
                {"timestamp": t2.isoformat(), "path": "/a", "message": "second", "completed": None},
            ]
        ),
        encoding="utf-8",
    )
    # Positions follow on-disk order within a run.
    completed = _manager(store).complete(1)
    assert completed.message == "third"
    payload = json.loads(store.path.read_text(encoding="utf-8"))
    assert [item["message"] for item in payload] == ["first", "second", "third"]


def test_add_outside_filter_is_persisted_in_order(seeded):
    manager = _manager(seeded)
    manager.add(["elsewhere"], [Path("/a")], origin_path=Path("/c"))
    assert [r.message for r in manager.list_items()] == ["r1", "outside", "r2", "elsewhere"]
    assert manager.list_items([Path("/c")])[0].message == "elsewhere"


@pytest.mark.parametrize(
    "action",
    [
        lambda m: m.delete(0, [Path("/a")]),
        lambda m: m.delete(3, [Path("/a")]),
        lambda m: m.complete(1, [Path("/nowhere")]),
    ],
)
def test_boundary_errors_leave_store_unmodified(seeded, action):
    before = _snapshot(seeded)
    with pytest.raises(IndexOutOfRangeError):
        action(_manager(seeded))
    assert _snapshot(seeded) == before


def test_empty_message_is_rejected_without_write(store):
    with pytest.raises(EmptyMessageError):
        _manager(store).add(["   "], origin_path=Path("/a"))
    assert not store.path.exists()


def test_corrupt_store_is_fatal_and_non_destructive(store):
    store.ensure_directory()
    store.path.write_text("{definitely not a list", encoding="utf-8")
    manager = _manager(store)
    with pytest.raises(CorruptStoreError):
        manager.add(["hello"], origin_path=Path("/a"))
    with pytest.raises(CorruptStoreError):
        manager.delete(1)
    assert store.path.read_text(encoding="utf-8") == "{definitely not a list"


def test_add_uses_current_directory_by_default(store, tmp_path, monkeypatch):
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    record = _manager(store).add(["from", "cwd"])
    assert record.origin_path == workdir.resolve()
    assert record.message == "from cwd"


class RecordingStore:
    def __init__(self, records):
        self.records = list(records)
        self.saved = None
        self.locks = 0

    def load(self):
        return list(self.records)

    def save(self, records):
        self.saved = list(records)

    @contextmanager
    def lock(self):
        self.locks += 1
        yield


def test_only_mutations_lock_and_save():
    fake = RecordingStore([Record(T0, Path("/a"), "only")])
    manager = _manager(fake)
    manager.list_items()
    assert fake.locks == 0
    assert fake.saved is None
    manager.complete(1)
    assert fake.locks == 1
    assert fake.saved is not None and fake.saved[0].completed
