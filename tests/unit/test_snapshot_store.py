"""Snapshot persistence of cache entries."""

from datetime import datetime, timezone

from ersync.core.models.employee import Employee
from ersync.core.storage.detail_cache import DetailCache
from ersync.core.storage.snapshot_store import SnapshotStore
from tests.fakes import employee_payload


def test_persist_then_warm_roundtrip(tmp_path):
    store = SnapshotStore(tmp_path / "snapshots")
    cache = DetailCache()
    fetched_at = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
    employee = Employee.from_api(employee_payload())
    cache.put("42", employee, fetched_at=fetched_at)

    assert store.persist(cache) == 1
    assert store.list_record_ids() == ["42"]

    fresh = DetailCache()
    entry = store.warm(fresh, "42")

    assert entry is not None
    assert fresh.get("42").fetched_at == fetched_at
    assert fresh.get("42").data == employee


def test_missing_or_corrupt_snapshot_is_a_miss(tmp_path):
    store = SnapshotStore(tmp_path)
    (tmp_path / "7.json").write_text('{"data": {"full_name": "no id"}}', encoding="utf-8")
    cache = DetailCache()

    assert store.warm(cache, "41") is None
    assert store.warm(cache, "7") is None
    assert len(cache) == 0


def test_record_ids_are_sanitized_for_file_names(tmp_path):
    store = SnapshotStore(tmp_path)
    cache = DetailCache()
    cache.put("../etc", Employee(id="1"))

    store.persist(cache)

    assert [p.name for p in tmp_path.iterdir()] == ["___etc.json"]
    store.delete_entry("../etc")
    assert list(tmp_path.iterdir()) == []
