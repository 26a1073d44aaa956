"""Detail cache: whole-snapshot replacement and merge-into-existing semantics."""

from datetime import datetime, timezone
from decimal import Decimal

from ersync.core.models.employee import Employee
from ersync.core.storage.detail_cache import DetailCache
from tests.fakes import employee_payload


def _employee() -> Employee:
    return Employee.from_api(employee_payload())


def test_put_then_get_returns_equal_snapshot():
    cache = DetailCache()
    employee = _employee()

    cache.put("42", employee)
    entry = cache.get("42")

    assert entry is not None
    assert entry.data == employee
    assert entry.data.model_dump() == employee.model_dump()
    # Unknown backend keys survive the round trip
    assert entry.data.model_dump()["nationality"] == "Ethiopian"


def test_put_stores_a_copy():
    cache = DetailCache()
    employee = _employee()
    cache.put("42", employee)

    employee.full_name = "Changed Elsewhere"

    assert cache.get("42").data.full_name == "Abebe Kebede"


def test_changes_to_a_read_entry_stay_out_of_the_cache():
    cache = DetailCache()
    cache.put("42", _employee())

    entry = cache.get("42")
    entry.data.full_name = "Edited In Place"
    entry.data.phones.clear()

    stored = cache.get("42").data
    assert stored.full_name == "Abebe Kebede"
    assert len(stored.phones) == 1


def test_merge_on_empty_cache_is_noop():
    cache = DetailCache()

    assert cache.merge("42", {"full_name": "New Name"}) is None
    assert cache.get("42") is None
    assert len(cache) == 0


def test_merge_updates_fields_and_keeps_fetched_at():
    cache = DetailCache()
    fetched_at = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
    cache.put("42", _employee(), fetched_at=fetched_at)

    entry = cache.merge("42", {"full_name": "Abebe K.", "phones": [{"phone_number": "+251922"}]})

    assert entry.fetched_at == fetched_at
    assert entry.data.full_name == "Abebe K."
    assert [p.phone_number for p in entry.data.phones] == ["+251922"]
    # Untouched fields keep their values
    assert entry.data.active_employment().gross_salary == Decimal("30000.00")
    assert cache.get("42") == entry


def test_put_after_merge_replaces_whole_entry():
    cache = DetailCache()
    cache.put("42", _employee())
    cache.merge("42", {"full_name": "Optimistic"})

    cache.put("42", _employee())

    assert cache.get("42").data.full_name == "Abebe Kebede"


def test_evict_and_clear():
    cache = DetailCache()
    cache.put("42", _employee())
    cache.put("43", _employee())

    cache.evict("42")
    assert "42" not in cache
    assert "43" in cache

    cache.clear()
    assert len(cache) == 0
    assert cache.snapshot() == {}
