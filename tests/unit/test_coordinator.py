"""Section fan-out/fan-in, partial failure reporting and optimistic cache merge."""

import asyncio
from decimal import Decimal

import pytest

from ersync.core.errors import SectionPersistFailure
from ersync.core.models.employee import Employee
from ersync.core.orchestrator.coordinator import SectionUpdateCoordinator
from ersync.core.storage.detail_cache import DetailCache
from tests.fakes import FakeBackend, employee_payload


def _coordinator(backend: FakeBackend, cache: DetailCache | None = None) -> SectionUpdateCoordinator:
    return SectionUpdateCoordinator(backend.client(), cache if cache is not None else DetailCache())


def _cached() -> DetailCache:
    cache = DetailCache()
    cache.put("42", Employee.from_api(employee_payload()))
    return cache


def test_hinted_section_without_its_fields_dispatches_nothing(backend):
    coordinator = _coordinator(backend)
    edited = {"certifications": [{"name": "AWS SAA", "issuing_organization": "Amazon"}]}

    report = asyncio.run(coordinator.update("42", edited, section_hint="education"))

    assert backend.requests == []
    assert report.outcomes == {}
    assert report.skipped == ["education"]


def test_all_sections_dispatched_when_second_fails(backend):
    backend.failing_sections["financial"] = 422
    coordinator = _coordinator(backend)
    edited = {"full_name": "Abebe K.", "bank_name": "CBE", "job_level": "III"}

    with pytest.raises(SectionPersistFailure) as excinfo:
        asyncio.run(coordinator.update("42", edited))

    assert sorted(backend.patched_sections()) == ["employment", "financial", "personal"]
    failure = excinfo.value
    assert failure.sections == ["financial"]
    assert failure.failures == {"financial": "financial rejected"}
    assert failure.committed == ["personal", "employment"]
    assert failure.to_report()["error"]["code"] == "SECTION_PERSIST_FAILED"


def test_failed_update_leaves_cache_untouched(backend):
    backend.failing_sections["contact"] = 500
    cache = _cached()

    with pytest.raises(SectionPersistFailure):
        asyncio.run(_coordinator(backend, cache).update("42", {"full_name": "New", "phones": []}))

    assert cache.get("42").data.full_name == "Abebe Kebede"


def test_success_merges_locally_derivable_fields(backend):
    cache = _cached()
    edited = {
        "full_name": "Abebe K.",
        "address": [{"region": "Oromia", "city": "Adama"}],
        "job_title": "Principal Engineer",
        "department": "Data",
    }

    report = asyncio.run(_coordinator(backend, cache).update("42", edited))

    assert report.committed == ["personal", "employment", "contact"]
    assert report.merged_fields == ["addresses", "full_name"]
    cached = cache.get("42").data
    assert cached.full_name == "Abebe K."
    assert [a.city for a in cached.addresses] == ["Adama"]
    # Names that need server-side resolution wait for the next fetch
    assert cached.active_employment().job_title.title == "Engineer"
    assert cached.active_employment().department.name == "Platform"


def test_salary_update_patches_active_employment(backend):
    cache = _cached()
    edited = {"gross_salary": 35000, "allowances": [{"name": "Housing", "amount": 2000}]}

    asyncio.run(_coordinator(backend, cache).update("42", edited, section_hint="employment"))

    assert backend.section_body("employment") == {
        "gross_salary": 35000.0,
        "allowances": [{"name": "Housing", "amount": 2000.0}],
    }
    employment = cache.get("42").data.active_employment()
    assert employment.gross_salary == Decimal("35000")
    assert employment.basic_salary == Decimal("25000.00")
    assert [(a.name, a.amount) for a in employment.allowances] == [("Housing", Decimal("2000"))]


def test_success_without_cache_entry_keeps_cache_empty(backend):
    cache = DetailCache()

    report = asyncio.run(_coordinator(backend, cache).update("42", {"full_name": "Abebe K."}))

    assert report.committed == ["personal"]
    assert report.merged_fields == []
    assert cache.get("42") is None


def test_requests_carry_bearer_token(backend):
    asyncio.run(_coordinator(backend).update("42", {"bank_name": "CBE"}))

    (request,) = backend.section_calls()
    assert request.url.path == "/api/v1/employees/42/financial"
    assert request.headers["Authorization"] == "Bearer secret-token"
