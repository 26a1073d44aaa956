"""Career timeline ordering, JOINED synthesis and display placeholders."""

from datetime import date
from decimal import Decimal

from ersync.core.models.career_event import CareerEvent, TimelineBase
from ersync.core.models.employee import Employee, JobTitleRef
from ersync.core.models.enums import CareerEventType, EventOrigin
from ersync.core.timeline.synthesizer import synthesize_timeline
from tests.fakes import employee_payload

BASE = TimelineBase(
    title="Engineer",
    level="II",
    department="Platform",
    start_date=date(2022, 1, 10),
    gross_salary=Decimal("30000"),
)


def _event(event_type: str, effective: date | None, event_id: int, **kwargs) -> CareerEvent:
    return CareerEvent(id=event_id, event_type=event_type, effective_date=effective, **kwargs)


def test_empty_history_synthesizes_joined_event():
    timeline = synthesize_timeline([], BASE)

    assert len(timeline) == 1
    joined = timeline[0]
    assert joined.event_type == CareerEventType.JOINED
    assert joined.effective_date == date(2022, 1, 10)
    assert joined.new_title == JobTitleRef(title="Engineer", level="II")
    assert joined.new_department == "Platform"
    assert joined.new_salary == Decimal("30000")
    assert joined.origin == EventOrigin.SYNTHESIZED
    assert joined.is_synthesized
    assert joined.id is None
    assert joined.is_latest


def test_existing_joined_event_is_not_duplicated():
    events = [
        _event("PROMOTION", date(2023, 6, 1), 2),
        _event("JOINED", date(2022, 1, 10), 1),
    ]

    timeline = synthesize_timeline(events, BASE)

    assert [e.event_type for e in timeline] == ["PROMOTION", "JOINED"]
    assert timeline[0].is_latest
    assert not timeline[1].is_latest
    assert not any(e.is_synthesized for e in timeline)


def test_hired_event_counts_as_joined():
    timeline = synthesize_timeline([_event("HIRED", date(2021, 3, 1), 1)], BASE)

    assert len(timeline) == 1
    assert timeline[0].event_type == "HIRED"


def test_synthesis_is_idempotent_on_its_own_output():
    first = synthesize_timeline([_event("TRANSFER", date(2023, 2, 1), 5)], BASE)
    second = synthesize_timeline(first, BASE)

    assert len(second) == len(first) == 2
    assert sum(1 for e in second if e.is_synthesized) == 1


def test_synthesized_event_sorts_last_even_when_not_oldest():
    events = [
        _event("SALARY_ADJUSTMENT", date(2020, 1, 1), 1),
        _event("ROLE_CHANGE", None, 2),
    ]

    timeline = synthesize_timeline(events, BASE)

    assert [e.id for e in timeline] == [1, 2, None]
    assert timeline[-1].is_synthesized


def test_missing_start_date_skips_synthesis():
    timeline = synthesize_timeline([], TimelineBase(title="Engineer"))

    assert timeline == []


def test_equal_dates_keep_input_order():
    same_day = date(2023, 6, 1)
    events = [
        _event("PROMOTION", same_day, 10),
        _event("TRANSFER", same_day, 11),
        _event("SALARY_ADJUSTMENT", date(2024, 1, 1), 12),
        _event("JOINED", date(2022, 1, 10), 13),
    ]

    timeline = synthesize_timeline(events, BASE)

    assert [e.id for e in timeline] == [12, 10, 11, 13]


def test_placeholders_for_missing_previous_state():
    event = _event(
        "PROMOTION",
        date(2023, 6, 1),
        1,
        new_title=JobTitleRef(title="Senior Engineer", level="III"),
        new_department="Platform",
    )

    rendered = synthesize_timeline([event])[0]

    assert rendered.previous_title_display == "Initial"
    assert rendered.previous_level_display == "-"
    assert rendered.previous_department_display == "Unassigned"
    assert rendered.new_title_display == "Senior Engineer"
    assert rendered.label == "PROMOTION"
    assert not rendered.show_salary


def test_synthesized_defaults_when_base_is_sparse():
    joined = synthesize_timeline([], TimelineBase(start_date=date(2019, 9, 1)))[0]

    assert joined.new_title_display == "Unknown"
    assert joined.new_level_display == "Entry"
    assert joined.new_department == "General"
    assert joined.justification == "Initial employment record"


def test_department_changed_flag():
    moved = _event("TRANSFER", date(2023, 1, 1), 1, previous_department="Platform", new_department="Data")
    stayed = _event("PROMOTION", date(2024, 1, 1), 2, previous_department="Data", new_department="Data")

    timeline = synthesize_timeline([moved, stayed])

    flags = {e.id: e.department_changed for e in timeline}
    assert flags == {1: True, 2: False}


def test_timeline_base_from_active_employment():
    employee = Employee.from_api(employee_payload())

    base = TimelineBase.from_employee(employee)

    assert base == BASE.model_copy(update={"gross_salary": Decimal("30000.00")})


def test_from_api_parses_backend_shapes():
    raw = {
        "id": 77,
        "employee_id": 42,
        "event_type": "Promotion",
        "effective_date": "2023-06-01T00:00:00.000Z",
        "event_date": "not-a-date",
        "previousJobTitle": {"title": "Engineer", "level": "II"},
        "newJobTitle": {"title": "Senior Engineer", "level": "III"},
        "previousEmployment": {"department": {"name": "Platform"}},
        "newDepartment": {"name": "Data"},
        "previous_salary": "30000",
        "new_salary": 36000,
    }

    event = CareerEvent.from_api(raw)

    assert event.event_type == CareerEventType.PROMOTION
    assert event.effective_date == date(2023, 6, 1)
    assert event.event_date is None
    assert event.previous_department == "Platform"
    assert event.new_department == "Data"
    assert event.new_salary == Decimal("36000")
    assert event.employee_id == "42"
    assert CareerEvent.from_api({"event_type": "RETIREMENT"}) is None
