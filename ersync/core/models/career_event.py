"""Career event models: persisted lifecycle events, timeline entries and career actions."""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import Field, computed_field

from .base import ERSBaseModel, Money, parse_date
from .employee import Employee, JobTitleRef
from .enums import CareerEventType, EventOrigin

INITIAL_TITLE_PLACEHOLDER = "Initial"
LEVEL_PLACEHOLDER = "-"
DEPARTMENT_PLACEHOLDER = "Unassigned"


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _amount(value: Any) -> Decimal | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _title(value: Any) -> JobTitleRef | None:
    if isinstance(value, JobTitleRef):
        return value
    if isinstance(value, dict):
        title, level = _text(value.get("title")), _text(value.get("level"))
        if title is None and level is None:
            return None
        return JobTitleRef(title=title, level=level)
    if isinstance(value, str):
        return JobTitleRef(title=_text(value))
    return None


def _department_name(payload: dict[str, Any], prefix: str) -> str | None:
    """Resolve a department name from the several shapes the backend emits."""
    direct = payload.get(f"{prefix}_department")
    if isinstance(direct, str):
        return _text(direct)
    if isinstance(direct, dict):
        return _text(direct.get("name"))
    nested = payload.get(f"{prefix}Department")
    if isinstance(nested, dict):
        return _text(nested.get("name"))
    employment = payload.get(f"{prefix}Employment")
    if isinstance(employment, dict):
        department = employment.get("department")
        if isinstance(department, dict):
            return _text(department.get("name"))
        return _text(department)
    return None


def normalize_event_type(value: Any) -> CareerEventType | None:
    """Map backend spellings ("Promotion", "salary adjustment") onto the enum."""
    if isinstance(value, CareerEventType):
        return value
    if not isinstance(value, str):
        return None
    key = value.strip().upper().replace(" ", "_").replace("-", "_")
    try:
        return CareerEventType(key)
    except ValueError:
        return None


class CareerEvent(ERSBaseModel):
    """A recorded (or locally synthesized) career lifecycle event."""

    id: int | str | None = Field(None, description="Backend id; None when synthesized")
    employee_id: str | None = None
    event_type: CareerEventType
    event_date: date | None = None
    effective_date: date | None = None

    previous_title: JobTitleRef | None = None
    new_title: JobTitleRef | None = None
    previous_department: str | None = None
    new_department: str | None = None
    previous_salary: Money | None = None
    new_salary: Money | None = None

    justification: str | None = None
    notes: str | None = None
    approved_by: str | None = None

    origin: EventOrigin = EventOrigin.PERSISTED

    @property
    def is_joining(self) -> bool:
        return CareerEventType(self.event_type).is_joining

    @property
    def is_synthesized(self) -> bool:
        return self.origin == EventOrigin.SYNTHESIZED

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "CareerEvent | None":
        """Build an event from the backend shape.

        Returns None for unrecognized event types. Malformed dates and
        amounts become None rather than failing the whole history.
        """
        event_type = normalize_event_type(payload.get("event_type") or payload.get("type"))
        if event_type is None:
            return None

        employee_id = payload.get("employee_id")
        return cls(
            id=payload.get("id"),
            employee_id=str(employee_id) if employee_id is not None else None,
            event_type=event_type,
            event_date=parse_date(payload.get("event_date")),
            effective_date=parse_date(payload.get("effective_date")),
            previous_title=_title(payload.get("previousJobTitle") or payload.get("previous_title")),
            new_title=_title(payload.get("newJobTitle") or payload.get("new_title")),
            previous_department=_department_name(payload, "previous"),
            new_department=_department_name(payload, "new"),
            previous_salary=_amount(payload.get("previous_salary")),
            new_salary=_amount(payload.get("new_salary")),
            justification=_text(payload.get("justification")),
            notes=_text(payload.get("notes")),
            approved_by=_text(payload.get("approved_by")),
        )


class TimelineEvent(CareerEvent):
    """Career event annotated for display on the timeline."""

    is_latest: bool = False
    department_changed: bool = False

    @computed_field
    @property
    def label(self) -> str:
        return str(self.event_type).replace("_", " ")

    @computed_field
    @property
    def previous_title_display(self) -> str:
        return (self.previous_title and self.previous_title.title) or INITIAL_TITLE_PLACEHOLDER

    @computed_field
    @property
    def previous_level_display(self) -> str:
        return (self.previous_title and self.previous_title.level) or LEVEL_PLACEHOLDER

    @computed_field
    @property
    def new_title_display(self) -> str:
        return (self.new_title and self.new_title.title) or LEVEL_PLACEHOLDER

    @computed_field
    @property
    def new_level_display(self) -> str:
        return (self.new_title and self.new_title.level) or LEVEL_PLACEHOLDER

    @computed_field
    @property
    def previous_department_display(self) -> str:
        return self.previous_department or DEPARTMENT_PLACEHOLDER

    @computed_field
    @property
    def new_department_display(self) -> str:
        return self.new_department or DEPARTMENT_PLACEHOLDER

    @computed_field
    @property
    def show_salary(self) -> bool:
        return self.new_salary is not None


class TimelineBase(ERSBaseModel):
    """Current-state snapshot used to synthesize the initial JOINED event."""

    title: str | None = None
    level: str | None = None
    department: str | None = None
    start_date: date | None = None
    gross_salary: Money | None = None

    @classmethod
    def from_employee(cls, employee: Employee) -> "TimelineBase":
        employment = employee.active_employment()
        if employment is None:
            return cls()
        return cls(
            title=employment.job_title.title if employment.job_title else None,
            level=employment.job_title.level if employment.job_title else None,
            department=employment.department.name if employment.department else None,
            start_date=employment.start_date,
            gross_salary=employment.gross_salary,
        )


# =============================================================================
# Career actions
# =============================================================================


class PromotionRequest(ERSBaseModel):
    employee_id: str
    new_job_title_id: int
    new_salary: Money = Field(..., ge=0)
    new_department_id: int | None = None
    effective_date: date
    justification: str = Field(..., min_length=1)
    approved_by: str | None = None
    notes: str | None = None


class DemotionRequest(ERSBaseModel):
    employee_id: str
    new_job_title_id: int
    new_salary: Money = Field(..., ge=0)
    effective_date: date
    justification: str = Field(..., min_length=1)
    notes: str | None = None


class TransferRequest(ERSBaseModel):
    employee_id: str
    new_department_id: int
    new_job_title_id: int | None = None
    effective_date: date
    justification: str = Field(..., min_length=1)
    notes: str | None = None
