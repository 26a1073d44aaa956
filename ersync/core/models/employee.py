"""Employee record snapshot as returned by the read endpoint (Pydantic only)."""

from datetime import date
from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator

from .base import Money, PassthroughModel


# =============================================================================
# Nested references
# =============================================================================


class JobTitleRef(PassthroughModel):
    """Job title with its grade level."""

    title: str | None = Field(None, description="Job title name")
    level: str | None = Field(None, description="Job level / grade")


class DepartmentRef(PassthroughModel):
    """Department reference."""

    id: int | str | None = Field(None, description="Department id")
    name: str | None = Field(None, description="Department name")

    @model_validator(mode="before")
    @classmethod
    def _from_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"name": value}
        return value


class Allowance(PassthroughModel):
    """Salary allowance line."""

    name: str | None = Field(None, description="Allowance type name")
    amount: Money | None = Field(None, description="Allowance amount")

    @model_validator(mode="before")
    @classmethod
    def _flatten_type(cls, value: Any) -> Any:
        if isinstance(value, dict) and "name" not in value:
            allowance_type = value.get("allowanceType") or value.get("allowance_type")
            if isinstance(allowance_type, dict):
                return {**value, "name": allowance_type.get("name")}
        return value


class Employment(PassthroughModel):
    """Employment contract with salary."""

    id: int | str | None = None
    is_active: bool = True
    start_date: date | None = None
    employment_type: str | None = None
    gross_salary: Money | None = None
    basic_salary: Money | None = None
    allowances: list[Allowance] = Field(default_factory=list)
    job_title: JobTitleRef | None = Field(
        None, validation_alias=AliasChoices("job_title", "jobTitle")
    )
    department: DepartmentRef | None = None


# =============================================================================
# Collection entries
# =============================================================================


class Address(PassthroughModel):
    id: int | str | None = None
    region: str | None = None
    city: str | None = None
    sub_city: str | None = None
    woreda: str | None = None
    house_number: str | None = None


class Phone(PassthroughModel):
    id: int | str | None = None
    phone_number: str | None = None
    phone_type: str | None = None
    is_primary: bool | None = None


class StoredDocument(PassthroughModel):
    id: int | str | None = None
    document_type: str | None = Field(None, validation_alias=AliasChoices("document_type", "type"))
    document_url: str | None = Field(None, validation_alias=AliasChoices("document_url", "url"))
    file_name: str | None = Field(None, validation_alias=AliasChoices("file_name", "name"))


# =============================================================================
# Employee
# =============================================================================


class Employee(PassthroughModel):
    """Full snapshot of one employee record.

    Unknown backend keys are kept so that a cached snapshot reproduces what
    the server sent.
    """

    id: str = Field(..., description="Employee identifier")
    full_name: str | None = None
    gender: str | None = None
    date_of_birth: date | None = None
    tin_number: str | None = None
    pension_number: str | None = None
    place_of_work: str | None = None
    profile_picture: str | None = Field(
        None, validation_alias=AliasChoices("profile_picture", "profilePicture")
    )
    onboarding_status: str | None = None
    email: str | None = None

    addresses: list[Address] = Field(default_factory=list)
    phones: list[Phone] = Field(default_factory=list)
    educations: list[dict[str, Any]] = Field(default_factory=list)
    employment_histories: list[dict[str, Any]] = Field(
        default_factory=list,
        validation_alias=AliasChoices("employment_histories", "employmentHistories"),
    )
    licenses_and_certifications: list[dict[str, Any]] = Field(
        default_factory=list,
        validation_alias=AliasChoices("licenses_and_certifications", "licensesAndCertifications"),
    )
    documents: list[StoredDocument] = Field(default_factory=list)
    employments: list[Employment] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    def active_employment(self) -> Employment | None:
        """Return the active employment, falling back to the first one."""
        for employment in self.employments:
            if employment.is_active:
                return employment
        return self.employments[0] if self.employments else None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "Employee":
        """Parse the read endpoint envelope ``{"data": {"employee": {...}}}`` or a bare object."""
        body = payload
        if isinstance(body.get("data"), dict):
            body = body["data"]
        if isinstance(body.get("employee"), dict):
            body = body["employee"]
        return cls.model_validate(body)
