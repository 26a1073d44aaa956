"""Section payload models: one validated variant per independently persisted section.

Field names are the edit-form names; serialization aliases carry each
section endpoint's own naming. Payloads are dumped with ``exclude_unset``
so an explicit None (clear the field) is sent while an absent key (leave
the field alone) is not.
"""

from datetime import date
from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, Field, model_validator

from .base import ERSBaseModel, Money
from .enums import DocumentType, SectionName


def _name_of(value: Any) -> Any:
    """Collapse ``{"name": ...}`` lookups (institution, field of study) to the name."""
    if isinstance(value, dict):
        return value.get("name")
    return value


# =============================================================================
# Collection entries
# =============================================================================


class AllowanceInput(ERSBaseModel):
    name: str = Field(..., min_length=1)
    amount: Money = Field(..., ge=0)


class AddressInput(ERSBaseModel):
    id: int | str | None = None
    address_type: str | None = None
    region: str | None = None
    city: str | None = None
    sub_city: str | None = None
    woreda: str | None = None
    house_number: str | None = None


class PhoneInput(ERSBaseModel):
    id: int | str | None = None
    phone_number: str = Field(..., min_length=3)
    phone_type: str | None = None
    is_primary: bool | None = None


class EducationInput(ERSBaseModel):
    id: int | str | None = None
    institution: str | None = None
    institution_category: str | None = Field(
        None, validation_alias=AliasChoices("institution_category", "institutionCategory")
    )
    field_of_study: str | None = Field(
        None, validation_alias=AliasChoices("field_of_study", "fieldOfStudy")
    )
    level: str | None = Field(None, validation_alias=AliasChoices("level", "educationLevel"))
    start_date: date | None = None
    end_date: date | None = None
    has_cost_sharing: bool | None = None
    cost_sharing_document_number: str | None = Field(
        None, validation_alias=AliasChoices("cost_sharing_document_number", "costSharingDocumentNumber")
    )
    cost_sharing_issuing_institution: str | None = Field(
        None,
        validation_alias=AliasChoices("cost_sharing_issuing_institution", "costSharingIssuingInstitution"),
    )
    cost_sharing_issue_date: date | None = Field(
        None, validation_alias=AliasChoices("cost_sharing_issue_date", "costSharingIssueDate")
    )
    cost_sharing_total_cost: Money | None = Field(
        None, ge=0, validation_alias=AliasChoices("cost_sharing_total_cost", "costSharingTotalCost")
    )
    cost_sharing_remarks: str | None = Field(
        None, validation_alias=AliasChoices("cost_sharing_remarks", "costSharingRemarks")
    )
    currency: str | None = None
    # A freshly uploaded file replaces "document" in place, so it wins over a stale URL
    document_url: str | None = Field(
        None, validation_alias=AliasChoices("document", "documentUrl", "document_url")
    )
    cost_sharing_document_url: str | None = Field(
        None,
        validation_alias=AliasChoices(
            "cost_sharing_document",
            "costSharingDocument",
            "costSharingDocumentUrl",
            "cost_sharing_document_url",
        ),
    )

    @model_validator(mode="before")
    @classmethod
    def _collapse_lookups(cls, value: Any) -> Any:
        if isinstance(value, dict):
            value = dict(value)
            for key in ("institution", "field_of_study", "fieldOfStudy", "level", "educationLevel"):
                if key in value:
                    value[key] = _name_of(value[key])
        return value


class WorkExperienceInput(ERSBaseModel):
    id: int | str | None = None
    company_name: str | None = Field(None, validation_alias=AliasChoices("company_name", "companyName"))
    job_title: str | None = Field(None, validation_alias=AliasChoices("job_title", "jobTitle"))
    start_date: date | None = None
    end_date: date | None = None
    is_current: bool | None = None
    responsibilities: str | None = None
    document_url: str | None = Field(
        None, validation_alias=AliasChoices("document", "documentUrl", "document_url")
    )


class CertificationInput(ERSBaseModel):
    id: int | str | None = None
    name: str | None = None
    issuing_organization: str | None = Field(
        None, validation_alias=AliasChoices("issuing_organization", "issuingOrganization")
    )
    issue_date: date | None = None
    expiry_date: date | None = None
    credential_id: str | None = None
    document_url: str | None = Field(
        None,
        validation_alias=AliasChoices(
            "certificate_document", "certificateDocument", "documentUrl", "document_url"
        ),
    )
    credential_url: str | None = Field(
        None, validation_alias=AliasChoices("credentialUrl", "credential_url")
    )


class DocumentInput(ERSBaseModel):
    """Document collection entry; persisted only as a path reference."""

    id: int | str | None = None
    document_type: str = Field(
        DocumentType.OTHER.value, validation_alias=AliasChoices("document_type", "type")
    )
    document_url: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("file", "document_url", "documentUrl", "url", "path"),
    )
    file_name: str | None = Field(None, validation_alias=AliasChoices("file_name", "name"))


# =============================================================================
# Section payloads
# =============================================================================


class PersonalPayload(ERSBaseModel):
    section: Literal["personal"] = "personal"
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


class FinancialPayload(ERSBaseModel):
    section: Literal["financial"] = "financial"
    gross_salary: Money | None = Field(None, ge=0)
    basic_salary: Money | None = Field(None, ge=0)
    allowances: list[AllowanceInput] | None = None
    bank_account_number: str | None = None
    bank_name: str | None = None
    tin_number: str | None = None


class EmploymentPayload(ERSBaseModel):
    section: Literal["employment"] = "employment"
    job_title: str | None = None
    job_title_id: int | None = None
    job_level: str | None = None
    department: str | None = None
    department_id: int | None = None
    employment_type: str | None = None
    start_date: date | None = None
    gross_salary: Money | None = Field(None, ge=0)
    basic_salary: Money | None = Field(None, ge=0)
    allowances: list[AllowanceInput] | None = None


class ContactPayload(ERSBaseModel):
    section: Literal["contact"] = "contact"
    address: list[AddressInput] | None = Field(
        None, validation_alias=AliasChoices("address", "addresses"), serialization_alias="addresses"
    )
    phones: list[PhoneInput] | None = None


class EducationPayload(ERSBaseModel):
    section: Literal["education"] = "education"
    education: list[EducationInput] | None = None


class ExperiencePayload(ERSBaseModel):
    section: Literal["experience"] = "experience"
    work_experience: list[WorkExperienceInput] | None = Field(
        None,
        validation_alias=AliasChoices("work_experience", "workExperience"),
        serialization_alias="workExperience",
    )


class CertificationsPayload(ERSBaseModel):
    section: Literal["certifications"] = "certifications"
    certifications: list[CertificationInput] | None = None


class DocumentsPayload(ERSBaseModel):
    section: Literal["documents"] = "documents"
    documents: list[DocumentInput] | None = None


SectionPayload = Annotated[
    Union[
        PersonalPayload,
        FinancialPayload,
        EmploymentPayload,
        ContactPayload,
        EducationPayload,
        ExperiencePayload,
        CertificationsPayload,
        DocumentsPayload,
    ],
    Field(discriminator="section"),
]


class SectionRequest(ERSBaseModel):
    """One prepared section write: the target record and its validated payload."""

    record_id: str
    payload: SectionPayload

    @property
    def section(self) -> SectionName:
        return SectionName(self.payload.section)

    def body(self) -> dict[str, Any]:
        """Request body in the section endpoint's naming, unset fields omitted."""
        return self.payload.model_dump(
            mode="json", by_alias=True, exclude_unset=True, exclude={"section"}
        )
