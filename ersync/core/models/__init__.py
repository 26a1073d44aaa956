"""ersync data models for employee records, sections, uploads and career events."""

from .base import ERSBaseModel, Money, OperationResult, PassthroughModel, parse_date, utc_now
from .career_event import (
    CareerEvent,
    DemotionRequest,
    PromotionRequest,
    TimelineBase,
    TimelineEvent,
    TransferRequest,
    normalize_event_type,
)
from .employee import (
    Address,
    Allowance,
    DepartmentRef,
    Employee,
    Employment,
    JobTitleRef,
    Phone,
    StoredDocument,
)
from .enums import CareerEventType, DocumentType, EventOrigin, SectionName
from .sections import (
    CertificationsPayload,
    ContactPayload,
    DocumentsPayload,
    EducationPayload,
    EmploymentPayload,
    ExperiencePayload,
    FinancialPayload,
    PersonalPayload,
    SectionPayload,
    SectionRequest,
)
from .upload import FileAttachment, UploadTicket

__all__ = [
    # Base
    "ERSBaseModel",
    "Money",
    "PassthroughModel",
    "OperationResult",
    "parse_date",
    "utc_now",
    # Enums
    "SectionName",
    "CareerEventType",
    "EventOrigin",
    "DocumentType",
    # Employee
    "Employee",
    "Employment",
    "JobTitleRef",
    "DepartmentRef",
    "Allowance",
    "Address",
    "Phone",
    "StoredDocument",
    # Career
    "CareerEvent",
    "TimelineEvent",
    "TimelineBase",
    "PromotionRequest",
    "DemotionRequest",
    "TransferRequest",
    "normalize_event_type",
    # Sections
    "SectionPayload",
    "SectionRequest",
    "PersonalPayload",
    "FinancialPayload",
    "EmploymentPayload",
    "ContactPayload",
    "EducationPayload",
    "ExperiencePayload",
    "CertificationsPayload",
    "DocumentsPayload",
    # Uploads
    "FileAttachment",
    "UploadTicket",
]
