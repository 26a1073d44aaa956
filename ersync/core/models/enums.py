"""Enumeration types for ersync models."""

from enum import Enum


class SectionName(str, Enum):
    """Independently persisted partitions of an employee record."""

    PERSONAL = "personal"
    FINANCIAL = "financial"
    EMPLOYMENT = "employment"
    CONTACT = "contact"
    EDUCATION = "education"
    EXPERIENCE = "experience"
    CERTIFICATIONS = "certifications"
    DOCUMENTS = "documents"


class CareerEventType(str, Enum):
    """Lifecycle event kinds shown on the career timeline."""

    JOINED = "JOINED"
    HIRED = "HIRED"
    PROMOTION = "PROMOTION"
    DEMOTION = "DEMOTION"
    TRANSFER = "TRANSFER"
    SALARY_ADJUSTMENT = "SALARY_ADJUSTMENT"
    ROLE_CHANGE = "ROLE_CHANGE"

    @property
    def is_joining(self) -> bool:
        return self in (CareerEventType.JOINED, CareerEventType.HIRED)


class EventOrigin(str, Enum):
    """Whether a career event came from the backend or was derived locally."""

    PERSISTED = "persisted"
    SYNTHESIZED = "synthesized"


class DocumentType(str, Enum):
    """Employee document categories."""

    PHOTO = "PHOTO"
    CV = "CV"
    ID_CARD = "ID_CARD"
    CONTRACT = "CONTRACT"
    OTHER = "OTHER"
