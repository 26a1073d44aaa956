"""Static mapping from edit-form fields to the sections that persist them.

A few fields are accepted by more than one section. When every section
that accepts such a field is targeted, the first section in
``SHARED_FIELD_PRECEDENCE`` receives it and the others never see it.
"""

from typing import Any, Iterable

from ..errors import UnknownSectionError
from ..models.enums import SectionName
from ...observability.logger import get_logger

logger = get_logger(__name__)

# Section order is also the dispatch order
SECTION_ORDER: tuple[SectionName, ...] = (
    SectionName.PERSONAL,
    SectionName.FINANCIAL,
    SectionName.EMPLOYMENT,
    SectionName.CONTACT,
    SectionName.EDUCATION,
    SectionName.EXPERIENCE,
    SectionName.CERTIFICATIONS,
    SectionName.DOCUMENTS,
)

FIELD_SECTIONS: dict[str, tuple[SectionName, ...]] = {
    # Personal
    "full_name": (SectionName.PERSONAL,),
    "gender": (SectionName.PERSONAL,),
    "date_of_birth": (SectionName.PERSONAL,),
    "pension_number": (SectionName.PERSONAL,),
    "place_of_work": (SectionName.PERSONAL,),
    "profile_picture": (SectionName.PERSONAL,),
    "profilePicture": (SectionName.PERSONAL,),
    "onboarding_status": (SectionName.PERSONAL,),
    # Financial
    "bank_account_number": (SectionName.FINANCIAL,),
    "bank_name": (SectionName.FINANCIAL,),
    # Employment
    "job_title": (SectionName.EMPLOYMENT,),
    "job_title_id": (SectionName.EMPLOYMENT,),
    "job_level": (SectionName.EMPLOYMENT,),
    "department": (SectionName.EMPLOYMENT,),
    "department_id": (SectionName.EMPLOYMENT,),
    "employment_type": (SectionName.EMPLOYMENT,),
    "start_date": (SectionName.EMPLOYMENT,),
    # Contact
    "address": (SectionName.CONTACT,),
    "addresses": (SectionName.CONTACT,),
    "phones": (SectionName.CONTACT,),
    # Collections
    "education": (SectionName.EDUCATION,),
    "work_experience": (SectionName.EXPERIENCE,),
    "workExperience": (SectionName.EXPERIENCE,),
    "certifications": (SectionName.CERTIFICATIONS,),
    "documents": (SectionName.DOCUMENTS,),
}

# Shared fields, highest precedence first
SHARED_FIELD_PRECEDENCE: dict[str, tuple[SectionName, ...]] = {
    "gross_salary": (SectionName.FINANCIAL, SectionName.EMPLOYMENT),
    "basic_salary": (SectionName.FINANCIAL, SectionName.EMPLOYMENT),
    "allowances": (SectionName.FINANCIAL, SectionName.EMPLOYMENT),
    "tin_number": (SectionName.PERSONAL, SectionName.FINANCIAL),
}

FIELD_SECTIONS.update(SHARED_FIELD_PRECEDENCE)


def resolve_sections(section_hint: str | SectionName | None = None) -> tuple[SectionName, ...]:
    """Return the sections a submit targets.

    Raises:
        UnknownSectionError: If the hint names no section
    """
    if section_hint is None or section_hint == "":
        return SECTION_ORDER
    try:
        return (SectionName(section_hint),)
    except ValueError as exc:
        raise UnknownSectionError(str(section_hint)) from exc


def owner_of(field: str, targeted: Iterable[SectionName]) -> SectionName | None:
    """Section that receives ``field`` given the targeted sections, if any."""
    targeted = set(targeted)
    for section in FIELD_SECTIONS.get(field, ()):
        if section in targeted:
            return section
    return None


def partition(
    edited: dict[str, Any], targeted: Iterable[SectionName]
) -> dict[SectionName, dict[str, Any]]:
    """Split edited fields into per-section subsets.

    Keys absent from ``edited`` never appear in any subset; explicit None
    values are kept so that they clear the field server-side.
    """
    targeted = tuple(targeted)
    parts: dict[SectionName, dict[str, Any]] = {}
    for field, value in edited.items():
        if field not in FIELD_SECTIONS:
            logger.warning("field_unmapped", field=field)
            continue
        section = owner_of(field, targeted)
        if section is None:
            logger.debug("field_not_targeted", field=field)
            continue
        parts.setdefault(section, {})[field] = value
    return parts


def select_fields(edited: dict[str, Any], targeted: Iterable[SectionName]) -> dict[str, Any]:
    """Keep only the fields some targeted section will persist."""
    targeted = tuple(targeted)
    selected: dict[str, Any] = {}
    for field, value in edited.items():
        if field not in FIELD_SECTIONS:
            logger.warning("field_unmapped", field=field)
        elif owner_of(field, targeted) is not None:
            selected[field] = value
    return selected
