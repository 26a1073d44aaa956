"""Section instances keyed by name, in dispatch order."""

from ..models.enums import SectionName
from .base import BaseSection
from .certifications import CertificationsSection
from .contact import ContactSection
from .documents import DocumentsSection
from .education import EducationSection
from .employment import EmploymentSection
from .experience import ExperienceSection
from .field_map import SECTION_ORDER
from .financial import FinancialSection
from .personal import PersonalSection


def default_sections() -> dict[SectionName, BaseSection]:
    sections: list[BaseSection] = [
        PersonalSection(),
        FinancialSection(),
        EmploymentSection(),
        ContactSection(),
        EducationSection(),
        ExperienceSection(),
        CertificationsSection(),
        DocumentsSection(),
    ]
    by_name = {section.name: section for section in sections}
    return {name: by_name[name] for name in SECTION_ORDER}
