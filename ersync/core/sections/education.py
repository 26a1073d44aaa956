"""Education section."""

from typing import Any, Type

from ..models.enums import SectionName
from ..models.sections import EducationPayload
from .base import BaseSection, strip_null_keys

NULLABLE_URL_KEYS = (
    "document",
    "documentUrl",
    "document_url",
    "cost_sharing_document",
    "costSharingDocument",
    "costSharingDocumentUrl",
    "cost_sharing_document_url",
)


class EducationSection(BaseSection):
    """Institution and field of study resolve to foreign ids server-side, so no cache patch."""

    @property
    def name(self) -> SectionName:
        return SectionName.EDUCATION

    @property
    def payload_schema(self) -> Type[EducationPayload]:
        return EducationPayload

    def transform(self, fields: dict[str, Any]) -> dict[str, Any]:
        shaped = dict(fields)
        if "education" in shaped:
            shaped["education"] = strip_null_keys(shaped["education"], NULLABLE_URL_KEYS)
        return shaped
