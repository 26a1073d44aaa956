"""Work experience section."""

from typing import Any, Type

from ..models.employee import Employee
from ..models.enums import SectionName
from ..models.sections import ExperiencePayload, SectionRequest
from .base import BaseSection, strip_null_keys

NULLABLE_URL_KEYS = ("document", "documentUrl", "document_url")


class ExperienceSection(BaseSection):
    @property
    def name(self) -> SectionName:
        return SectionName.EXPERIENCE

    @property
    def payload_schema(self) -> Type[ExperiencePayload]:
        return ExperiencePayload

    def transform(self, fields: dict[str, Any]) -> dict[str, Any]:
        shaped = {}
        for key, value in fields.items():
            shaped[key] = strip_null_keys(value, NULLABLE_URL_KEYS)
        return shaped

    def local_patch(self, request: SectionRequest, current: Employee) -> dict[str, Any]:
        payload = request.payload
        if "work_experience" not in payload.model_fields_set:
            return {}
        return {
            "employment_histories": [
                entry.model_dump(mode="json", exclude_unset=True)
                for entry in payload.work_experience or []
            ]
        }
