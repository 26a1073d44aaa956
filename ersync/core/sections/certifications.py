"""Licenses and certifications section."""

from typing import Any, Type

from ..models.employee import Employee
from ..models.enums import SectionName
from ..models.sections import CertificationsPayload, SectionRequest
from .base import BaseSection, strip_null_keys

NULLABLE_URL_KEYS = (
    "certificate_document",
    "certificateDocument",
    "documentUrl",
    "document_url",
    "credentialUrl",
    "credential_url",
)


class CertificationsSection(BaseSection):
    @property
    def name(self) -> SectionName:
        return SectionName.CERTIFICATIONS

    @property
    def payload_schema(self) -> Type[CertificationsPayload]:
        return CertificationsPayload

    def transform(self, fields: dict[str, Any]) -> dict[str, Any]:
        shaped = dict(fields)
        if "certifications" in shaped:
            shaped["certifications"] = strip_null_keys(shaped["certifications"], NULLABLE_URL_KEYS)
        return shaped

    def local_patch(self, request: SectionRequest, current: Employee) -> dict[str, Any]:
        payload = request.payload
        if "certifications" not in payload.model_fields_set:
            return {}
        return {
            "licenses_and_certifications": [
                entry.model_dump(mode="json", exclude_unset=True)
                for entry in payload.certifications or []
            ]
        }
