"""Contact section: addresses and phone numbers in one write."""

from typing import Any, Type

from ..models.employee import Employee
from ..models.enums import SectionName
from ..models.sections import ContactPayload, SectionRequest
from .base import BaseSection


class ContactSection(BaseSection):
    @property
    def name(self) -> SectionName:
        return SectionName.CONTACT

    @property
    def payload_schema(self) -> Type[ContactPayload]:
        return ContactPayload

    def local_patch(self, request: SectionRequest, current: Employee) -> dict[str, Any]:
        payload = request.payload
        patch: dict[str, Any] = {}
        if "address" in payload.model_fields_set:
            patch["addresses"] = [a.model_dump(exclude_unset=True) for a in payload.address or []]
        if "phones" in payload.model_fields_set:
            patch["phones"] = [p.model_dump(exclude_unset=True) for p in payload.phones or []]
        return patch
