"""Personal details section."""

from typing import Any, Type

from ..models.employee import Employee
from ..models.enums import SectionName
from ..models.sections import PersonalPayload, SectionRequest
from .base import BaseSection


class PersonalSection(BaseSection):
    """Identity and personal fields, including the profile picture path."""

    @property
    def name(self) -> SectionName:
        return SectionName.PERSONAL

    @property
    def payload_schema(self) -> Type[PersonalPayload]:
        return PersonalPayload

    def local_patch(self, request: SectionRequest, current: Employee) -> dict[str, Any]:
        # Field names match the snapshot one to one
        return request.payload.model_dump(exclude_unset=True, exclude={"section"})
