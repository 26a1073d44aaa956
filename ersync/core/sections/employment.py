"""Employment section: position, department and contract terms."""

from typing import Any, Type

from ..models.employee import Employee
from ..models.enums import SectionName
from ..models.sections import EmploymentPayload, SectionRequest
from .base import BaseSection
from .salary import active_salary_patch


class EmploymentSection(BaseSection):
    """Job title and department are sent by name or id and resolved server-side."""

    @property
    def name(self) -> SectionName:
        return SectionName.EMPLOYMENT

    @property
    def payload_schema(self) -> Type[EmploymentPayload]:
        return EmploymentPayload

    def local_patch(self, request: SectionRequest, current: Employee) -> dict[str, Any]:
        # Title and department names wait for the next full fetch
        return active_salary_patch(request, current)
