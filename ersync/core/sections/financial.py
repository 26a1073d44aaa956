"""Financial section: salary figures, bank details and tax number."""

from typing import Any, Type

from ..models.employee import Employee
from ..models.enums import SectionName
from ..models.sections import FinancialPayload, SectionRequest
from .base import BaseSection
from .salary import active_salary_patch


class FinancialSection(BaseSection):
    @property
    def name(self) -> SectionName:
        return SectionName.FINANCIAL

    @property
    def payload_schema(self) -> Type[FinancialPayload]:
        return FinancialPayload

    def local_patch(self, request: SectionRequest, current: Employee) -> dict[str, Any]:
        # Bank details are not part of the snapshot
        return active_salary_patch(request, current)
