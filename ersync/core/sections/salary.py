"""Shared optimistic patch for salary fields carried by two sections."""

from typing import Any

from ..models.employee import Employee
from ..models.sections import SectionRequest

SALARY_FIELDS = ("gross_salary", "basic_salary", "allowances")


def active_salary_patch(request: SectionRequest, current: Employee) -> dict[str, Any]:
    """Rewrite the active employment's salary numbers from the request.

    Returns an ``employments`` patch, or nothing when the request carries no
    salary field or the record has no employment to update.
    """
    payload = request.payload
    touched = [f for f in SALARY_FIELDS if f in payload.model_fields_set]
    active = current.active_employment()
    if not touched or active is None:
        return {}

    employments = []
    for employment in current.employments:
        data = employment.model_dump()
        if employment is active:
            for field in touched:
                value = getattr(payload, field)
                if field == "allowances":
                    value = [a.model_dump() for a in value or []]
                data[field] = value
        employments.append(data)
    return {"employments": employments}
