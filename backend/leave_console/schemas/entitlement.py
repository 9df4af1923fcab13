from __future__ import annotations

from typing import Any

from pydantic import Field

from leave_console.schemas.common import RefId, WireDate, WireModel, optional_id_field


class Entitlement(WireModel):
    """Balance of one employee for one leave type."""

    id: str | None = optional_id_field()
    employee_id: RefId
    leave_type_id: RefId
    yearly_entitlement: float = 0
    accrued_actual: float = 0
    accrued_rounded: float = 0
    carry_forward: float = 0
    taken: float = 0
    pending: float = 0
    remaining: float | None = None
    last_accrual_date: WireDate | None = None


class EntitlementSummary(WireModel):
    """Aggregated balances of an employee."""

    summary: dict[str, Any] = Field(default_factory=dict)
    data: list[Entitlement] = Field(default_factory=list)


class EntitlementForm(WireModel):
    """Assign-entitlement form.

    ``employee_ids`` holds one id or a comma/newline separated group.
    """

    employee_ids: str = ""
    leave_type_id: str = ""
    yearly_entitlement: float | None = Field(default=None, allow_inf_nan=False)


class EntitlementAssignment(WireModel):
    """Request body for assigning a yearly entitlement."""

    employee_id: str
    leave_type_id: str
    yearly_entitlement: float = Field(ge=0)


def parse_employee_ids(raw: str) -> list[str]:
    """Split a comma or newline separated list of employee ids."""
    return [part.strip() for part in raw.replace("\n", ",").split(",") if part.strip()]
