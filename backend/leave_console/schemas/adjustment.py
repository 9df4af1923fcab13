# ruff: noqa: TC003
from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, Field

from leave_console.models.enums import AdjustmentType
from leave_console.schemas.common import RefId, WireModel, optional_id_field


class AdjustmentInput(WireModel):
    """Manual balance adjustment form; also the request body."""

    employee_id: str = ""
    leave_type_id: str = ""
    adjustment_type: AdjustmentType = AdjustmentType.ADD
    amount: float | None = Field(default=None, allow_inf_nan=False)
    reason: str = ""
    hr_user_id: str = ""


class AdjustmentRecord(WireModel):
    """Audit trail entry of a manual adjustment."""

    id: str | None = optional_id_field()
    employee_id: RefId | None = None
    leave_type_id: RefId | None = Field(
        default=None,
        validation_alias=AliasChoices("leaveTypeId", "leaveType"),
    )
    adjustment_type: AdjustmentType = Field(validation_alias=AliasChoices("adjustmentType", "type"))
    amount: float = Field(validation_alias=AliasChoices("amount", "days"))
    reason: str = ""
    applied_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("appliedAt", "createdAt", "date"),
    )
