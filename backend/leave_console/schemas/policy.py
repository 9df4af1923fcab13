from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from leave_console.models.enums import AccrualMethod, RoundingRule
from leave_console.schemas.common import RefId, WireModel, id_field

# ---------------------------------------------------------------------------
# Leave policies
# ---------------------------------------------------------------------------


class LeavePolicy(WireModel):
    """Accrual and carry-forward rules for one leave type."""

    id: str = id_field()
    leave_type_id: RefId
    leave_type_name: str | None = None
    accrual_method: AccrualMethod
    monthly_rate: float | None = None
    yearly_rate: float | None = None
    carry_forward_allowed: bool = False
    max_carry_forward: float | None = None
    expiry_after_months: int | None = None
    rounding_rule: RoundingRule = RoundingRule.ROUND
    min_notice_days: int = 0
    max_consecutive_days: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _capture_populated_type(cls, data: Any) -> Any:
        # The backend sometimes populates leaveTypeId with the whole type document.
        if isinstance(data, dict) and isinstance(data.get("leaveTypeId"), dict):
            ref = data["leaveTypeId"]
            name = ref.get("name")
            if name and "leaveTypeName" not in data:
                code = ref.get("code")
                data = {**data, "leaveTypeName": f"{name} ({code})" if code else name}
        return data


class PolicyInput(WireModel):
    """Policy form; also the create/update request body."""

    leave_type_id: str = ""
    accrual_method: AccrualMethod = AccrualMethod.MONTHLY
    monthly_rate: float | None = Field(default=None, ge=0)
    yearly_rate: float | None = Field(default=None, ge=0)
    carry_forward_allowed: bool = False
    max_carry_forward: float | None = Field(default=None, ge=0)
    expiry_after_months: int | None = Field(default=None, ge=0)
    rounding_rule: RoundingRule = RoundingRule.ROUND
    min_notice_days: int = Field(default=0, ge=0)
    max_consecutive_days: int | None = Field(default=None, ge=1)


# ---------------------------------------------------------------------------
# Approval workflows
# ---------------------------------------------------------------------------


class WorkflowStep(WireModel):
    """One approver in an approval chain."""

    role: str = "manager"
    order: int = Field(default=1, ge=1)
    position_id: str | None = None
    position_code: str | None = None


class PositionWorkflow(WireModel):
    """Approval chain that overrides the default for one position."""

    position_id: str = ""
    position_code: str | None = None
    workflow: list[WorkflowStep] = Field(default_factory=list)


def _default_steps() -> list[WorkflowStep]:
    return [WorkflowStep(role="manager", order=1), WorkflowStep(role="hr", order=2)]


class ApprovalWorkflow(WireModel):
    """Approval workflow configuration of a leave policy."""

    default_workflow: list[WorkflowStep] = Field(default_factory=_default_steps)
    position_workflows: list[PositionWorkflow] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Position(WireModel):
    """Organisational position selectable in a position workflow."""

    id: str = id_field()
    title: str = ""
    code: str = ""
