# ruff: noqa: TC003
from __future__ import annotations

from datetime import date

from pydantic import ConfigDict, Field

from leave_console.models.enums import AccrualMethod, ResetStrategy, RoundingRule
from leave_console.schemas.common import RefId, WireModel


class AccrualRunInput(WireModel):
    """Parameters of a manual accrual run."""

    reference_date: date = Field(default_factory=date.today)
    method: AccrualMethod = AccrualMethod.MONTHLY
    rounding_rule: RoundingRule = RoundingRule.ROUND


class CarryForwardRule(WireModel):
    """Per-leave-type carry-forward override."""

    cap: float = Field(ge=0)
    expiry_months: int = Field(ge=0)
    can_carry_forward: bool = True


class CarryForwardInput(WireModel):
    """Parameters of a carry-forward run or preview."""

    reference_date: date = Field(default_factory=date.today)
    cap_days: float | None = Field(default=None, ge=0)
    expiry_months: int | None = Field(default=None, ge=0)
    leave_type_rules: dict[str, CarryForwardRule] | None = None


class CarryForwardOverride(WireModel):
    """Manual carry-forward amount for one employee and leave type."""

    employee_id: str = ""
    leave_type_id: str = ""
    carry_forward_days: float = Field(default=0, ge=0)
    expiry_date: date | None = None
    reason: str | None = None


class CarryForwardReportEntry(WireModel):
    """One row of the carry-forward report; unknown columns are kept."""

    model_config = ConfigDict(extra="allow")

    employee_id: RefId | None = None
    leave_type_id: RefId | None = None
    carry_forward: float | None = None


class RunResult(WireModel):
    """Summary returned by accrual, carry-forward and reset runs."""

    model_config = ConfigDict(extra="allow")

    processed: int = 0


class ResetInput(WireModel):
    """Leave year reset form."""

    strategy: ResetStrategy = ResetStrategy.CALENDAR_YEAR
    reference_date: date | None = None
    dry_run: bool = True
