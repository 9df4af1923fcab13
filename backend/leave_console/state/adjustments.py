"""Manual adjustment tab: form, balance preview and history."""

from __future__ import annotations

import math
from dataclasses import dataclass

from pydantic import Field

from leave_console.exceptions import FormValidationError
from leave_console.models.enums import AdjustmentType
from leave_console.schemas.adjustment import AdjustmentInput, AdjustmentRecord
from leave_console.schemas.entitlement import Entitlement
from leave_console.state.base import StateModel

NEGATIVE_BALANCE_MESSAGE = "This deduction would make the balance negative. Reduce amount."


class AdjustmentsState(StateModel):
    form: AdjustmentInput = Field(default_factory=AdjustmentInput)
    selected_employee_id: str | None = None
    preview: list[Entitlement] = Field(default_factory=list)
    preview_employee_id: str | None = None
    history: list[AdjustmentRecord] = Field(default_factory=list)
    history_employee_id: str | None = None
    history_leave_type_id: str | None = None


@dataclass(frozen=True)
class AdjustmentFormChanged:
    form: AdjustmentInput


@dataclass(frozen=True)
class AdjustmentEmployeeSelected:
    employee_id: str | None


@dataclass(frozen=True)
class PreviewLoaded:
    employee_id: str | None
    entitlements: list[Entitlement]


@dataclass(frozen=True)
class HistoryFilterChanged:
    employee_id: str | None
    leave_type_id: str | None = None


@dataclass(frozen=True)
class HistoryLoaded:
    records: list[AdjustmentRecord]


@dataclass(frozen=True)
class AdjustmentFormReset:
    """Clear the form after a successful adjustment, keeping who applied it."""

    employee_id: str
    hr_user_id: str


def reduce_adjustments(state: AdjustmentsState, action: object) -> AdjustmentsState:
    if isinstance(action, AdjustmentFormChanged):
        return state.model_copy(update={"form": action.form})
    if isinstance(action, AdjustmentEmployeeSelected):
        return state.model_copy(update={"selected_employee_id": action.employee_id})
    if isinstance(action, PreviewLoaded):
        return state.model_copy(
            update={"preview_employee_id": action.employee_id, "preview": list(action.entitlements)}
        )
    if isinstance(action, HistoryFilterChanged):
        return state.model_copy(
            update={"history_employee_id": action.employee_id, "history_leave_type_id": action.leave_type_id}
        )
    if isinstance(action, HistoryLoaded):
        return state.model_copy(update={"history": list(action.records)})
    if isinstance(action, AdjustmentFormReset):
        form = AdjustmentInput(employee_id=action.employee_id, hr_user_id=action.hr_user_id)
        return state.model_copy(update={"form": form})
    return state


def find_entitlement(preview: list[Entitlement], leave_type_id: str) -> Entitlement | None:
    return next((e for e in preview if e.leave_type_id == leave_type_id), None)


def projected_remaining(entitlement: Entitlement, adjustment: AdjustmentInput) -> float:
    """Balance left after ``adjustment``; a missing ``remaining`` counts as 0."""
    remaining = entitlement.remaining or 0
    amount = adjustment.amount or 0
    if adjustment.adjustment_type == AdjustmentType.ADD:
        return remaining + amount
    return remaining - amount


def validate_adjustment_form(adjustment: AdjustmentInput) -> None:
    if not adjustment.employee_id.strip():
        raise FormValidationError("Please select an employee")
    if not adjustment.leave_type_id or not adjustment.reason.strip() or not adjustment.hr_user_id.strip():
        raise FormValidationError("Leave Type and Reason are required")
    if adjustment.amount is None or not math.isfinite(adjustment.amount) or adjustment.amount <= 0:
        raise FormValidationError("Amount must be a number > 0")


def check_adjustment(adjustment: AdjustmentInput, preview: list[Entitlement]) -> None:
    """Validate an adjustment form before it is sent.

    The negative-balance guard only applies to deductions for which a
    balance is known locally; the backend stays the source of truth.
    """
    validate_adjustment_form(adjustment)
    if adjustment.adjustment_type != AdjustmentType.DEDUCT:
        return
    current = find_entitlement(preview, adjustment.leave_type_id)
    if current is not None and projected_remaining(current, adjustment) < 0:
        raise FormValidationError(NEGATIVE_BALANCE_MESSAGE)
