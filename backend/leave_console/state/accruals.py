from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field

from leave_console.schemas.accrual import (
    AccrualRunInput,
    CarryForwardInput,
    CarryForwardOverride,
    CarryForwardReportEntry,
    RunResult,
)
from leave_console.state.base import StateModel


class AccrualsState(StateModel):
    run_form: AccrualRunInput = Field(default_factory=AccrualRunInput)
    carry_forward_form: CarryForwardInput = Field(default_factory=CarryForwardInput)
    override_form: CarryForwardOverride = Field(default_factory=CarryForwardOverride)
    recalc_employee_id: str | None = None
    last_result: RunResult | None = None
    preview: list[CarryForwardReportEntry] = Field(default_factory=list)
    report: list[CarryForwardReportEntry] = Field(default_factory=list)


@dataclass(frozen=True)
class AccrualFormChanged:
    form: AccrualRunInput


@dataclass(frozen=True)
class CarryForwardFormChanged:
    form: CarryForwardInput


@dataclass(frozen=True)
class OverrideFormChanged:
    form: CarryForwardOverride


@dataclass(frozen=True)
class RecalcEmployeeSelected:
    employee_id: str | None


@dataclass(frozen=True)
class RunCompleted:
    result: RunResult


@dataclass(frozen=True)
class CarryForwardPreviewed:
    entries: list[CarryForwardReportEntry]


@dataclass(frozen=True)
class ReportLoaded:
    entries: list[CarryForwardReportEntry]


def reduce_accruals(state: AccrualsState, action: object) -> AccrualsState:
    if isinstance(action, AccrualFormChanged):
        return state.model_copy(update={"run_form": action.form})
    if isinstance(action, CarryForwardFormChanged):
        return state.model_copy(update={"carry_forward_form": action.form})
    if isinstance(action, OverrideFormChanged):
        return state.model_copy(update={"override_form": action.form})
    if isinstance(action, RecalcEmployeeSelected):
        return state.model_copy(update={"recalc_employee_id": action.employee_id})
    if isinstance(action, RunCompleted):
        return state.model_copy(update={"last_result": action.result})
    if isinstance(action, CarryForwardPreviewed):
        return state.model_copy(update={"preview": list(action.entries)})
    if isinstance(action, ReportLoaded):
        return state.model_copy(update={"report": list(action.entries)})
    return state
