from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field

from leave_console.exceptions import FormValidationError
from leave_console.models.enums import ResetStrategy
from leave_console.schemas.accrual import ResetInput, RunResult
from leave_console.state.base import StateModel


class ResetState(StateModel):
    form: ResetInput = Field(default_factory=ResetInput)
    preview: RunResult | None = None
    applied: RunResult | None = None


@dataclass(frozen=True)
class ResetFormChanged:
    form: ResetInput


@dataclass(frozen=True)
class ResetPreviewed:
    result: RunResult


@dataclass(frozen=True)
class ResetApplied:
    result: RunResult


def build_reset_payload(form: ResetInput, *, dry_run: bool) -> ResetInput:
    """Request body for a reset run; the reference date only goes with ``custom``."""
    if form.strategy == ResetStrategy.CUSTOM:
        if form.reference_date is None:
            raise FormValidationError("Reference date is required for a custom reset")
        return ResetInput(strategy=form.strategy, reference_date=form.reference_date, dry_run=dry_run)
    return ResetInput(strategy=form.strategy, dry_run=dry_run)


def reduce_reset(state: ResetState, action: object) -> ResetState:
    if isinstance(action, ResetFormChanged):
        return state.model_copy(update={"form": action.form})
    if isinstance(action, ResetPreviewed):
        return state.model_copy(update={"preview": action.result, "applied": None})
    if isinstance(action, ResetApplied):
        return state.model_copy(update={"applied": action.result})
    return state
