from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field

from leave_console.schemas.leave_type import Eligibility, LeaveType
from leave_console.state.base import StateModel


class EligibilityState(StateModel):
    selected_type_id: str | None = None
    form: Eligibility = Field(default_factory=Eligibility)


@dataclass(frozen=True)
class EligibilityTypeSelected:
    type_id: str | None


@dataclass(frozen=True)
class EligibilityLoaded:
    """The backend's stored eligibility replaces the form."""

    eligibility: Eligibility


@dataclass(frozen=True)
class EligibilityEdited:
    form: Eligibility


def stored_eligibility(leave_type: LeaveType) -> Eligibility:
    """Eligibility of ``leave_type`` as the form shows it (empty lists when unset)."""
    return leave_type.eligibility or Eligibility()


def reduce_eligibility(state: EligibilityState, action: object) -> EligibilityState:
    if isinstance(action, EligibilityTypeSelected):
        return state.model_copy(update={"selected_type_id": action.type_id})
    if isinstance(action, EligibilityLoaded):
        return state.model_copy(update={"form": action.eligibility})
    if isinstance(action, EligibilityEdited):
        return state.model_copy(update={"form": action.form})
    return state
