from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field

from leave_console.schemas.entitlement import Entitlement, EntitlementForm, EntitlementSummary
from leave_console.state.base import StateModel


class EntitlementsState(StateModel):
    form: EntitlementForm = Field(default_factory=EntitlementForm)
    employee_id: str | None = None
    entitlements: list[Entitlement] = Field(default_factory=list)
    summary: EntitlementSummary | None = None


@dataclass(frozen=True)
class EntitlementFormChanged:
    form: EntitlementForm


@dataclass(frozen=True)
class EntitlementsLoaded:
    employee_id: str
    entitlements: list[Entitlement]


@dataclass(frozen=True)
class SummaryLoaded:
    employee_id: str
    summary: EntitlementSummary | None


def reduce_entitlements(state: EntitlementsState, action: object) -> EntitlementsState:
    if isinstance(action, EntitlementFormChanged):
        return state.model_copy(update={"form": action.form})
    if isinstance(action, EntitlementsLoaded):
        return state.model_copy(update={"employee_id": action.employee_id, "entitlements": list(action.entitlements)})
    if isinstance(action, SummaryLoaded):
        return state.model_copy(update={"employee_id": action.employee_id, "summary": action.summary})
    return state
