"""The console's full state tree and its top-level reducer."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field

from leave_console.models.enums import ConfigTab
from leave_console.schemas.employee import EmployeeOption
from leave_console.state.access import AccessState
from leave_console.state.accruals import AccrualsState
from leave_console.state.adjustments import AdjustmentsState
from leave_console.state.base import Banner, StateModel
from leave_console.state.calendar import CalendarState
from leave_console.state.catalog import CategoriesState, PoliciesState, TypesState
from leave_console.state.eligibility import EligibilityState
from leave_console.state.entitlements import EntitlementsState
from leave_console.state.reset import ResetState


class ConsoleState(StateModel):
    """Everything one HR admin sees on the leaves configuration console."""

    active_tab: ConfigTab = ConfigTab.CATEGORIES
    loading: bool = False
    banner: Banner = Field(default_factory=Banner)
    employees: list[EmployeeOption] = Field(default_factory=list)

    categories: CategoriesState = Field(default_factory=CategoriesState)
    types: TypesState = Field(default_factory=TypesState)
    policies: PoliciesState = Field(default_factory=PoliciesState)
    eligibility: EligibilityState = Field(default_factory=EligibilityState)
    calendar: CalendarState = Field(default_factory=CalendarState)
    accruals: AccrualsState = Field(default_factory=AccrualsState)
    entitlements: EntitlementsState = Field(default_factory=EntitlementsState)
    adjustments: AdjustmentsState = Field(default_factory=AdjustmentsState)
    reset: ResetState = Field(default_factory=ResetState)
    access: AccessState = Field(default_factory=AccessState)


@dataclass(frozen=True)
class TabSelected:
    tab: ConfigTab


@dataclass(frozen=True)
class LoadingChanged:
    loading: bool


@dataclass(frozen=True)
class ErrorRaised:
    message: str


@dataclass(frozen=True)
class SuccessReported:
    message: str


@dataclass(frozen=True)
class MessagesCleared:
    pass


@dataclass(frozen=True)
class EmployeesLoaded:
    employees: list[EmployeeOption]


def reduce_console(state: ConsoleState, action: object) -> ConsoleState:
    """Apply a console-wide action. Tab-level actions go through the tab reducers."""
    if isinstance(action, TabSelected):
        return state.model_copy(update={"active_tab": action.tab, "banner": Banner()})
    if isinstance(action, LoadingChanged):
        return state.model_copy(update={"loading": action.loading})
    if isinstance(action, ErrorRaised):
        return state.model_copy(update={"banner": Banner(error=action.message)})
    if isinstance(action, SuccessReported):
        return state.model_copy(update={"banner": Banner(success=action.message)})
    if isinstance(action, MessagesCleared):
        return state.model_copy(update={"banner": Banner()})
    if isinstance(action, EmployeesLoaded):
        return state.model_copy(update={"employees": list(action.employees)})
    return state
