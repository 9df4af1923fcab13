from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from pydantic import Field

from leave_console.schemas.calendar import BlockedPeriodInput, HolidayInput, LeaveCalendar
from leave_console.state.base import StateModel


def _this_year() -> int:
    return date.today().year


class CalendarState(StateModel):
    year: int = Field(default_factory=_this_year)
    calendar: LeaveCalendar = Field(default_factory=LeaveCalendar)
    holiday_form: HolidayInput = Field(default_factory=HolidayInput)
    blocked_form: BlockedPeriodInput = Field(default_factory=BlockedPeriodInput)


@dataclass(frozen=True)
class YearSelected:
    year: int


@dataclass(frozen=True)
class CalendarLoaded:
    calendar: LeaveCalendar


@dataclass(frozen=True)
class HolidayFormChanged:
    form: HolidayInput


@dataclass(frozen=True)
class BlockedFormChanged:
    form: BlockedPeriodInput


def reduce_calendar(state: CalendarState, action: object) -> CalendarState:
    if isinstance(action, YearSelected):
        return state.model_copy(update={"year": action.year})
    if isinstance(action, CalendarLoaded):
        return state.model_copy(update={"calendar": action.calendar})
    if isinstance(action, HolidayFormChanged):
        return state.model_copy(update={"holiday_form": action.form})
    if isinstance(action, BlockedFormChanged):
        return state.model_copy(update={"blocked_form": action.form})
    return state
