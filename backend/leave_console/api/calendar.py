# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query

from leave_console.api.deps import ConfirmDep, ControllerDep, finish
from leave_console.schemas.calendar import BlockedPeriodInput, HolidayInput
from leave_console.schemas.common import WireModel
from leave_console.state.console import ConsoleState

router = APIRouter(prefix="/leaves-config/calendar", tags=["calendar"])


class YearSelection(WireModel):
    year: int


@router.put("/year", response_model=ConsoleState)
async def select_year(payload: YearSelection, controller: ControllerDep) -> ConsoleState:
    """Switch the calendar tab to another leave year."""
    await controller.select_year(payload.year)
    return controller.state


@router.post("/holidays", response_model=ConsoleState)
async def add_holiday(payload: HolidayInput, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.add_holiday(payload))


@router.delete("/holidays/{day}", response_model=ConsoleState)
async def remove_holiday(day: date, controller: ControllerDep, confirm: ConfirmDep) -> ConsoleState:
    return finish(controller, await controller.remove_holiday(day, confirm=confirm))


@router.post("/blocked-periods", response_model=ConsoleState)
async def add_blocked_period(payload: BlockedPeriodInput, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.add_blocked_period(payload))


@router.delete("/blocked-periods", response_model=ConsoleState)
async def remove_blocked_period(
    controller: ControllerDep,
    confirm: ConfirmDep,
    start: date = Query(alias="from"),
    end: date = Query(alias="to"),
) -> ConsoleState:
    return finish(controller, await controller.remove_blocked_period(start, end, confirm=confirm))
