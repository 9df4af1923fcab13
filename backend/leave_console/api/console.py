# ruff: noqa: B008, TC001
from __future__ import annotations

from fastapi import APIRouter, Query

from leave_console.api.deps import ControllerDep
from leave_console.models.enums import ConfigTab
from leave_console.schemas.common import WireModel
from leave_console.schemas.employee import EmployeeOption
from leave_console.state.console import ConsoleState

router = APIRouter(prefix="/leaves-config", tags=["console"])


class TabSelection(WireModel):
    tab: ConfigTab


@router.get("/state", response_model=ConsoleState)
async def get_state(controller: ControllerDep) -> ConsoleState:
    """Current console state of the calling HR admin."""
    return controller.state


@router.post("/refresh", response_model=ConsoleState)
async def refresh(controller: ControllerDep) -> ConsoleState:
    """Re-run the initial load and the active tab's fetches."""
    await controller.open()
    return controller.state


@router.put("/tab", response_model=ConsoleState)
async def select_tab(payload: TabSelection, controller: ControllerDep) -> ConsoleState:
    await controller.select_tab(payload.tab)
    return controller.state


@router.get("/employees", response_model=list[EmployeeOption])
async def list_employees(controller: ControllerDep, search: str = Query(default="")) -> list[EmployeeOption]:
    """Employees for the pickers, filtered by name, employee number or id."""
    if not controller.state.employees:
        await controller.fetch_employees()
    return controller.employee_options(search)
