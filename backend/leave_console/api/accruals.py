# ruff: noqa: B008, TC001
from __future__ import annotations

from fastapi import APIRouter, Query

from leave_console.api.deps import ControllerDep, finish
from leave_console.schemas.accrual import AccrualRunInput, CarryForwardInput, CarryForwardOverride
from leave_console.state.console import ConsoleState

router = APIRouter(prefix="/leaves-config/accruals", tags=["accruals"])


@router.post("/run", response_model=ConsoleState)
async def run_accrual(payload: AccrualRunInput, controller: ControllerDep) -> ConsoleState:
    """Trigger an accrual run on the HR backend."""
    return finish(controller, await controller.run_accrual(payload))


@router.post("/carry-forward", response_model=ConsoleState)
async def carry_forward(payload: CarryForwardInput, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.carry_forward(payload))


@router.post("/carry-forward/preview", response_model=ConsoleState)
async def preview_carry_forward(payload: CarryForwardInput, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.preview_carry_forward(payload))


@router.post("/carry-forward/override", response_model=ConsoleState)
async def override_carry_forward(payload: CarryForwardOverride, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.override_carry_forward(payload))


@router.get("/carry-forward/report", response_model=ConsoleState)
async def carry_forward_report(
    controller: ControllerDep,
    employee_id: str | None = Query(default=None, alias="employeeId"),
    leave_type_id: str | None = Query(default=None, alias="leaveTypeId"),
    year: int | None = Query(default=None),
) -> ConsoleState:
    return finish(controller, await controller.load_carry_forward_report(employee_id, leave_type_id, year))


@router.post("/recalc/{employee_id}", response_model=ConsoleState)
async def recalc_employee(employee_id: str, controller: ControllerDep) -> ConsoleState:
    """Recalculate one employee's accruals."""
    return finish(controller, await controller.recalc_employee(employee_id))
