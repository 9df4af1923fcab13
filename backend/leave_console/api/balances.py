# ruff: noqa: B008, TC001
"""Entitlements and manual adjustment tabs."""

from __future__ import annotations

from fastapi import APIRouter, Query

from leave_console.api.deps import ControllerDep, finish
from leave_console.schemas.adjustment import AdjustmentInput
from leave_console.schemas.common import WireModel
from leave_console.schemas.entitlement import EntitlementForm
from leave_console.state.console import ConsoleState

entitlements_router = APIRouter(prefix="/leaves-config/entitlements", tags=["balances"])

adjustments_router = APIRouter(prefix="/leaves-config/adjustments", tags=["balances"])


class EmployeeSelection(WireModel):
    employee_id: str | None = None


@entitlements_router.get("/{employee_id}", response_model=ConsoleState)
async def load_entitlements(employee_id: str, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.load_entitlements(employee_id))


@entitlements_router.get("/{employee_id}/summary", response_model=ConsoleState)
async def load_entitlement_summary(employee_id: str, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.load_entitlement_summary(employee_id))


@entitlements_router.post("", response_model=ConsoleState)
async def assign_entitlement(payload: EntitlementForm, controller: ControllerDep) -> ConsoleState:
    """Assign a yearly entitlement to one or more employees."""
    return finish(controller, await controller.assign_entitlement(payload))


@adjustments_router.put("/employee", response_model=ConsoleState)
async def select_adjustment_employee(payload: EmployeeSelection, controller: ControllerDep) -> ConsoleState:
    """Pick the employee whose balances the adjustment form previews."""
    await controller.select_adjustment_employee(payload.employee_id)
    return controller.state


@adjustments_router.get("/history", response_model=ConsoleState)
async def load_adjustment_history(
    controller: ControllerDep,
    employee_id: str | None = Query(default=None, alias="employeeId"),
    leave_type_id: str | None = Query(default=None, alias="leaveTypeId"),
) -> ConsoleState:
    return finish(controller, await controller.load_adjustment_history(employee_id, leave_type_id))


@adjustments_router.post("", response_model=ConsoleState)
async def create_adjustment(payload: AdjustmentInput, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.create_adjustment(payload))
