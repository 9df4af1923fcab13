# ruff: noqa: TC001
"""Categories, leave types, policies and eligibility tabs."""

from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter
from pydantic import Field

from leave_console.api.deps import ConfirmDep, ControllerDep, finish
from leave_console.schemas.category import CategoryInput
from leave_console.schemas.common import WireModel
from leave_console.schemas.leave_type import Eligibility, LeaveTypeInput, SpecialAbsenceConfig
from leave_console.schemas.policy import ApprovalWorkflow, PolicyInput
from leave_console.state import workflow as wf
from leave_console.state.console import ConsoleState

router = APIRouter(prefix="/leaves-config", tags=["catalog"])


class EligibilityUpdate(WireModel):
    type_id: str | None = None
    eligibility: Eligibility = Field(default_factory=Eligibility)


class EligibilitySelection(WireModel):
    type_id: str | None = None


class WorkflowEdit(WireModel):
    """One edit of the open approval workflow."""

    op: Literal["add_step", "remove_step", "edit_step", "add_position", "remove_position", "edit_position"]
    position_index: int | None = None
    step_index: int = 0
    changes: dict[str, Any] = Field(default_factory=dict)
    position_id: str = ""
    position_code: str | None = None

    def to_action(self) -> object:
        if self.op == "add_step":
            return wf.StepAdded(self.position_index)
        if self.op == "remove_step":
            return wf.StepRemoved(self.step_index, self.position_index)
        if self.op == "edit_step":
            return wf.StepEdited(self.step_index, self.changes, self.position_index)
        if self.op == "add_position":
            return wf.PositionWorkflowAdded()
        if self.op == "remove_position":
            return wf.PositionWorkflowRemoved(self.position_index or 0)
        return wf.PositionWorkflowEdited(self.position_index or 0, self.position_id, self.position_code)


# -- categories ---------------------------------------------------------------


@router.post("/categories", response_model=ConsoleState)
async def create_category(payload: CategoryInput, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.create_category(payload))


@router.post("/categories/{category_id}/edit", response_model=ConsoleState)
async def start_edit_category(category_id: str, controller: ControllerDep) -> ConsoleState:
    """Load a category into the form for editing."""
    controller.start_edit_category(category_id)
    return controller.state


@router.put("/categories/{category_id}", response_model=ConsoleState)
async def update_category(category_id: str, payload: CategoryInput, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.update_category(category_id, payload))


@router.delete("/categories/{category_id}", response_model=ConsoleState)
async def delete_category(category_id: str, controller: ControllerDep, confirm: ConfirmDep) -> ConsoleState:
    return finish(controller, await controller.delete_category(category_id, confirm=confirm))


@router.delete("/edit/{slot}", response_model=ConsoleState)
async def cancel_edit(slot: Literal["categories", "types", "policies"], controller: ControllerDep) -> ConsoleState:
    """Clear a tab's form and leave edit mode."""
    controller.cancel_edit(slot)
    return controller.state


# -- leave types ----------------------------------------------------------------


@router.post("/types", response_model=ConsoleState)
async def create_type(payload: LeaveTypeInput, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.create_type(payload))


@router.post("/types/{type_id}/edit", response_model=ConsoleState)
async def start_edit_type(type_id: str, controller: ControllerDep) -> ConsoleState:
    controller.start_edit_type(type_id)
    return controller.state


@router.put("/types/{type_id}", response_model=ConsoleState)
async def update_type(type_id: str, payload: LeaveTypeInput, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.update_type(type_id, payload))


@router.delete("/types/{type_id}", response_model=ConsoleState)
async def delete_type(type_id: str, controller: ControllerDep, confirm: ConfirmDep) -> ConsoleState:
    return finish(controller, await controller.delete_type(type_id, confirm=confirm))


@router.post("/types/{type_id}/special-absence", response_model=ConsoleState)
async def open_special_absence(type_id: str, controller: ControllerDep) -> ConsoleState:
    """Open the special absence editor with the type's stored settings."""
    return finish(controller, await controller.open_special_absence(type_id))


@router.put("/special-absence", response_model=ConsoleState)
async def save_special_absence(payload: SpecialAbsenceConfig, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.save_special_absence(payload))


@router.delete("/special-absence", response_model=ConsoleState)
async def close_special_absence(controller: ControllerDep) -> ConsoleState:
    controller.close_special_absence()
    return controller.state


# -- policies and workflows ---------------------------------------------------------


@router.post("/policies", response_model=ConsoleState)
async def create_policy(payload: PolicyInput, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.create_policy(payload))


@router.post("/policies/{policy_id}/edit", response_model=ConsoleState)
async def start_edit_policy(policy_id: str, controller: ControllerDep) -> ConsoleState:
    controller.start_edit_policy(policy_id)
    return controller.state


@router.put("/policies/{policy_id}", response_model=ConsoleState)
async def update_policy(policy_id: str, payload: PolicyInput, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.update_policy(policy_id, payload))


@router.delete("/policies/{policy_id}", response_model=ConsoleState)
async def delete_policy(policy_id: str, controller: ControllerDep, confirm: ConfirmDep) -> ConsoleState:
    return finish(controller, await controller.delete_policy(policy_id, confirm=confirm))


@router.post("/policies/{policy_id}/workflow", response_model=ConsoleState)
async def open_workflow(policy_id: str, controller: ControllerDep) -> ConsoleState:
    """Open the approval workflow editor of a policy."""
    return finish(controller, await controller.open_workflow(policy_id))


@router.patch("/workflow", response_model=ConsoleState)
async def edit_workflow(payload: WorkflowEdit, controller: ControllerDep) -> ConsoleState:
    controller.edit_workflow(payload.to_action())
    return controller.state


@router.put("/workflow", response_model=ConsoleState)
async def save_workflow(controller: ControllerDep, payload: ApprovalWorkflow | None = None) -> ConsoleState:
    """Save the open workflow; a body replaces the edited configuration first."""
    return finish(controller, await controller.save_workflow(payload))


@router.delete("/workflow", response_model=ConsoleState)
async def close_workflow(controller: ControllerDep) -> ConsoleState:
    controller.close_workflow()
    return controller.state


# -- eligibility ------------------------------------------------------------------


@router.put("/eligibility/selection", response_model=ConsoleState)
async def select_eligibility_type(payload: EligibilitySelection, controller: ControllerDep) -> ConsoleState:
    await controller.select_eligibility_type(payload.type_id)
    return controller.state


@router.put("/eligibility", response_model=ConsoleState)
async def set_eligibility(payload: EligibilityUpdate, controller: ControllerDep) -> ConsoleState:
    return finish(controller, await controller.set_eligibility(payload.type_id, payload.eligibility))
