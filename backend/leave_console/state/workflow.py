"""Approval workflow editor of the policies tab."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import Field

from leave_console.exceptions import FormValidationError
from leave_console.schemas.policy import ApprovalWorkflow, PositionWorkflow, Position, WorkflowStep
from leave_console.state.base import StateModel


class WorkflowState(StateModel):
    """Editor state; ``policy_id`` is set while the editor is open."""

    policy_id: str | None = None
    config: ApprovalWorkflow = Field(default_factory=ApprovalWorkflow)
    positions: list[Position] = Field(default_factory=list)


@dataclass(frozen=True)
class WorkflowOpened:
    policy_id: str
    config: ApprovalWorkflow
    positions: list[Position]


@dataclass(frozen=True)
class WorkflowClosed:
    pass


@dataclass(frozen=True)
class StepAdded:
    """Append a manager step; ``position_index`` None targets the default chain."""

    position_index: int | None = None


@dataclass(frozen=True)
class StepRemoved:
    step_index: int
    position_index: int | None = None


@dataclass(frozen=True)
class StepEdited:
    step_index: int
    changes: dict[str, Any] = field(default_factory=dict)
    position_index: int | None = None


@dataclass(frozen=True)
class PositionWorkflowAdded:
    pass


@dataclass(frozen=True)
class PositionWorkflowRemoved:
    index: int


@dataclass(frozen=True)
class PositionWorkflowEdited:
    index: int
    position_id: str
    position_code: str | None = None


def _next_step(steps: list[WorkflowStep]) -> WorkflowStep:
    order = max((s.order for s in steps), default=0) + 1
    return WorkflowStep(role="manager", order=order)


def _check_index(index: int, items: list[Any], what: str) -> None:
    if not 0 <= index < len(items):
        msg = f"No {what} at position {index}"
        raise FormValidationError(msg)


def _edit_chain(config: ApprovalWorkflow, position_index: int | None, steps: list[WorkflowStep]) -> ApprovalWorkflow:
    if position_index is None:
        return config.model_copy(update={"default_workflow": steps})
    updated = list(config.position_workflows)
    updated[position_index] = updated[position_index].model_copy(update={"workflow": steps})
    return config.model_copy(update={"position_workflows": updated})


def _chain(config: ApprovalWorkflow, position_index: int | None) -> list[WorkflowStep]:
    if position_index is None:
        return list(config.default_workflow)
    _check_index(position_index, config.position_workflows, "position workflow")
    return list(config.position_workflows[position_index].workflow)


def reduce_workflow(state: WorkflowState, action: object) -> WorkflowState:
    """Apply a workflow editor action.

    Raises :class:`FormValidationError` for indexes that do not exist.
    """
    if isinstance(action, WorkflowOpened):
        return WorkflowState(policy_id=action.policy_id, config=action.config, positions=list(action.positions))
    if isinstance(action, WorkflowClosed):
        return WorkflowState()

    config = state.config
    if isinstance(action, StepAdded):
        steps = _chain(config, action.position_index)
        config = _edit_chain(config, action.position_index, [*steps, _next_step(steps)])
    elif isinstance(action, StepRemoved):
        steps = _chain(config, action.position_index)
        _check_index(action.step_index, steps, "workflow step")
        del steps[action.step_index]
        config = _edit_chain(config, action.position_index, steps)
    elif isinstance(action, StepEdited):
        steps = _chain(config, action.position_index)
        _check_index(action.step_index, steps, "workflow step")
        current = steps[action.step_index]
        steps[action.step_index] = WorkflowStep.model_validate({**current.model_dump(), **action.changes})
        config = _edit_chain(config, action.position_index, steps)
    elif isinstance(action, PositionWorkflowAdded):
        added = PositionWorkflow(position_id="", workflow=[WorkflowStep(role="manager", order=1)])
        config = config.model_copy(update={"position_workflows": [*config.position_workflows, added]})
    elif isinstance(action, PositionWorkflowRemoved):
        _check_index(action.index, config.position_workflows, "position workflow")
        remaining = [pw for i, pw in enumerate(config.position_workflows) if i != action.index]
        config = config.model_copy(update={"position_workflows": remaining})
    elif isinstance(action, PositionWorkflowEdited):
        _check_index(action.index, config.position_workflows, "position workflow")
        updated = list(config.position_workflows)
        updated[action.index] = updated[action.index].model_copy(
            update={"position_id": action.position_id, "position_code": action.position_code}
        )
        config = config.model_copy(update={"position_workflows": updated})
    else:
        return state
    return state.model_copy(update={"config": config})
