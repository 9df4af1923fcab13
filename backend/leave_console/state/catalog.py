"""State of the categories, types and policies tabs.

The three tabs share one shape (a loaded list, a form and the id of the item
being edited) and one reducer, :func:`reduce_crud`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, Field

from leave_console.models.enums import AttachmentType
from leave_console.schemas.category import CategoryInput, LeaveCategory
from leave_console.schemas.leave_type import LeaveType, LeaveTypeInput, SpecialAbsenceConfig
from leave_console.schemas.policy import LeavePolicy, PolicyInput
from leave_console.state.base import StateModel
from leave_console.state.workflow import WorkflowState

# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


class CategoriesState(StateModel):
    items: list[LeaveCategory] = Field(default_factory=list)
    form: CategoryInput = Field(default_factory=CategoryInput)
    editing_id: str | None = None


class SpecialAbsenceState(StateModel):
    """Special absence editor; ``type_id`` is set while it is open."""

    type_id: str | None = None
    config: SpecialAbsenceConfig = Field(default_factory=SpecialAbsenceConfig)


class TypesState(StateModel):
    items: list[LeaveType] = Field(default_factory=list)
    form: LeaveTypeInput = Field(default_factory=LeaveTypeInput)
    editing_id: str | None = None
    special_absence: SpecialAbsenceState = Field(default_factory=SpecialAbsenceState)


class PoliciesState(StateModel):
    items: list[LeavePolicy] = Field(default_factory=list)
    form: PolicyInput = Field(default_factory=PolicyInput)
    editing_id: str | None = None
    workflow: WorkflowState = Field(default_factory=WorkflowState)


CrudStateT = TypeVar("CrudStateT", CategoriesState, TypesState, PoliciesState)

# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ItemsLoaded:
    items: list[Any]


@dataclass(frozen=True)
class FormChanged:
    form: BaseModel


@dataclass(frozen=True)
class EditStarted:
    item_id: str
    form: BaseModel


@dataclass(frozen=True)
class FormReset:
    pass


@dataclass(frozen=True)
class SpecialAbsenceOpened:
    type_id: str
    config: SpecialAbsenceConfig


@dataclass(frozen=True)
class SpecialAbsenceEdited:
    config: SpecialAbsenceConfig


@dataclass(frozen=True)
class SpecialAbsenceClosed:
    pass


# ---------------------------------------------------------------------------
# Reducers
# ---------------------------------------------------------------------------


def reduce_crud(state: CrudStateT, action: object) -> CrudStateT:
    """Apply a list/form action to a categories, types or policies state."""
    if isinstance(action, ItemsLoaded):
        return state.model_copy(update={"items": list(action.items)})
    if isinstance(action, FormChanged):
        return state.model_copy(update={"form": action.form})
    if isinstance(action, EditStarted):
        return state.model_copy(update={"editing_id": action.item_id, "form": action.form})
    if isinstance(action, FormReset):
        return state.model_copy(update={"form": type(state.form)(), "editing_id": None})
    return state


def reduce_special_absence(state: TypesState, action: object) -> TypesState:
    if isinstance(action, SpecialAbsenceOpened):
        editor = SpecialAbsenceState(type_id=action.type_id, config=action.config)
    elif isinstance(action, SpecialAbsenceEdited):
        editor = state.special_absence.model_copy(update={"config": action.config})
    elif isinstance(action, SpecialAbsenceClosed):
        editor = SpecialAbsenceState()
    else:
        return reduce_crud(state, action)
    return state.model_copy(update={"special_absence": editor})


# ---------------------------------------------------------------------------
# Edit forms
# ---------------------------------------------------------------------------


def category_form(category: LeaveCategory) -> CategoryInput:
    return CategoryInput(name=category.name, description=category.description or "")


def type_form(leave_type: LeaveType) -> LeaveTypeInput:
    return LeaveTypeInput(
        code=leave_type.code,
        name=leave_type.name,
        category_id=leave_type.category_id,
        description=leave_type.description or "",
        paid=leave_type.paid,
        deductible=leave_type.deductible,
        requires_attachment=leave_type.requires_attachment,
        attachment_type=leave_type.attachment_type or AttachmentType.MEDICAL,
        min_tenure_months=leave_type.min_tenure_months,
        max_duration_days=leave_type.max_duration_days,
    )


def policy_form(policy: LeavePolicy) -> PolicyInput:
    return PolicyInput.model_validate(policy.model_dump(exclude={"id", "leave_type_name"}))
