"""Tests for the pure console reducers and form guards."""

from __future__ import annotations

from datetime import date

import pytest

from leave_console.exceptions import FormValidationError
from leave_console.models.enums import AdjustmentType, AppRole, ConfigTab, ResetStrategy, SystemRole
from leave_console.schemas.access import RoleUser
from leave_console.schemas.accrual import ResetInput
from leave_console.schemas.adjustment import AdjustmentInput
from leave_console.schemas.category import CategoryInput, LeaveCategory
from leave_console.schemas.entitlement import Entitlement
from leave_console.schemas.policy import ApprovalWorkflow
from leave_console.state import access, adjustments, catalog, reset
from leave_console.state import workflow as wf
from leave_console.state.base import Banner
from leave_console.state.console import ConsoleState, ErrorRaised, TabSelected, reduce_console


def _adjustment(**overrides: object) -> AdjustmentInput:
    fields: dict[str, object] = {
        "employee_id": "E1",
        "leave_type_id": "T1",
        "adjustment_type": AdjustmentType.DEDUCT,
        "amount": 10,
        "reason": "correction",
        "hr_user_id": "U1",
    }
    fields.update(overrides)
    return AdjustmentInput.model_validate(fields)


# ---------------------------------------------------------------------------
# Console
# ---------------------------------------------------------------------------


def test_selecting_a_tab_clears_the_banner() -> None:
    state = reduce_console(ConsoleState(), ErrorRaised("Failed to create category"))
    assert state.banner.error == "Failed to create category"

    state = reduce_console(state, TabSelected(ConfigTab.CALENDAR))
    assert state.active_tab == ConfigTab.CALENDAR
    assert state.banner == Banner()


def test_error_replaces_success() -> None:
    state = ConsoleState(banner=Banner(success="Category created"))
    state = reduce_console(state, ErrorRaised("boom"))
    assert state.banner == Banner(error="boom")


def test_state_renders_camel_case() -> None:
    dumped = ConsoleState().model_dump(by_alias=True)
    assert "activeTab" in dumped
    assert "editingId" in dumped["categories"]


# ---------------------------------------------------------------------------
# Catalog tabs
# ---------------------------------------------------------------------------


def test_edit_then_reset_round_trip() -> None:
    category = LeaveCategory(id="c1", name="Annual", description=None)
    state = catalog.reduce_crud(catalog.CategoriesState(), catalog.ItemsLoaded([category]))
    state = catalog.reduce_crud(state, catalog.EditStarted("c1", catalog.category_form(category)))
    assert state.editing_id == "c1"
    assert state.form == CategoryInput(name="Annual", description="")

    state = catalog.reduce_crud(state, catalog.FormReset())
    assert state.editing_id is None
    assert state.form == CategoryInput()
    assert state.items == [category]


def test_reducers_do_not_mutate_their_input() -> None:
    before = catalog.CategoriesState()
    after = catalog.reduce_crud(before, catalog.FormChanged(CategoryInput(name="Sick")))
    assert before.form.name == ""
    assert after.form.name == "Sick"


# ---------------------------------------------------------------------------
# Approval workflow editor
# ---------------------------------------------------------------------------


def _open_workflow() -> wf.WorkflowState:
    return wf.reduce_workflow(wf.WorkflowState(), wf.WorkflowOpened("p1", ApprovalWorkflow(), []))


def test_added_step_takes_next_order() -> None:
    state = wf.reduce_workflow(_open_workflow(), wf.StepAdded())
    assert [(s.role, s.order) for s in state.config.default_workflow] == [("manager", 1), ("hr", 2), ("manager", 3)]


def test_position_workflow_steps() -> None:
    state = wf.reduce_workflow(_open_workflow(), wf.PositionWorkflowAdded())
    state = wf.reduce_workflow(state, wf.PositionWorkflowEdited(0, "pos-1", "SE"))
    state = wf.reduce_workflow(state, wf.StepAdded(position_index=0))
    state = wf.reduce_workflow(state, wf.StepEdited(1, {"role": "hr"}, position_index=0))

    position = state.config.position_workflows[0]
    assert position.position_id == "pos-1"
    assert [(s.role, s.order) for s in position.workflow] == [("manager", 1), ("hr", 2)]


def test_removing_steps_keeps_remaining_order_values() -> None:
    state = wf.reduce_workflow(_open_workflow(), wf.StepRemoved(0))
    assert [(s.role, s.order) for s in state.config.default_workflow] == [("hr", 2)]


def test_unknown_step_index_is_rejected() -> None:
    with pytest.raises(FormValidationError):
        wf.reduce_workflow(_open_workflow(), wf.StepRemoved(5))


def test_closing_the_editor_forgets_the_policy() -> None:
    state = wf.reduce_workflow(_open_workflow(), wf.WorkflowClosed())
    assert state.policy_id is None


# ---------------------------------------------------------------------------
# Adjustment guard
# ---------------------------------------------------------------------------


def test_deduct_beyond_remaining_is_rejected() -> None:
    preview = [Entitlement(employee_id="E1", leave_type_id="T1", remaining=3)]
    with pytest.raises(FormValidationError, match="balance negative"):
        adjustments.check_adjustment(_adjustment(), preview)


def test_deduct_within_remaining_passes() -> None:
    preview = [Entitlement(employee_id="E1", leave_type_id="T1", remaining=12)]
    adjustments.check_adjustment(_adjustment(), preview)


def test_missing_remaining_counts_as_zero() -> None:
    preview = [Entitlement(employee_id="E1", leave_type_id="T1", remaining=None)]
    with pytest.raises(FormValidationError):
        adjustments.check_adjustment(_adjustment(amount=1), preview)


def test_guard_ignores_unknown_balances_and_other_types() -> None:
    adjustments.check_adjustment(_adjustment(), [])
    preview = [Entitlement(employee_id="E1", leave_type_id="T1", remaining=0)]
    adjustments.check_adjustment(_adjustment(adjustment_type=AdjustmentType.ENCASHMENT), preview)
    adjustments.check_adjustment(_adjustment(adjustment_type=AdjustmentType.ADD), preview)


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"employee_id": " "}, "Please select an employee"),
        ({"reason": ""}, "Leave Type and Reason are required"),
        ({"hr_user_id": ""}, "Leave Type and Reason are required"),
        ({"amount": 0}, "Amount must be a number > 0"),
        ({"amount": None}, "Amount must be a number > 0"),
    ],
)
def test_adjustment_form_checks(overrides: dict[str, object], message: str) -> None:
    with pytest.raises(FormValidationError, match=message):
        adjustments.validate_adjustment_form(_adjustment(**overrides))


def test_nan_deduction_is_rejected() -> None:
    preview = [Entitlement(employee_id="E1", leave_type_id="T1", remaining=3)]
    adjustment = _adjustment().model_copy(update={"amount": float("nan")})
    with pytest.raises(FormValidationError, match="Amount must be a number > 0"):
        adjustments.check_adjustment(adjustment, preview)


def test_form_reset_keeps_employee_and_hr_user() -> None:
    state = adjustments.reduce_adjustments(
        adjustments.AdjustmentsState(form=_adjustment()),
        adjustments.AdjustmentFormReset("E1", "U1"),
    )
    assert state.form == AdjustmentInput(employee_id="E1", hr_user_id="U1")


# ---------------------------------------------------------------------------
# Reset and access control
# ---------------------------------------------------------------------------


def test_reset_payload_drops_reference_date_unless_custom() -> None:
    form = ResetInput(strategy=ResetStrategy.HIRE_DATE, reference_date=date(2025, 1, 1))
    assert reset.build_reset_payload(form, dry_run=True) == ResetInput(strategy=ResetStrategy.HIRE_DATE, dry_run=True)

    custom = ResetInput(strategy=ResetStrategy.CUSTOM, reference_date=date(2025, 7, 1))
    payload = reset.build_reset_payload(custom, dry_run=False)
    assert payload.reference_date == date(2025, 7, 1)
    assert payload.dry_run is False


def test_custom_reset_needs_a_date() -> None:
    with pytest.raises(FormValidationError):
        reset.build_reset_payload(ResetInput(strategy=ResetStrategy.CUSTOM), dry_run=True)


@pytest.mark.parametrize(
    ("backend_role", "app_role"),
    [
        ("HR Admin", AppRole.HR_ADMIN),
        ("HR Manager", AppRole.HR_MANAGER),
        ("department head", AppRole.MANAGER),
        ("Payroll Specialist", AppRole.EMPLOYEE),
        ("", AppRole.EMPLOYEE),
    ],
)
def test_backend_roles_map_to_app_roles(backend_role: str, app_role: AppRole) -> None:
    assert access.to_app_role(backend_role) == app_role


def test_app_roles_map_back_to_system_roles() -> None:
    assert access.to_system_role(AppRole.MANAGER) == SystemRole.DEPARTMENT_HEAD
    assert access.to_system_role(AppRole.EMPLOYEE) == SystemRole.DEPARTMENT_EMPLOYEE


def test_loaded_user_preselects_mapped_role() -> None:
    user = RoleUser(id="u1", role="HR Manager")
    state = access.reduce_access(access.AccessState(), access.UserLoaded(user))
    assert state.new_role == AppRole.HR_MANAGER
