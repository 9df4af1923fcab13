# ruff: noqa: TC003
"""The leaves configuration console.

One :class:`LeavesConfigController` exists per HR admin. It owns that admin's
:class:`~leave_console.state.console.ConsoleState`, runs each action against
the upstream leaves service and reports the outcome in the state's banner.

Every action follows the same sequence: validate the input, set ``loading``
and clear the banner, make the upstream call, then store either a success
message (re-fetching whatever the mutation touched) or the error message.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date
from typing import Any, TypeVar

from fastapi import status
from pydantic import ValidationError

from leave_console.exceptions import (
    ActionInProgressError,
    AppError,
    FormValidationError,
    error_message,
)
from leave_console.models.enums import AdjustmentType, AppRole, ConfigTab
from leave_console.schemas.access import RoleUpdate
from leave_console.schemas.accrual import AccrualRunInput, CarryForwardInput, CarryForwardOverride, ResetInput
from leave_console.schemas.adjustment import AdjustmentInput
from leave_console.schemas.calendar import BlockedPeriod, BlockedPeriodInput, HolidayInput, LeaveCalendar
from leave_console.schemas.category import CategoryInput
from leave_console.schemas.employee import EmployeeOption
from leave_console.schemas.entitlement import EntitlementAssignment, EntitlementForm, parse_employee_ids
from leave_console.schemas.leave_type import Eligibility, LeaveTypeInput, SpecialAbsenceConfig
from leave_console.schemas.policy import ApprovalWorkflow, PolicyInput
from leave_console.services.employee import EmployeeDirectory, filter_employees
from leave_console.services.leaves_api import LeavesApi
from leave_console.state import access, accruals, adjustments, calendar, catalog, eligibility, entitlements, reset
from leave_console.state import workflow as wf
from leave_console.state.console import (
    ConsoleState,
    EmployeesLoaded,
    ErrorRaised,
    LoadingChanged,
    MessagesCleared,
    SuccessReported,
    TabSelected,
    reduce_console,
)

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]
T = TypeVar("T")

_EMPLOYEE_TABS = (ConfigTab.ENTITLEMENTS, ConfigTab.MANUAL_ADJUSTMENT, ConfigTab.ACCRUALS)


def refuse_all(prompt: str) -> bool:
    """Confirmation callback that declines every prompt."""
    return False


@dataclass
class ActionResult:
    """Outcome of one console action."""

    ok: bool
    message: str | None = None
    status_code: int = status.HTTP_200_OK
    cancelled: bool = False


class LeavesConfigController:
    """Per-admin leaves configuration console."""

    def __init__(
        self,
        api: LeavesApi,
        directory: EmployeeDirectory,
        *,
        actor_id: str,
        confirm: ConfirmFn = refuse_all,
    ) -> None:
        self._api = api
        self._directory = directory
        self.actor_id = actor_id
        self._confirm = confirm
        self.opened = False
        self.state = ConsoleState(
            adjustments=adjustments.AdjustmentsState(form=AdjustmentInput(hr_user_id=actor_id)),
        )

    # ------------------------------------------------------------------
    # State plumbing
    # ------------------------------------------------------------------

    def _apply(self, action: object) -> None:
        self.state = reduce_console(self.state, action)

    def _update(self, slot: str, reducer: Callable[[Any, object], Any], action: object) -> None:
        self.state = self.state.model_copy(update={slot: reducer(getattr(self.state, slot), action)})

    def _ensure_idle(self) -> None:
        if self.state.loading:
            logger.warning("Refused action for %s: another action is in progress", self.actor_id)
            raise ActionInProgressError

    def _confirmed(self, prompt: str, confirm: ConfirmFn | None) -> bool:
        self._ensure_idle()
        accepted = (confirm or self._confirm)(prompt)
        if not accepted:
            logger.info("Cancelled at confirmation: %s", prompt)
        return accepted

    async def _perform(self, fallback: str, call: Callable[[], Awaitable[str | None]]) -> ActionResult:
        """Run one action with the loading flag set and report its outcome."""
        self._ensure_idle()
        self._apply(LoadingChanged(loading=True))
        self._apply(MessagesCleared())
        try:
            message = await call()
        except AppError as exc:
            text = error_message(exc, fallback)
            if isinstance(exc, FormValidationError):
                logger.info("Rejected: %s", text)
            else:
                logger.warning("%s: %s", fallback, text)
            self._apply(ErrorRaised(text))
            return ActionResult(ok=False, message=text, status_code=exc.status_code)
        finally:
            self._apply(LoadingChanged(loading=False))
        if message:
            logger.info("%s (actor=%s)", message, self.actor_id)
            self._apply(SuccessReported(message))
        return ActionResult(ok=True, message=message)

    async def _load(self, what: str, call: Callable[[], Awaitable[T]], default: T) -> T:
        """Background fetch: failures are logged and replaced by ``default``."""
        try:
            return await call()
        except AppError as exc:
            logger.warning("Could not load %s: %s", what, error_message(exc, "unknown error"))
            return default

    # ------------------------------------------------------------------
    # Navigation and tab effects
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """Initial load: categories and leave types."""
        await self.fetch_categories()
        await self.fetch_types()
        self.opened = True
        await self._run_tab_effects()

    async def select_tab(self, tab: ConfigTab) -> None:
        self._apply(TabSelected(tab))
        await self._run_tab_effects()

    async def select_year(self, year: int) -> None:
        self._update("calendar", calendar.reduce_calendar, calendar.YearSelected(year))
        if self.state.active_tab == ConfigTab.CALENDAR:
            await self.fetch_calendar()

    async def _run_tab_effects(self) -> None:
        tab = self.state.active_tab
        if tab == ConfigTab.POLICIES:
            await self.fetch_policies()
        elif tab == ConfigTab.CALENDAR:
            await self.fetch_calendar()
        elif tab == ConfigTab.ELIGIBILITY and self.state.eligibility.selected_type_id:
            await self.fetch_eligibility_for_type(self.state.eligibility.selected_type_id)

        if tab in _EMPLOYEE_TABS and not self.state.employees:
            await self.fetch_employees()

        if tab == ConfigTab.MANUAL_ADJUSTMENT:
            selected = self.state.adjustments.selected_employee_id
            if selected:
                await self._refresh_preview(selected)
            else:
                self._update(
                    "adjustments", adjustments.reduce_adjustments, adjustments.PreviewLoaded(None, [])
                )

    # ------------------------------------------------------------------
    # Fetchers
    # ------------------------------------------------------------------

    async def fetch_categories(self) -> None:
        items = await self._load("categories", self._api.list_categories, [])
        self._update("categories", catalog.reduce_crud, catalog.ItemsLoaded(items))

    async def fetch_types(self) -> None:
        items = await self._load("leave types", self._api.list_types, [])
        self._update("types", catalog.reduce_special_absence, catalog.ItemsLoaded(items))

    async def fetch_policies(self) -> None:
        items = await self._load("policies", self._api.list_policies, [])
        self._update("policies", catalog.reduce_crud, catalog.ItemsLoaded(items))

    async def fetch_calendar(self) -> None:
        year = self.state.calendar.year
        loaded = await self._load(f"calendar {year}", lambda: self._api.get_calendar(year), LeaveCalendar())
        self._update("calendar", calendar.reduce_calendar, calendar.CalendarLoaded(loaded))

    async def fetch_eligibility_for_type(self, type_id: str) -> None:
        """Replace the eligibility form with what the backend stores; keep edits on failure."""
        if not type_id:
            return
        try:
            leave_type = await self._api.get_type(type_id)
        except AppError as exc:
            logger.warning("Could not load eligibility of %s: %s", type_id, error_message(exc, "unknown error"))
            return
        self._update(
            "eligibility",
            eligibility.reduce_eligibility,
            eligibility.EligibilityLoaded(eligibility.stored_eligibility(leave_type)),
        )

    async def fetch_employees(self) -> None:
        employees = await self._load("employees", self._directory.list_employees, [])
        self._apply(EmployeesLoaded(employees))

    def employee_options(self, search: str = "") -> list[EmployeeOption]:
        return filter_employees(self.state.employees, search)

    async def _refresh_preview(self, employee_id: str) -> None:
        employee_id = employee_id.strip()
        preview = []
        if employee_id:
            preview = await self._load("balance preview", lambda: self._api.get_entitlements(employee_id), [])
        self._update(
            "adjustments",
            adjustments.reduce_adjustments,
            adjustments.PreviewLoaded(employee_id or None, preview),
        )

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def start_edit_category(self, category_id: str) -> None:
        category = next((c for c in self.state.categories.items if c.id == category_id), None)
        if category is None:
            raise FormValidationError("Unknown category")
        self._update(
            "categories", catalog.reduce_crud, catalog.EditStarted(category_id, catalog.category_form(category))
        )

    def cancel_edit(self, slot: str) -> None:
        """Clear the form and editing marker of ``categories``, ``types`` or ``policies``."""
        reducer = catalog.reduce_special_absence if slot == "types" else catalog.reduce_crud
        self._update(slot, reducer, catalog.FormReset())

    async def create_category(self, form: CategoryInput) -> ActionResult:
        self._update("categories", catalog.reduce_crud, catalog.FormChanged(form))

        async def call() -> str:
            if not form.name.strip():
                raise FormValidationError("Category name is required")
            await self._api.create_category(form)
            self._update("categories", catalog.reduce_crud, catalog.FormReset())
            await self.fetch_categories()
            return "Category created"

        return await self._perform("Failed to create category", call)

    async def update_category(self, category_id: str, form: CategoryInput) -> ActionResult:
        self._update("categories", catalog.reduce_crud, catalog.FormChanged(form))

        async def call() -> str:
            await self._api.update_category(category_id, form)
            self._update("categories", catalog.reduce_crud, catalog.FormReset())
            await self.fetch_categories()
            return "Category updated"

        return await self._perform("Failed to update category", call)

    async def delete_category(self, category_id: str, *, confirm: ConfirmFn | None = None) -> ActionResult:
        if not self._confirmed("Delete this category?", confirm):
            return ActionResult(ok=False, cancelled=True)

        async def call() -> str:
            await self._api.delete_category(category_id)
            await self.fetch_categories()
            return "Category deleted"

        return await self._perform("Failed to delete category", call)

    # ------------------------------------------------------------------
    # Leave types and special absence configuration
    # ------------------------------------------------------------------

    def start_edit_type(self, type_id: str) -> None:
        leave_type = next((t for t in self.state.types.items if t.id == type_id), None)
        if leave_type is None:
            raise FormValidationError("Unknown leave type")
        self._update(
            "types", catalog.reduce_special_absence, catalog.EditStarted(type_id, catalog.type_form(leave_type))
        )

    async def create_type(self, form: LeaveTypeInput) -> ActionResult:
        self._update("types", catalog.reduce_special_absence, catalog.FormChanged(form))

        async def call() -> str:
            if not form.code.strip() or not form.name.strip() or not form.category_id:
                raise FormValidationError("Code, name, and category are required")
            await self._api.create_type(form)
            self._update("types", catalog.reduce_special_absence, catalog.FormReset())
            await self.fetch_types()
            return "Leave type created"

        return await self._perform("Failed to create leave type", call)

    async def update_type(self, type_id: str, form: LeaveTypeInput) -> ActionResult:
        self._update("types", catalog.reduce_special_absence, catalog.FormChanged(form))

        async def call() -> str:
            await self._api.update_type(type_id, form)
            self._update("types", catalog.reduce_special_absence, catalog.FormReset())
            await self.fetch_types()
            return "Leave type updated"

        return await self._perform("Failed to update leave type", call)

    async def delete_type(self, type_id: str, *, confirm: ConfirmFn | None = None) -> ActionResult:
        if not self._confirmed("Delete this leave type?", confirm):
            return ActionResult(ok=False, cancelled=True)

        async def call() -> str:
            await self._api.delete_type(type_id)
            await self.fetch_types()
            return "Leave type deleted"

        return await self._perform("Failed to delete leave type", call)

    async def open_special_absence(self, type_id: str) -> ActionResult:
        async def call() -> None:
            config = await self._api.get_special_absence(type_id)
            self._update(
                "types",
                catalog.reduce_special_absence,
                catalog.SpecialAbsenceOpened(type_id, config or SpecialAbsenceConfig()),
            )

        return await self._perform("Failed to load special absence configuration", call)

    async def save_special_absence(self, config: SpecialAbsenceConfig | None = None) -> ActionResult:
        if config is not None:
            self._update("types", catalog.reduce_special_absence, catalog.SpecialAbsenceEdited(config))

        async def call() -> str:
            editor = self.state.types.special_absence
            if editor.type_id is None:
                raise FormValidationError("Open a leave type's special absence settings first")
            await self._api.configure_special_absence(editor.type_id, editor.config)
            self._update("types", catalog.reduce_special_absence, catalog.SpecialAbsenceClosed())
            return "Special absence configuration saved"

        return await self._perform("Failed to save special absence configuration", call)

    def close_special_absence(self) -> None:
        self._update("types", catalog.reduce_special_absence, catalog.SpecialAbsenceClosed())

    # ------------------------------------------------------------------
    # Policies and approval workflows
    # ------------------------------------------------------------------

    def start_edit_policy(self, policy_id: str) -> None:
        policy = next((p for p in self.state.policies.items if p.id == policy_id), None)
        if policy is None:
            raise FormValidationError("Unknown policy")
        self._update("policies", catalog.reduce_crud, catalog.EditStarted(policy_id, catalog.policy_form(policy)))

    async def create_policy(self, form: PolicyInput) -> ActionResult:
        self._update("policies", catalog.reduce_crud, catalog.FormChanged(form))

        async def call() -> str:
            if not form.leave_type_id:
                raise FormValidationError("Leave type is required")
            await self._api.create_policy(form)
            self._update("policies", catalog.reduce_crud, catalog.FormReset())
            await self.fetch_policies()
            return "Policy created"

        return await self._perform("Failed to create policy", call)

    async def update_policy(self, policy_id: str, form: PolicyInput) -> ActionResult:
        self._update("policies", catalog.reduce_crud, catalog.FormChanged(form))

        async def call() -> str:
            await self._api.update_policy(policy_id, form)
            self._update("policies", catalog.reduce_crud, catalog.FormReset())
            await self.fetch_policies()
            return "Policy updated"

        return await self._perform("Failed to update policy", call)

    async def delete_policy(self, policy_id: str, *, confirm: ConfirmFn | None = None) -> ActionResult:
        if not self._confirmed("Delete this policy?", confirm):
            return ActionResult(ok=False, cancelled=True)

        async def call() -> str:
            await self._api.delete_policy(policy_id)
            await self.fetch_policies()
            return "Policy deleted"

        return await self._perform("Failed to delete policy", call)

    async def open_workflow(self, policy_id: str) -> ActionResult:
        async def call() -> None:
            positions = await self._api.list_workflow_positions()
            config = await self._api.get_approval_workflow(policy_id)
            self._update(
                "policies",
                _reduce_policy_workflow,
                wf.WorkflowOpened(policy_id, config or ApprovalWorkflow(), positions),
            )

        return await self._perform("Failed to load workflow configuration", call)

    def edit_workflow(self, action: object) -> None:
        """Apply one step/position edit to the open workflow."""
        if self.state.policies.workflow.policy_id is None:
            raise FormValidationError("Open a policy's approval workflow first")
        try:
            self._update("policies", _reduce_policy_workflow, action)
        except ValidationError as exc:
            msg = f"Invalid workflow step: {exc.error_count()} error(s)"
            raise FormValidationError(msg) from exc

    async def save_workflow(self, config: ApprovalWorkflow | None = None) -> ActionResult:
        policy_id = self.state.policies.workflow.policy_id
        if config is not None and policy_id is not None:
            self._update(
                "policies",
                _reduce_policy_workflow,
                wf.WorkflowOpened(policy_id, config, self.state.policies.workflow.positions),
            )

        async def call() -> str:
            editor = self.state.policies.workflow
            if editor.policy_id is None:
                raise FormValidationError("Open a policy's approval workflow first")
            await self._api.configure_approval_workflow(editor.policy_id, editor.config)
            self._update("policies", _reduce_policy_workflow, wf.WorkflowClosed())
            return "Approval workflow configured"

        return await self._perform("Failed to save workflow configuration", call)

    def close_workflow(self) -> None:
        self._update("policies", _reduce_policy_workflow, wf.WorkflowClosed())

    # ------------------------------------------------------------------
    # Eligibility
    # ------------------------------------------------------------------

    async def select_eligibility_type(self, type_id: str | None) -> None:
        self._update("eligibility", eligibility.reduce_eligibility, eligibility.EligibilityTypeSelected(type_id))
        if type_id:
            await self.fetch_eligibility_for_type(type_id)

    async def set_eligibility(self, type_id: str | None, form: Eligibility) -> ActionResult:
        if type_id is not None:
            self._update(
                "eligibility", eligibility.reduce_eligibility, eligibility.EligibilityTypeSelected(type_id)
            )
        self._update("eligibility", eligibility.reduce_eligibility, eligibility.EligibilityEdited(form))
        selected = self.state.eligibility.selected_type_id

        async def call() -> str:
            if not selected:
                raise FormValidationError("Please select a leave type")
            await self._api.set_eligibility(selected, form)
            await self.fetch_types()
            await self.fetch_eligibility_for_type(selected)
            return "Eligibility saved"

        return await self._perform("Failed to save eligibility", call)

    # ------------------------------------------------------------------
    # Calendar
    # ------------------------------------------------------------------

    async def add_holiday(self, form: HolidayInput) -> ActionResult:
        self._update("calendar", calendar.reduce_calendar, calendar.HolidayFormChanged(form))
        year = self.state.calendar.year

        async def call() -> str:
            if form.date is None:
                raise FormValidationError("Date is required")
            await self._api.add_holiday(year, form.date, form.reason)
            self._update("calendar", calendar.reduce_calendar, calendar.HolidayFormChanged(HolidayInput()))
            await self.fetch_calendar()
            return "Holiday added"

        return await self._perform("Failed to add holiday", call)

    async def remove_holiday(self, day: date, *, confirm: ConfirmFn | None = None) -> ActionResult:
        if not self._confirmed(f"Remove holiday {day.isoformat()}?", confirm):
            return ActionResult(ok=False, cancelled=True)
        year = self.state.calendar.year

        async def call() -> str:
            await self._api.remove_holiday(year, day)
            await self.fetch_calendar()
            return "Holiday removed"

        return await self._perform("Failed to remove holiday", call)

    async def add_blocked_period(self, form: BlockedPeriodInput) -> ActionResult:
        self._update("calendar", calendar.reduce_calendar, calendar.BlockedFormChanged(form))
        year = self.state.calendar.year

        async def call() -> str:
            if form.start is None or form.end is None or not form.reason.strip():
                raise FormValidationError("From date, to date, and reason are required")
            if form.start > form.end:
                raise FormValidationError("From date must not be after to date")
            period = BlockedPeriod(start=form.start, end=form.end, reason=form.reason)
            await self._api.add_blocked_period(year, period)
            self._update("calendar", calendar.reduce_calendar, calendar.BlockedFormChanged(BlockedPeriodInput()))
            await self.fetch_calendar()
            return "Blocked period added"

        return await self._perform("Failed to add blocked period", call)

    async def remove_blocked_period(
        self, start: date, end: date, *, confirm: ConfirmFn | None = None
    ) -> ActionResult:
        if not self._confirmed(f"Remove blocked period {start.isoformat()} -> {end.isoformat()}?", confirm):
            return ActionResult(ok=False, cancelled=True)
        year = self.state.calendar.year

        async def call() -> str:
            await self._api.remove_blocked_period(year, start, end)
            await self.fetch_calendar()
            return "Blocked period removed"

        return await self._perform("Failed to remove blocked period", call)

    # ------------------------------------------------------------------
    # Accruals and carry-forward
    # ------------------------------------------------------------------

    async def run_accrual(self, form: AccrualRunInput) -> ActionResult:
        self._update("accruals", accruals.reduce_accruals, accruals.AccrualFormChanged(form))

        async def call() -> str:
            result = await self._api.run_accrual(form)
            self._update("accruals", accruals.reduce_accruals, accruals.RunCompleted(result))
            return f"Accrual done. Processed: {result.processed}"

        return await self._perform("Failed to run accrual", call)

    async def carry_forward(self, form: CarryForwardInput) -> ActionResult:
        self._update("accruals", accruals.reduce_accruals, accruals.CarryForwardFormChanged(form))

        async def call() -> str:
            result = await self._api.carry_forward(form)
            self._update("accruals", accruals.reduce_accruals, accruals.RunCompleted(result))
            return f"Carry forward done. Processed: {result.processed}"

        return await self._perform("Failed to run carry forward", call)

    async def preview_carry_forward(self, form: CarryForwardInput) -> ActionResult:
        self._update("accruals", accruals.reduce_accruals, accruals.CarryForwardFormChanged(form))

        async def call() -> str:
            entries = await self._api.preview_carry_forward(form)
            self._update("accruals", accruals.reduce_accruals, accruals.CarryForwardPreviewed(entries))
            return f"Carry forward preview ready: {len(entries)} row(s)"

        return await self._perform("Failed to preview carry forward", call)

    async def override_carry_forward(self, form: CarryForwardOverride) -> ActionResult:
        self._update("accruals", accruals.reduce_accruals, accruals.OverrideFormChanged(form))

        async def call() -> str:
            if not form.employee_id or not form.leave_type_id:
                raise FormValidationError("Employee and leave type are required")
            await self._api.override_carry_forward(form)
            self._update("accruals", accruals.reduce_accruals, accruals.OverrideFormChanged(CarryForwardOverride()))
            return "Carry forward override saved"

        return await self._perform("Failed to override carry forward", call)

    async def load_carry_forward_report(
        self,
        employee_id: str | None = None,
        leave_type_id: str | None = None,
        year: int | None = None,
    ) -> ActionResult:
        async def call() -> str:
            entries = await self._api.carry_forward_report(employee_id or None, leave_type_id or None, year)
            self._update("accruals", accruals.reduce_accruals, accruals.ReportLoaded(entries))
            return "Carry forward report loaded"

        return await self._perform("Failed to load carry forward report", call)

    async def recalc_employee(self, employee_id: str | None) -> ActionResult:
        self._update("accruals", accruals.reduce_accruals, accruals.RecalcEmployeeSelected(employee_id))

        async def call() -> str:
            if not employee_id:
                raise FormValidationError("Please select an employee for recalculation")
            await self._api.recalc_employee(employee_id)
            return "Employee recalculation done"

        return await self._perform("Failed to recalculate employee", call)

    # ------------------------------------------------------------------
    # Entitlements
    # ------------------------------------------------------------------

    async def _load_entitlements(self, employee_id: str) -> None:
        try:
            items = await self._api.get_entitlements(employee_id)
        except AppError:
            self._update(
                "entitlements", entitlements.reduce_entitlements, entitlements.EntitlementsLoaded(employee_id, [])
            )
            raise
        self._update(
            "entitlements", entitlements.reduce_entitlements, entitlements.EntitlementsLoaded(employee_id, items)
        )

    async def _load_summary(self, employee_id: str) -> None:
        try:
            summary = await self._api.get_entitlement_summary(employee_id)
        except AppError:
            self._update(
                "entitlements", entitlements.reduce_entitlements, entitlements.SummaryLoaded(employee_id, None)
            )
            raise
        self._update(
            "entitlements", entitlements.reduce_entitlements, entitlements.SummaryLoaded(employee_id, summary)
        )

    async def load_entitlements(self, employee_id: str | None) -> ActionResult:
        async def call() -> str:
            if not employee_id:
                raise FormValidationError("Please select an employee to load entitlements")
            await self._load_entitlements(employee_id)
            return "Entitlements loaded"

        return await self._perform("Failed to load entitlements", call)

    async def load_entitlement_summary(self, employee_id: str | None) -> ActionResult:
        async def call() -> str:
            if not employee_id:
                raise FormValidationError("Please select an employee to load summary")
            await self._load_summary(employee_id)
            return "Entitlement summary loaded"

        return await self._perform("Failed to load entitlement summary", call)

    async def assign_entitlement(self, form: EntitlementForm) -> ActionResult:
        """Assign a yearly entitlement to one employee or a comma/newline separated group."""
        self._update("entitlements", entitlements.reduce_entitlements, entitlements.EntitlementFormChanged(form))
        employee_ids = parse_employee_ids(form.employee_ids)

        async def call() -> str:
            if not employee_ids:
                raise FormValidationError("Please select an employee")
            if not form.leave_type_id or form.yearly_entitlement is None:
                raise FormValidationError("Leave Type and Yearly Entitlement are required")
            if not math.isfinite(form.yearly_entitlement) or form.yearly_entitlement < 0:
                raise FormValidationError("Yearly Entitlement must be a valid number >= 0")
            for employee_id in employee_ids:
                await self._api.assign_entitlement(
                    EntitlementAssignment(
                        employee_id=employee_id,
                        leave_type_id=form.leave_type_id,
                        yearly_entitlement=form.yearly_entitlement,
                    )
                )
            await self._load_entitlements(employee_ids[0])
            await self._load_summary(employee_ids[0])
            if len(employee_ids) == 1:
                return "Entitlement assigned"
            return f"Entitlement assigned to {len(employee_ids)} employees"

        return await self._perform("Failed to assign entitlement", call)

    # ------------------------------------------------------------------
    # Manual adjustments
    # ------------------------------------------------------------------

    async def select_adjustment_employee(self, employee_id: str | None) -> None:
        self._update(
            "adjustments", adjustments.reduce_adjustments, adjustments.AdjustmentEmployeeSelected(employee_id)
        )
        await self._refresh_preview(employee_id or "")

    async def _load_history(self, employee_id: str, leave_type_id: str | None) -> None:
        self._update(
            "adjustments",
            adjustments.reduce_adjustments,
            adjustments.HistoryFilterChanged(employee_id, leave_type_id),
        )
        try:
            records = await self._api.get_adjustment_history(employee_id, leave_type_id or None)
        except AppError:
            self._update("adjustments", adjustments.reduce_adjustments, adjustments.HistoryLoaded([]))
            raise
        self._update("adjustments", adjustments.reduce_adjustments, adjustments.HistoryLoaded(records))

    async def load_adjustment_history(
        self, employee_id: str | None, leave_type_id: str | None = None
    ) -> ActionResult:
        async def call() -> str:
            if not employee_id:
                raise FormValidationError("Please select an employee to load adjustment history")
            await self._load_history(employee_id, leave_type_id)
            return "Adjustment history loaded"

        return await self._perform("Failed to load adjustment history", call)

    async def create_adjustment(self, form: AdjustmentInput) -> ActionResult:
        hr_user_id = (form.hr_user_id or self.actor_id).strip()
        form = form.model_copy(update={"employee_id": form.employee_id.strip(), "hr_user_id": hr_user_id})
        self._update("adjustments", adjustments.reduce_adjustments, adjustments.AdjustmentFormChanged(form))

        async def call() -> str:
            adjustments.validate_adjustment_form(form)
            employee_id = form.employee_id
            if (
                form.adjustment_type == AdjustmentType.DEDUCT
                and self.state.adjustments.preview_employee_id != employee_id
            ):
                await self._refresh_preview(employee_id)
            adjustments.check_adjustment(form, self.state.adjustments.preview)

            await self._api.create_adjustment(form)

            await self._refresh_preview(employee_id)
            self._update(
                "adjustments",
                adjustments.reduce_adjustments,
                adjustments.AdjustmentFormReset(employee_id, hr_user_id),
            )
            leave_type_filter = self.state.adjustments.history_leave_type_id
            try:
                await self._load_history(employee_id, leave_type_filter)
            except AppError as exc:
                logger.warning("Could not refresh adjustment history: %s", error_message(exc, "unknown error"))
            return "Adjustment created"

        return await self._perform("Failed to create adjustment", call)

    # ------------------------------------------------------------------
    # Leave year reset
    # ------------------------------------------------------------------

    async def reset_leave_year(self, form: ResetInput, *, confirm: ConfirmFn | None = None) -> ActionResult:
        """Dry-run the reset, then apply it only if the admin confirms the preview."""
        self._update("reset", reset.reduce_reset, reset.ResetFormChanged(form))
        ask = confirm or self._confirm
        cancelled = False

        async def call() -> str | None:
            nonlocal cancelled
            preview = await self._api.reset_leave_year(reset.build_reset_payload(form, dry_run=True))
            self._update("reset", reset.reduce_reset, reset.ResetPreviewed(preview))
            if not ask(f"Apply Reset Leave Year for {preview.processed} entitlements?"):
                cancelled = True
                return f"Preview processed: {preview.processed}"
            applied = await self._api.reset_leave_year(reset.build_reset_payload(form, dry_run=False))
            self._update("reset", reset.reduce_reset, reset.ResetApplied(applied))
            return f"Applied. Processed: {applied.processed}"

        result = await self._perform("Failed to reset leave year", call)
        result.cancelled = cancelled
        return result

    # ------------------------------------------------------------------
    # Access control
    # ------------------------------------------------------------------

    async def find_user(self, query: str) -> ActionResult:
        query = query.strip()
        self._update("access", access.reduce_access, access.QueryChanged(query))

        async def call() -> str:
            if not query:
                raise FormValidationError("Enter user id or email")
            try:
                user = await self._api.search_user(query)
            except AppError:
                self._update("access", access.reduce_access, access.UserLoaded(None))
                raise
            self._update("access", access.reduce_access, access.UserLoaded(user))
            return "User loaded"

        return await self._perform("Failed to load user", call)

    async def update_user_role(self, role: AppRole | None = None) -> ActionResult:
        if role is not None:
            self._update("access", access.reduce_access, access.NewRoleSelected(role))

        async def call() -> str:
            user = self.state.access.user
            if user is None:
                raise FormValidationError("Load a user first")
            system_role = access.to_system_role(self.state.access.new_role)
            await self._api.update_user_role(user.id, RoleUpdate(role=system_role, actor_id=self.actor_id))
            refreshed = await self._api.search_user(user.id)
            self._update("access", access.reduce_access, access.UserLoaded(refreshed))
            return "Role updated"

        return await self._perform("Failed to update role", call)


def _reduce_policy_workflow(state: catalog.PoliciesState, action: object) -> catalog.PoliciesState:
    return state.model_copy(update={"workflow": wf.reduce_workflow(state.workflow, action)})


