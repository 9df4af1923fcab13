# ruff: noqa: TC003
"""In-memory stand-in for the upstream leaves service.

Used for local development when no ``leaves_api_url`` is configured and by
the test suite. Every call is appended to :attr:`InMemoryLeavesApi.calls` so
tests can assert which requests the console did (or did not) send.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import UTC, date, datetime
from typing import Any

from leave_console.exceptions import UpstreamError
from leave_console.models.enums import AdjustmentType
from leave_console.schemas.access import RoleUpdate, RoleUser
from leave_console.schemas.accrual import (
    AccrualRunInput,
    CarryForwardInput,
    CarryForwardOverride,
    CarryForwardReportEntry,
    ResetInput,
    RunResult,
)
from leave_console.schemas.adjustment import AdjustmentInput, AdjustmentRecord
from leave_console.schemas.calendar import BlockedPeriod, LeaveCalendar
from leave_console.schemas.category import CategoryInput, LeaveCategory
from leave_console.schemas.entitlement import Entitlement, EntitlementAssignment, EntitlementSummary
from leave_console.schemas.leave_type import Eligibility, LeaveType, LeaveTypeInput, SpecialAbsenceConfig
from leave_console.schemas.policy import ApprovalWorkflow, LeavePolicy, PolicyInput, Position


def _new_id() -> str:
    return uuid.uuid4().hex[:24]


def _not_found(what: str) -> UpstreamError:
    return UpstreamError(f"{what} not found", status_code=404)


class InMemoryLeavesApi:
    """In-memory stub implementation for development and tests."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.categories: dict[str, LeaveCategory] = {}
        self.types: dict[str, LeaveType] = {}
        self.policies: dict[str, LeavePolicy] = {}
        self.special_absence: dict[str, SpecialAbsenceConfig] = {}
        self.workflows: dict[str, ApprovalWorkflow] = {}
        self.positions: list[Position] = []
        self.calendars: dict[int, LeaveCalendar] = {}
        self.entitlements: dict[tuple[str, str], Entitlement] = {}
        self.adjustments: list[AdjustmentRecord] = []
        self.carry_forward_entries: list[CarryForwardReportEntry] = []
        self.users: dict[str, RoleUser] = {}
        self.recalculated: defaultdict[str, int] = defaultdict(int)
        # Errors to raise on the next call of the named method, e.g. {"create_category": UpstreamError(...)}
        self.failures: dict[str, Exception] = {}

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        failure = self.failures.pop(name, None)
        if failure is not None:
            raise failure

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    # -- seeding -------------------------------------------------------------

    def seed_category(self, name: str, description: str | None = None) -> LeaveCategory:
        category = LeaveCategory(id=_new_id(), name=name, description=description)
        self.categories[category.id] = category
        return category

    def seed_type(self, code: str, name: str, category_id: str, **fields: Any) -> LeaveType:
        leave_type = LeaveType(id=_new_id(), code=code, name=name, category_id=category_id, **fields)
        self.types[leave_type.id] = leave_type
        return leave_type

    def seed_entitlement(self, entitlement: Entitlement) -> None:
        self.entitlements[(entitlement.employee_id, entitlement.leave_type_id)] = entitlement

    def seed_user(self, user: RoleUser) -> None:
        self.users[user.id] = user

    # -- categories ----------------------------------------------------------

    async def list_categories(self) -> list[LeaveCategory]:
        self._record("list_categories")
        return list(self.categories.values())

    async def create_category(self, payload: CategoryInput) -> None:
        self._record("create_category", payload)
        self.seed_category(payload.name, payload.description or None)

    async def update_category(self, category_id: str, payload: CategoryInput) -> None:
        self._record("update_category", category_id, payload)
        if category_id not in self.categories:
            raise _not_found("Category")
        self.categories[category_id] = LeaveCategory(
            id=category_id, name=payload.name, description=payload.description or None
        )

    async def delete_category(self, category_id: str) -> None:
        self._record("delete_category", category_id)
        if self.categories.pop(category_id, None) is None:
            raise _not_found("Category")

    # -- types ---------------------------------------------------------------

    async def list_types(self) -> list[LeaveType]:
        self._record("list_types")
        return list(self.types.values())

    async def get_type(self, type_id: str) -> LeaveType:
        self._record("get_type", type_id)
        if type_id not in self.types:
            raise _not_found("Leave type")
        return self.types[type_id]

    async def create_type(self, payload: LeaveTypeInput) -> None:
        self._record("create_type", payload)
        if any(t.code == payload.code for t in self.types.values()):
            raise UpstreamError(f"Leave type with code {payload.code} already exists", status_code=409)
        self.seed_type(**payload.model_dump(exclude={"description"}), description=payload.description or None)

    async def update_type(self, type_id: str, payload: LeaveTypeInput) -> None:
        self._record("update_type", type_id, payload)
        if type_id not in self.types:
            raise _not_found("Leave type")
        self.types[type_id] = self.types[type_id].model_copy(update=payload.model_dump())

    async def delete_type(self, type_id: str) -> None:
        self._record("delete_type", type_id)
        if self.types.pop(type_id, None) is None:
            raise _not_found("Leave type")

    async def set_eligibility(self, type_id: str, eligibility: Eligibility) -> None:
        self._record("set_eligibility", type_id, eligibility)
        if type_id not in self.types:
            raise _not_found("Leave type")
        self.types[type_id] = self.types[type_id].model_copy(
            update={"eligibility": eligibility, "min_tenure_months": eligibility.min_tenure_months}
        )

    async def get_special_absence(self, type_id: str) -> SpecialAbsenceConfig | None:
        self._record("get_special_absence", type_id)
        return self.special_absence.get(type_id)

    async def configure_special_absence(self, type_id: str, config: SpecialAbsenceConfig) -> None:
        self._record("configure_special_absence", type_id, config)
        if type_id not in self.types:
            raise _not_found("Leave type")
        self.special_absence[type_id] = config

    # -- policies ------------------------------------------------------------

    async def list_policies(self) -> list[LeavePolicy]:
        self._record("list_policies")
        return list(self.policies.values())

    async def create_policy(self, payload: PolicyInput) -> None:
        self._record("create_policy", payload)
        policy = LeavePolicy(id=_new_id(), **payload.model_dump())
        self.policies[policy.id] = policy

    async def update_policy(self, policy_id: str, payload: PolicyInput) -> None:
        self._record("update_policy", policy_id, payload)
        if policy_id not in self.policies:
            raise _not_found("Policy")
        self.policies[policy_id] = LeavePolicy(id=policy_id, **payload.model_dump())

    async def delete_policy(self, policy_id: str) -> None:
        self._record("delete_policy", policy_id)
        if self.policies.pop(policy_id, None) is None:
            raise _not_found("Policy")

    async def get_approval_workflow(self, policy_id: str) -> ApprovalWorkflow | None:
        self._record("get_approval_workflow", policy_id)
        return self.workflows.get(policy_id)

    async def configure_approval_workflow(self, policy_id: str, workflow: ApprovalWorkflow) -> None:
        self._record("configure_approval_workflow", policy_id, workflow)
        if policy_id not in self.policies:
            raise _not_found("Policy")
        self.workflows[policy_id] = workflow

    async def list_workflow_positions(self) -> list[Position]:
        self._record("list_workflow_positions")
        return list(self.positions)

    # -- calendar ------------------------------------------------------------

    async def get_calendar(self, year: int) -> LeaveCalendar:
        self._record("get_calendar", year)
        return self.calendars.get(year, LeaveCalendar())

    async def add_holiday(self, year: int, day: date, reason: str) -> None:
        self._record("add_holiday", year, day, reason)
        calendar = self.calendars.get(year, LeaveCalendar())
        if day in calendar.holidays:
            raise UpstreamError(f"Holiday {day.isoformat()} already exists", status_code=409)
        self.calendars[year] = calendar.model_copy(update={"holidays": sorted([*calendar.holidays, day])})

    async def remove_holiday(self, year: int, day: date) -> None:
        self._record("remove_holiday", year, day)
        calendar = self.calendars.get(year, LeaveCalendar())
        self.calendars[year] = calendar.model_copy(
            update={"holidays": [h for h in calendar.holidays if h != day]}
        )

    async def add_blocked_period(self, year: int, period: BlockedPeriod) -> None:
        self._record("add_blocked_period", year, period)
        calendar = self.calendars.get(year, LeaveCalendar())
        self.calendars[year] = calendar.model_copy(
            update={"blocked_periods": [*calendar.blocked_periods, period]}
        )

    async def remove_blocked_period(self, year: int, start: date, end: date) -> None:
        self._record("remove_blocked_period", year, start, end)
        calendar = self.calendars.get(year, LeaveCalendar())
        remaining = [p for p in calendar.blocked_periods if (p.start, p.end) != (start, end)]
        self.calendars[year] = calendar.model_copy(update={"blocked_periods": remaining})

    # -- accruals ------------------------------------------------------------

    async def run_accrual(self, payload: AccrualRunInput) -> RunResult:
        self._record("run_accrual", payload)
        return RunResult(processed=len(self.entitlements))

    async def carry_forward(self, payload: CarryForwardInput) -> RunResult:
        self._record("carry_forward", payload)
        return RunResult(processed=len(self.entitlements))

    async def preview_carry_forward(self, payload: CarryForwardInput) -> list[CarryForwardReportEntry]:
        self._record("preview_carry_forward", payload)
        preview = []
        for entitlement in self.entitlements.values():
            days = entitlement.remaining or 0
            if payload.cap_days is not None:
                days = min(days, payload.cap_days)
            preview.append(
                CarryForwardReportEntry(
                    employee_id=entitlement.employee_id,
                    leave_type_id=entitlement.leave_type_id,
                    carry_forward=days,
                )
            )
        return preview

    async def override_carry_forward(self, payload: CarryForwardOverride) -> None:
        self._record("override_carry_forward", payload)
        self.carry_forward_entries.append(
            CarryForwardReportEntry(
                employee_id=payload.employee_id,
                leave_type_id=payload.leave_type_id,
                carry_forward=payload.carry_forward_days,
            )
        )

    async def carry_forward_report(
        self,
        employee_id: str | None = None,
        leave_type_id: str | None = None,
        year: int | None = None,
    ) -> list[CarryForwardReportEntry]:
        self._record("carry_forward_report", employee_id, leave_type_id, year)
        return [
            e
            for e in self.carry_forward_entries
            if (employee_id is None or e.employee_id == employee_id)
            and (leave_type_id is None or e.leave_type_id == leave_type_id)
        ]

    async def recalc_employee(self, employee_id: str) -> None:
        self._record("recalc_employee", employee_id)
        self.recalculated[employee_id] += 1

    async def reset_leave_year(self, payload: ResetInput) -> RunResult:
        self._record("reset_leave_year", payload)
        processed = len(self.entitlements)
        if not payload.dry_run:
            for key, entitlement in self.entitlements.items():
                self.entitlements[key] = entitlement.model_copy(
                    update={"taken": 0, "pending": 0, "remaining": entitlement.yearly_entitlement}
                )
        return RunResult(processed=processed)

    # -- entitlements and adjustments ----------------------------------------

    async def assign_entitlement(self, payload: EntitlementAssignment) -> None:
        self._record("assign_entitlement", payload)
        key = (payload.employee_id, payload.leave_type_id)
        current = self.entitlements.get(key)
        used = (current.taken + current.pending) if current else 0
        self.entitlements[key] = Entitlement(
            employee_id=payload.employee_id,
            leave_type_id=payload.leave_type_id,
            yearly_entitlement=payload.yearly_entitlement,
            taken=current.taken if current else 0,
            pending=current.pending if current else 0,
            remaining=payload.yearly_entitlement - used,
        )

    async def get_entitlements(self, employee_id: str) -> list[Entitlement]:
        self._record("get_entitlements", employee_id)
        return [e for e in self.entitlements.values() if e.employee_id == employee_id]

    async def get_entitlement_summary(self, employee_id: str) -> EntitlementSummary:
        self._record("get_entitlement_summary", employee_id)
        items = [e for e in self.entitlements.values() if e.employee_id == employee_id]
        return EntitlementSummary(
            summary={
                "totalEntitlement": sum(e.yearly_entitlement for e in items),
                "totalTaken": sum(e.taken for e in items),
                "totalRemaining": sum(e.remaining or 0 for e in items),
            },
            data=items,
        )

    async def create_adjustment(self, payload: AdjustmentInput) -> None:
        self._record("create_adjustment", payload)
        amount = payload.amount or 0
        key = (payload.employee_id, payload.leave_type_id)
        current = self.entitlements.get(key) or Entitlement(
            employee_id=payload.employee_id, leave_type_id=payload.leave_type_id, remaining=0
        )
        delta = amount if payload.adjustment_type == AdjustmentType.ADD else -amount
        self.entitlements[key] = current.model_copy(update={"remaining": (current.remaining or 0) + delta})
        self.adjustments.append(
            AdjustmentRecord(
                id=_new_id(),
                employee_id=payload.employee_id,
                leave_type_id=payload.leave_type_id,
                adjustment_type=payload.adjustment_type,
                amount=amount,
                reason=payload.reason,
                applied_at=datetime.now(UTC),
            )
        )

    async def get_adjustment_history(
        self, employee_id: str, leave_type_id: str | None = None
    ) -> list[AdjustmentRecord]:
        self._record("get_adjustment_history", employee_id, leave_type_id)
        return [
            a
            for a in self.adjustments
            if a.employee_id == employee_id and (leave_type_id is None or a.leave_type_id == leave_type_id)
        ]

    # -- access control ------------------------------------------------------

    async def search_user(self, query: str) -> RoleUser:
        self._record("search_user", query)
        for user in self.users.values():
            if query in (user.id, user.email):
                return user
        raise _not_found("User")

    async def update_user_role(self, user_id: str, payload: RoleUpdate) -> None:
        self._record("update_user_role", user_id, payload)
        if user_id not in self.users:
            raise _not_found("User")
        self.users[user_id] = self.users[user_id].model_copy(update={"role": payload.role})
