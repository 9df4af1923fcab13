# ruff: noqa: TC003
"""Client for the leaves endpoints of the upstream HR backend."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx

from leave_console.exceptions import UnexpectedResponseError, UpstreamError, UpstreamUnavailableError, status_text
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
from leave_console.schemas.common import dump_payload, parse_item, parse_list
from leave_console.schemas.entitlement import Entitlement, EntitlementAssignment, EntitlementSummary
from leave_console.schemas.leave_type import Eligibility, LeaveType, LeaveTypeInput, SpecialAbsenceConfig
from leave_console.schemas.policy import ApprovalWorkflow, LeavePolicy, PolicyInput, Position

if TYPE_CHECKING:
    from leave_console.config import Settings

logger = logging.getLogger(__name__)


@runtime_checkable
class LeavesApi(Protocol):
    """Interface of the upstream leaves service used by the console."""

    # Categories
    async def list_categories(self) -> list[LeaveCategory]: ...
    async def create_category(self, payload: CategoryInput) -> None: ...
    async def update_category(self, category_id: str, payload: CategoryInput) -> None: ...
    async def delete_category(self, category_id: str) -> None: ...

    # Types
    async def list_types(self) -> list[LeaveType]: ...
    async def get_type(self, type_id: str) -> LeaveType: ...
    async def create_type(self, payload: LeaveTypeInput) -> None: ...
    async def update_type(self, type_id: str, payload: LeaveTypeInput) -> None: ...
    async def delete_type(self, type_id: str) -> None: ...
    async def set_eligibility(self, type_id: str, eligibility: Eligibility) -> None: ...
    async def get_special_absence(self, type_id: str) -> SpecialAbsenceConfig | None: ...
    async def configure_special_absence(self, type_id: str, config: SpecialAbsenceConfig) -> None: ...

    # Policies
    async def list_policies(self) -> list[LeavePolicy]: ...
    async def create_policy(self, payload: PolicyInput) -> None: ...
    async def update_policy(self, policy_id: str, payload: PolicyInput) -> None: ...
    async def delete_policy(self, policy_id: str) -> None: ...
    async def get_approval_workflow(self, policy_id: str) -> ApprovalWorkflow | None: ...
    async def configure_approval_workflow(self, policy_id: str, workflow: ApprovalWorkflow) -> None: ...
    async def list_workflow_positions(self) -> list[Position]: ...

    # Calendar
    async def get_calendar(self, year: int) -> LeaveCalendar: ...
    async def add_holiday(self, year: int, day: date, reason: str) -> None: ...
    async def remove_holiday(self, year: int, day: date) -> None: ...
    async def add_blocked_period(self, year: int, period: BlockedPeriod) -> None: ...
    async def remove_blocked_period(self, year: int, start: date, end: date) -> None: ...

    # Accruals
    async def run_accrual(self, payload: AccrualRunInput) -> RunResult: ...
    async def carry_forward(self, payload: CarryForwardInput) -> RunResult: ...
    async def preview_carry_forward(self, payload: CarryForwardInput) -> list[CarryForwardReportEntry]: ...
    async def override_carry_forward(self, payload: CarryForwardOverride) -> None: ...
    async def carry_forward_report(
        self,
        employee_id: str | None = None,
        leave_type_id: str | None = None,
        year: int | None = None,
    ) -> list[CarryForwardReportEntry]: ...
    async def recalc_employee(self, employee_id: str) -> None: ...
    async def reset_leave_year(self, payload: ResetInput) -> RunResult: ...

    # Entitlements and adjustments
    async def assign_entitlement(self, payload: EntitlementAssignment) -> None: ...
    async def get_entitlements(self, employee_id: str) -> list[Entitlement]: ...
    async def get_entitlement_summary(self, employee_id: str) -> EntitlementSummary: ...
    async def create_adjustment(self, payload: AdjustmentInput) -> None: ...
    async def get_adjustment_history(
        self, employee_id: str, leave_type_id: str | None = None
    ) -> list[AdjustmentRecord]: ...

    # Access control
    async def search_user(self, query: str) -> RoleUser: ...
    async def update_user_role(self, user_id: str, payload: RoleUpdate) -> None: ...


def _upstream_message(response: httpx.Response) -> str:
    """Pull the backend's ``message`` out of an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return ""
    if not isinstance(body, dict):
        return ""
    message = body.get("message")
    if isinstance(message, list):
        return "; ".join(str(m) for m in message)
    if isinstance(message, str):
        return message
    error = body.get("error")
    return error if isinstance(error, str) else ""


class HttpLeavesApi:
    """httpx-backed implementation talking to the real HR backend."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> HttpLeavesApi:
        headers = {"Content-Type": "application/json"}
        if settings.leaves_api_token:
            headers["Authorization"] = f"Bearer {settings.leaves_api_token}"
        client = httpx.AsyncClient(
            base_url=settings.leaves_api_url or "",
            headers=headers,
            timeout=settings.upstream_timeout_seconds,
        )
        return cls(client)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = await self._client.request(method, path, params=params or None, json=json)
        except httpx.HTTPError as exc:
            logger.warning("Upstream %s %s failed: %s", method, path, exc)
            raise UpstreamUnavailableError(str(exc) or "Network error - is the HR backend running?") from exc

        if response.is_error:
            message = _upstream_message(response) or status_text(response.status_code)
            logger.warning("Upstream %s %s returned %d: %s", method, path, response.status_code, message)
            raise UpstreamError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            body = response.json()
        except ValueError as exc:
            logger.warning("Upstream %s %s returned a non-JSON body", method, path)
            raise UnexpectedResponseError(f"{method} {path} returned a non-JSON body") from exc
        # Some endpoints report failures as ``{"error": "..."}`` with a 2xx status.
        if isinstance(body, dict) and set(body) == {"error"} and isinstance(body["error"], str):
            raise UpstreamError(body["error"], status_code=400)
        return body

    # -- categories ----------------------------------------------------------

    async def list_categories(self) -> list[LeaveCategory]:
        return parse_list(LeaveCategory, await self._request("GET", "/leaves/categories"), "categories")

    async def create_category(self, payload: CategoryInput) -> None:
        await self._request("POST", "/leaves/categories", json=dump_payload(payload))

    async def update_category(self, category_id: str, payload: CategoryInput) -> None:
        await self._request("PUT", f"/leaves/categories/{category_id}", json=dump_payload(payload))

    async def delete_category(self, category_id: str) -> None:
        await self._request("DELETE", f"/leaves/categories/{category_id}")

    # -- types ---------------------------------------------------------------

    async def list_types(self) -> list[LeaveType]:
        return parse_list(LeaveType, await self._request("GET", "/leaves/types"), "leave types")

    async def get_type(self, type_id: str) -> LeaveType:
        return parse_item(LeaveType, await self._request("GET", f"/leaves/types/{type_id}"), "leave type")

    async def create_type(self, payload: LeaveTypeInput) -> None:
        await self._request("POST", "/leaves/types", json=dump_payload(payload))

    async def update_type(self, type_id: str, payload: LeaveTypeInput) -> None:
        await self._request("PUT", f"/leaves/types/{type_id}", json=dump_payload(payload))

    async def delete_type(self, type_id: str) -> None:
        await self._request("DELETE", f"/leaves/types/{type_id}")

    async def set_eligibility(self, type_id: str, eligibility: Eligibility) -> None:
        await self._request("PATCH", f"/leaves/types/{type_id}/eligibility", json=dump_payload(eligibility))

    async def get_special_absence(self, type_id: str) -> SpecialAbsenceConfig | None:
        body = await self._request("GET", f"/leaves/types/{type_id}/special-absence")
        if not body:
            return None
        return parse_item(SpecialAbsenceConfig, body, "special absence configuration")

    async def configure_special_absence(self, type_id: str, config: SpecialAbsenceConfig) -> None:
        await self._request("PUT", f"/leaves/types/{type_id}/special-absence", json=dump_payload(config))

    # -- policies ------------------------------------------------------------

    async def list_policies(self) -> list[LeavePolicy]:
        return parse_list(LeavePolicy, await self._request("GET", "/leaves/policies"), "policies")

    async def create_policy(self, payload: PolicyInput) -> None:
        await self._request("POST", "/leaves/policies", json=dump_payload(payload))

    async def update_policy(self, policy_id: str, payload: PolicyInput) -> None:
        await self._request("PUT", f"/leaves/policies/{policy_id}", json=dump_payload(payload))

    async def delete_policy(self, policy_id: str) -> None:
        await self._request("DELETE", f"/leaves/policies/{policy_id}")

    async def get_approval_workflow(self, policy_id: str) -> ApprovalWorkflow | None:
        body = await self._request("GET", f"/leaves/policies/{policy_id}/approval-workflow")
        if not body:
            return None
        return parse_item(ApprovalWorkflow, body, "approval workflow")

    async def configure_approval_workflow(self, policy_id: str, workflow: ApprovalWorkflow) -> None:
        await self._request("PUT", f"/leaves/policies/{policy_id}/approval-workflow", json=dump_payload(workflow))

    async def list_workflow_positions(self) -> list[Position]:
        return parse_list(Position, await self._request("GET", "/leaves/workflow/positions"), "positions")

    # -- calendar ------------------------------------------------------------

    async def get_calendar(self, year: int) -> LeaveCalendar:
        body = await self._request("GET", f"/leaves/calendar/{year}")
        if not body:
            return LeaveCalendar()
        return parse_item(LeaveCalendar, body, "calendar")

    async def add_holiday(self, year: int, day: date, reason: str) -> None:
        await self._request(
            "POST",
            "/leaves/calendar/holidays",
            json={"year": year, "date": day.isoformat(), "reason": reason},
        )

    async def remove_holiday(self, year: int, day: date) -> None:
        await self._request("DELETE", f"/leaves/calendar/{year}/holidays", json={"date": day.isoformat()})

    async def add_blocked_period(self, year: int, period: BlockedPeriod) -> None:
        await self._request(
            "POST",
            "/leaves/calendar/blocked-periods",
            json={"year": year, **dump_payload(period)},
        )

    async def remove_blocked_period(self, year: int, start: date, end: date) -> None:
        await self._request(
            "DELETE",
            f"/leaves/calendar/{year}/blocked-periods",
            json={"from": start.isoformat(), "to": end.isoformat()},
        )

    # -- accruals ------------------------------------------------------------

    async def run_accrual(self, payload: AccrualRunInput) -> RunResult:
        body = await self._request(
            "POST",
            "/leaves/accruals/run",
            params={"referenceDate": payload.reference_date.isoformat()},
            json={"method": payload.method.value, "roundingRule": payload.rounding_rule.value},
        )
        return parse_item(RunResult, body or {}, "accrual result")

    def _carry_forward_body(self, payload: CarryForwardInput) -> dict[str, Any]:
        body = dump_payload(payload)
        body.pop("referenceDate", None)
        return body

    async def carry_forward(self, payload: CarryForwardInput) -> RunResult:
        body = await self._request(
            "POST",
            "/leaves/accruals/carryforward",
            params={"referenceDate": payload.reference_date.isoformat()},
            json=self._carry_forward_body(payload),
        )
        return parse_item(RunResult, body or {}, "carry-forward result")

    async def preview_carry_forward(self, payload: CarryForwardInput) -> list[CarryForwardReportEntry]:
        body = await self._request(
            "POST",
            "/leaves/accruals/carryforward/preview",
            params={"referenceDate": payload.reference_date.isoformat()},
            json=self._carry_forward_body(payload),
        )
        return parse_list(CarryForwardReportEntry, body, "carry-forward preview")

    async def override_carry_forward(self, payload: CarryForwardOverride) -> None:
        await self._request("POST", "/leaves/accruals/carryforward/override", json=dump_payload(payload))

    async def carry_forward_report(
        self,
        employee_id: str | None = None,
        leave_type_id: str | None = None,
        year: int | None = None,
    ) -> list[CarryForwardReportEntry]:
        body = await self._request(
            "GET",
            "/leaves/accruals/carryforward/report",
            params={"employeeId": employee_id, "leaveTypeId": leave_type_id, "year": year},
        )
        return parse_list(CarryForwardReportEntry, body, "carry-forward report")

    async def recalc_employee(self, employee_id: str) -> None:
        await self._request("GET", f"/leaves/accruals/employee/{employee_id}/recalc")

    async def reset_leave_year(self, payload: ResetInput) -> RunResult:
        body = await self._request("POST", "/leaves/accruals/reset-year", json=dump_payload(payload))
        return parse_item(RunResult, body or {}, "reset result")

    # -- entitlements and adjustments ----------------------------------------

    async def assign_entitlement(self, payload: EntitlementAssignment) -> None:
        await self._request("POST", "/leaves/entitlements/assign", json=dump_payload(payload))

    async def get_entitlements(self, employee_id: str) -> list[Entitlement]:
        body = await self._request("GET", f"/leaves/entitlements/{employee_id}")
        return parse_list(Entitlement, body, "entitlements")

    async def get_entitlement_summary(self, employee_id: str) -> EntitlementSummary:
        body = await self._request("GET", f"/leaves/employees/{employee_id}/entitlement-summary")
        if isinstance(body, list):
            return EntitlementSummary(data=parse_list(Entitlement, body, "entitlements"))
        return parse_item(EntitlementSummary, body, "entitlement summary")

    async def create_adjustment(self, payload: AdjustmentInput) -> None:
        await self._request("POST", "/leaves/adjustments", json=dump_payload(payload))

    async def get_adjustment_history(
        self, employee_id: str, leave_type_id: str | None = None
    ) -> list[AdjustmentRecord]:
        body = await self._request(
            "GET",
            f"/leaves/employees/{employee_id}/adjustment-history",
            params={"leaveTypeId": leave_type_id or None},
        )
        return parse_list(AdjustmentRecord, body, "adjustment history")

    # -- access control ------------------------------------------------------

    async def search_user(self, query: str) -> RoleUser:
        body = await self._request("GET", "/leaves/users/search", params={"q": query})
        return parse_item(RoleUser, body, "user")

    async def update_user_role(self, user_id: str, payload: RoleUpdate) -> None:
        await self._request("PATCH", f"/leaves/users/{user_id}/role", json=dump_payload(payload))


_leaves_api: LeavesApi | None = None


def get_leaves_api() -> LeavesApi:
    """Return the configured leaves client, building it on first use."""
    global _leaves_api
    if _leaves_api is None:
        from leave_console.config import get_settings

        settings = get_settings()
        if settings.leaves_api_url:
            _leaves_api = HttpLeavesApi.from_settings(settings)
        else:
            from leave_console.seed import seeded_leaves_api

            logger.info("No leaves_api_url configured; using the seeded in-memory backend")
            _leaves_api = seeded_leaves_api()
    return _leaves_api


def set_leaves_api(api: LeavesApi | None) -> None:
    """Override the client (for testing or production wiring)."""
    global _leaves_api
    _leaves_api = api


async def close_leaves_api() -> None:
    """Close the HTTP client on shutdown, if one was built."""
    global _leaves_api
    if isinstance(_leaves_api, HttpLeavesApi):
        await _leaves_api.aclose()
    _leaves_api = None
