"""Tests for the in-memory service stubs, the employee directory and the session store."""

from __future__ import annotations

from datetime import date

import httpx
import pytest

from leave_console.exceptions import UpstreamError, UpstreamUnavailableError
from leave_console.models.enums import AdjustmentType
from leave_console.schemas.adjustment import AdjustmentInput
from leave_console.schemas.calendar import BlockedPeriod
from leave_console.schemas.category import CategoryInput
from leave_console.schemas.employee import EmployeeOption
from leave_console.schemas.entitlement import Entitlement
from leave_console.seed import ALICE_ID, seeded_employee_directory, seeded_leaves_api
from leave_console.services.employee import HttpEmployeeDirectory, InMemoryEmployeeDirectory, filter_employees
from leave_console.services.leaves_api import LeavesApi
from leave_console.services.leaves_stub import InMemoryLeavesApi
from leave_console.services.sessions import ConsoleSessionStore


def _employee(employee_id: str, first: str, last: str, number: str = "") -> EmployeeOption:
    return EmployeeOption.model_validate(
        {"_id": employee_id, "firstName": first, "lastName": last, "employeeNumber": number}
    )


# ---------------------------------------------------------------------------
# InMemoryLeavesApi tests
# ---------------------------------------------------------------------------


def test_stub_satisfies_protocol() -> None:
    assert isinstance(InMemoryLeavesApi(), LeavesApi)


async def test_stub_records_calls() -> None:
    api = InMemoryLeavesApi()
    await api.create_category(CategoryInput(name="Annual"))
    await api.list_categories()
    assert api.call_names() == ["create_category", "list_categories"]


async def test_stub_failure_is_raised_once() -> None:
    api = InMemoryLeavesApi()
    api.failures["list_types"] = UpstreamError("boom", 500)

    with pytest.raises(UpstreamError):
        await api.list_types()
    assert await api.list_types() == []


async def test_stub_missing_item_is_404() -> None:
    api = InMemoryLeavesApi()
    with pytest.raises(UpstreamError) as exc_info:
        await api.delete_policy("missing")
    assert exc_info.value.status_code == 404


async def test_stub_rejects_duplicate_holiday() -> None:
    api = InMemoryLeavesApi()
    await api.add_holiday(2025, date(2025, 5, 1), "Labour day")
    with pytest.raises(UpstreamError) as exc_info:
        await api.add_holiday(2025, date(2025, 5, 1), "Again")
    assert exc_info.value.status_code == 409


async def test_stub_blocked_periods_by_range() -> None:
    api = InMemoryLeavesApi()
    period = BlockedPeriod(start=date(2025, 12, 20), end=date(2025, 12, 31), reason="Closing")
    await api.add_blocked_period(2025, period)
    await api.remove_blocked_period(2025, date(2025, 12, 20), date(2025, 12, 31))
    assert (await api.get_calendar(2025)).blocked_periods == []


async def test_stub_deduction_lowers_remaining() -> None:
    api = InMemoryLeavesApi()
    api.seed_entitlement(Entitlement(employee_id="E1", leave_type_id="T1", remaining=10))
    await api.create_adjustment(
        AdjustmentInput(
            employee_id="E1",
            leave_type_id="T1",
            adjustment_type=AdjustmentType.ENCASHMENT,
            amount=4,
            reason="payout",
            hr_user_id="U1",
        )
    )

    assert api.entitlements[("E1", "T1")].remaining == 6
    history = await api.get_adjustment_history("E1", "T1")
    assert [r.amount for r in history] == [4]


async def test_seeded_backend_has_catalog() -> None:
    api = seeded_leaves_api()
    categories = await api.list_categories()
    types = await api.list_types()

    assert {c.name for c in categories} == {"Statutory", "Special"}
    assert {t.code for t in types} >= {"AL", "SL"}
    assert await api.get_entitlements(ALICE_ID)
    assert api.calls[-1] == ("get_entitlements", ALICE_ID)


# ---------------------------------------------------------------------------
# Employee directory tests
# ---------------------------------------------------------------------------


async def test_employee_directory_list_empty() -> None:
    directory = InMemoryEmployeeDirectory()
    assert await directory.list_employees() == []
    assert directory.list_calls == 1


async def test_seeded_directory_has_employees() -> None:
    employees = await seeded_employee_directory().list_employees()
    assert ALICE_ID in {e.id for e in employees}


def test_filter_employees_by_name_number_and_id() -> None:
    employees = [_employee("E1", "Alice", "Johnson", "EMP-001"), _employee("E2", "Bob", "Smith", "EMP-002")]

    assert filter_employees(employees, "") == employees
    assert [e.id for e in filter_employees(employees, "  SMITH ")] == ["E2"]
    assert [e.id for e in filter_employees(employees, "emp-001")] == ["E1"]
    assert [e.id for e in filter_employees(employees, "e2")] == ["E2"]


async def test_http_directory_unwraps_nested_page() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = {"data": {"data": [{"_id": "E1", "firstName": "Alice", "lastName": "Johnson"}], "total": 1}}
        return httpx.Response(200, json=body)

    client = httpx.AsyncClient(base_url="http://hr.test", transport=httpx.MockTransport(handler))
    employees = await HttpEmployeeDirectory(client, page_size=25).list_employees()

    assert [e.full_name for e in employees] == ["Alice Johnson"]
    assert seen[0].url.path == "/employee-profile/admin/employees"
    assert seen[0].url.params["limit"] == "25"


async def test_http_directory_error_status_text() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    client = httpx.AsyncClient(base_url="http://hr.test", transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamError, match="Request failed with status code 503") as exc_info:
        await HttpEmployeeDirectory(client).list_employees()
    assert exc_info.value.status_code == 503


async def test_http_directory_connection_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(base_url="http://hr.test", transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamUnavailableError):
        await HttpEmployeeDirectory(client).list_employees()


# ---------------------------------------------------------------------------
# ConsoleSessionStore tests
# ---------------------------------------------------------------------------


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_session_store_reuses_controller_per_user() -> None:
    store = ConsoleSessionStore(ttl_seconds=60)
    api, directory = InMemoryLeavesApi(), InMemoryEmployeeDirectory()

    first = store.get_or_create("U1", api, directory)
    assert store.get_or_create("U1", api, directory) is first
    assert store.get_or_create("U2", api, directory) is not first
    assert first.actor_id == "U1"
    assert len(store) == 2


def test_session_store_expires_idle_sessions() -> None:
    clock = _Clock()
    store = ConsoleSessionStore(ttl_seconds=60, clock=clock)
    api, directory = InMemoryLeavesApi(), InMemoryEmployeeDirectory()

    first = store.get_or_create("U1", api, directory)
    clock.now = 30
    assert store.get_or_create("U1", api, directory) is first

    clock.now = 200
    assert store.get_or_create("U1", api, directory) is not first
