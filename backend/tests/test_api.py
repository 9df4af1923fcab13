"""HTTP tests for the console routes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from leave_console.schemas.access import RoleUser
from leave_console.schemas.entitlement import Entitlement

if TYPE_CHECKING:
    from httpx import AsyncClient

    from leave_console.services.leaves_stub import InMemoryLeavesApi

HR_HEADERS = {"X-User-Id": "U1", "X-Role": "HR Admin"}
EMPLOYEE_HEADERS = {"X-User-Id": "E9", "X-Role": "department employee"}


# ---------------------------------------------------------------------------
# Authentication and role gate
# ---------------------------------------------------------------------------


async def test_console_requires_auth(async_client: AsyncClient) -> None:
    response = await async_client.get("/leaves-config/state")
    assert response.status_code == 401
    assert response.json()["detail"] == "Authentication required"


async def test_console_rejects_other_roles(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    response = await async_client.get("/leaves-config/state", headers=EMPLOYEE_HEADERS)
    assert response.status_code == 403
    assert leaves_api.calls == []


async def test_unknown_role_is_forbidden(async_client: AsyncClient) -> None:
    response = await async_client.get("/leaves-config/state", headers={"X-User-Id": "U1", "X-Role": "Wizard"})
    assert response.status_code == 403


async def test_system_admin_may_open_console(async_client: AsyncClient) -> None:
    headers = {"X-User-Id": "S1", "X-Role": "System Admin"}
    response = await async_client.get("/leaves-config/state", headers=headers)
    assert response.status_code == 200


# ---------------------------------------------------------------------------
# Console state
# ---------------------------------------------------------------------------


async def test_state_is_camel_case_and_loaded(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    leaves_api.seed_category("Statutory")

    response = await async_client.get("/leaves-config/state", headers=HR_HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["activeTab"] == "categories"
    assert data["loading"] is False
    assert [c["name"] for c in data["categories"]["items"]] == ["Statutory"]
    assert data["adjustments"]["form"]["hrUserId"] == "U1"
    assert leaves_api.call_names() == ["list_categories", "list_types"]


async def test_session_is_kept_between_requests(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    await async_client.get("/leaves-config/state", headers=HR_HEADERS)
    await async_client.get("/leaves-config/state", headers=HR_HEADERS)
    assert leaves_api.call_names() == ["list_categories", "list_types"]


async def test_select_tab_runs_tab_fetch(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    response = await async_client.put("/leaves-config/tab", json={"tab": "policies"}, headers=HR_HEADERS)

    assert response.status_code == 200
    assert response.json()["activeTab"] == "policies"
    assert "list_policies" in leaves_api.call_names()


async def test_employee_picker_search(async_client: AsyncClient) -> None:
    response = await async_client.get("/leaves-config/employees", params={"search": "EMP-002"}, headers=HR_HEADERS)

    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == ["E2"]


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


async def test_create_category(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    response = await async_client.post(
        "/leaves-config/categories", json={"name": "Annual", "description": ""}, headers=HR_HEADERS
    )

    assert response.status_code == 200
    data = response.json()
    assert data["banner"] == {"error": None, "success": "Category created"}
    assert [c["name"] for c in data["categories"]["items"]] == ["Annual"]


async def test_blank_category_name_is_422(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    response = await async_client.post("/leaves-config/categories", json={"name": " "}, headers=HR_HEADERS)

    assert response.status_code == 422
    assert response.json()["detail"] == "Category name is required"
    assert "create_category" not in leaves_api.call_names()


async def test_delete_without_confirm_is_409(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    category = leaves_api.seed_category("Annual")

    response = await async_client.delete(f"/leaves-config/categories/{category.id}", headers=HR_HEADERS)

    assert response.status_code == 409
    assert response.json()["error"] == "ConfirmationRequiredError"
    assert "delete_category" not in leaves_api.call_names()


async def test_delete_with_confirm(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    category = leaves_api.seed_category("Annual")

    response = await async_client.delete(
        f"/leaves-config/categories/{category.id}", params={"confirm": "true"}, headers=HR_HEADERS
    )

    assert response.status_code == 200
    assert response.json()["categories"]["items"] == []
    assert category.id not in leaves_api.categories


async def test_upstream_error_keeps_its_status(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    response = await async_client.put(
        "/leaves-config/categories/missing", json={"name": "Annual"}, headers=HR_HEADERS
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Category not found"


async def test_workflow_editing(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    await async_client.post("/leaves-config/policies", json={"leaveTypeId": "T1"}, headers=HR_HEADERS)
    policy_id = next(iter(leaves_api.policies))

    await async_client.post(f"/leaves-config/policies/{policy_id}/workflow", headers=HR_HEADERS)
    response = await async_client.patch("/leaves-config/workflow", json={"op": "add_step"}, headers=HR_HEADERS)
    steps = response.json()["policies"]["workflow"]["config"]["defaultWorkflow"]
    assert [s["order"] for s in steps] == [1, 2, 3]

    response = await async_client.put("/leaves-config/workflow", headers=HR_HEADERS)
    assert response.status_code == 200
    assert len(leaves_api.workflows[policy_id].default_workflow) == 3


async def test_bad_workflow_index_is_422(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    await async_client.post("/leaves-config/policies", json={"leaveTypeId": "T1"}, headers=HR_HEADERS)
    policy_id = next(iter(leaves_api.policies))
    await async_client.post(f"/leaves-config/policies/{policy_id}/workflow", headers=HR_HEADERS)

    response = await async_client.patch(
        "/leaves-config/workflow", json={"op": "remove_step", "stepIndex": 9}, headers=HR_HEADERS
    )
    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Balances
# ---------------------------------------------------------------------------


async def test_negative_deduction_is_rejected(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    leaves_api.seed_entitlement(Entitlement(employee_id="E1", leave_type_id="T1", remaining=3))
    body = {
        "employeeId": "E1",
        "leaveTypeId": "T1",
        "adjustmentType": "deduct",
        "amount": 10,
        "reason": "correction",
    }

    response = await async_client.post("/leaves-config/adjustments", json=body, headers=HR_HEADERS)

    assert response.status_code == 422
    assert response.json()["detail"] == "This deduction would make the balance negative. Reduce amount."
    assert "create_adjustment" not in leaves_api.call_names()


async def test_nan_deduction_is_422(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    leaves_api.seed_entitlement(Entitlement(employee_id="E1", leave_type_id="T1", remaining=3))
    body = {
        "employeeId": "E1",
        "leaveTypeId": "T1",
        "adjustmentType": "deduct",
        "amount": "NaN",
        "reason": "correction",
    }

    response = await async_client.post("/leaves-config/adjustments", json=body, headers=HR_HEADERS)

    assert response.status_code == 422
    assert "create_adjustment" not in leaves_api.call_names()
    assert leaves_api.entitlements[("E1", "T1")].remaining == 3


async def test_nan_entitlement_is_422(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    body = {"employeeIds": "E1", "leaveTypeId": "T1", "yearlyEntitlement": "NaN"}

    response = await async_client.post("/leaves-config/entitlements", json=body, headers=HR_HEADERS)

    assert response.status_code == 422
    assert "assign_entitlement" not in leaves_api.call_names()


async def test_add_adjustment(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    leaves_api.seed_entitlement(Entitlement(employee_id="E1", leave_type_id="T1", remaining=3))
    body = {"employeeId": "E1", "leaveTypeId": "T1", "adjustmentType": "add", "amount": 5, "reason": "correction"}

    response = await async_client.post("/leaves-config/adjustments", json=body, headers=HR_HEADERS)

    assert response.status_code == 200
    adjustments = response.json()["adjustments"]
    assert adjustments["preview"][0]["remaining"] == 8
    assert adjustments["form"]["hrUserId"] == "U1"
    assert len(adjustments["history"]) == 1


async def test_load_entitlements(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    leaves_api.seed_entitlement(Entitlement(employee_id="E1", leave_type_id="T1", remaining=3))

    response = await async_client.get("/leaves-config/entitlements/E1", headers=HR_HEADERS)

    assert response.status_code == 200
    assert response.json()["entitlements"]["employeeId"] == "E1"
    assert len(response.json()["entitlements"]["entitlements"]) == 1


# ---------------------------------------------------------------------------
# Reset and access control
# ---------------------------------------------------------------------------


async def test_reset_without_confirm_returns_preview(
    async_client: AsyncClient, leaves_api: InMemoryLeavesApi
) -> None:
    leaves_api.seed_entitlement(Entitlement(employee_id="E1", leave_type_id="T1", taken=2, remaining=3))

    response = await async_client.post("/leaves-config/reset", json={"strategy": "calendarYear"}, headers=HR_HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["reset"]["preview"]["processed"] == 1
    assert data["reset"]["applied"] is None
    assert leaves_api.entitlements[("E1", "T1")].taken == 2


async def test_reset_with_confirm_applies(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    leaves_api.seed_entitlement(Entitlement(employee_id="E1", leave_type_id="T1", taken=2, remaining=3))

    response = await async_client.post(
        "/leaves-config/reset",
        json={"strategy": "calendarYear"},
        params={"confirm": "true"},
        headers=HR_HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["banner"]["success"] == "Applied. Processed: 1"
    assert leaves_api.entitlements[("E1", "T1")].taken == 0


async def test_role_change(async_client: AsyncClient, leaves_api: InMemoryLeavesApi) -> None:
    leaves_api.seed_user(RoleUser(id="u7", email="omar@example.com", role="department employee"))

    response = await async_client.get(
        "/leaves-config/access-control/users", params={"q": "omar@example.com"}, headers=HR_HEADERS
    )
    assert response.json()["access"]["newRole"] == "EMPLOYEE"

    response = await async_client.put(
        "/leaves-config/access-control/users/role", json={"role": "HR_MANAGER"}, headers=HR_HEADERS
    )
    assert response.status_code == 200
    assert leaves_api.users["u7"].role == "HR Manager"


async def test_access_check(async_client: AsyncClient) -> None:
    allowed = await async_client.get("/access/check", params={"path": "/dashboard/hr-admin"}, headers=HR_HEADERS)
    assert allowed.json() == {"allowed": True, "redirect": None}

    denied = await async_client.get(
        "/access/check", params={"path": "/dashboard/hr-admin/leaves"}, headers=EMPLOYEE_HEADERS
    )
    assert denied.json() == {"allowed": False, "redirect": "/dashboard/department-employee"}

    anonymous = await async_client.get("/access/check", params={"path": "/dashboard/hr-admin"})
    assert anonymous.json() == {"allowed": False, "redirect": "/login"}
