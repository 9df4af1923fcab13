"""Tests for the dashboard route role gate."""

from __future__ import annotations

import pytest

from leave_console.models.enums import SystemRole
from leave_console.schemas.auth import AuthContext
from leave_console.services.access import (
    CONSOLE_ROUTE,
    LOGIN_ROUTE,
    allowed_roles,
    dashboard_route,
    resolve_access,
)


def _user(role: SystemRole) -> AuthContext:
    return AuthContext(user_id="u1", role=role)


def test_longest_prefix_wins() -> None:
    assert allowed_roles("/dashboard/hr-admin/leaves") == (SystemRole.HR_ADMIN, SystemRole.SYSTEM_ADMIN)


def test_prefix_must_end_at_a_segment() -> None:
    assert allowed_roles("/dashboard/hr-administrators") is None


def test_unlisted_route_is_unrestricted() -> None:
    assert resolve_access("/profile", _user(SystemRole.RECRUITER)).allowed


def test_anonymous_users_go_to_login() -> None:
    decision = resolve_access(CONSOLE_ROUTE, None)
    assert not decision.allowed
    assert decision.redirect == LOGIN_ROUTE


@pytest.mark.parametrize("role", [SystemRole.HR_ADMIN, SystemRole.SYSTEM_ADMIN])
def test_console_roles(role: SystemRole) -> None:
    assert resolve_access(CONSOLE_ROUTE, _user(role)).allowed


@pytest.mark.parametrize(
    ("role", "redirect"),
    [
        (SystemRole.HR_MANAGER, "/dashboard/hr-manager"),
        (SystemRole.PAYROLL_SPECIALIST, "/dashboard/payroll-specialist"),
        (SystemRole.DEPARTMENT_EMPLOYEE, "/dashboard/department-employee"),
    ],
)
def test_denied_roles_return_to_their_dashboard(role: SystemRole, redirect: str) -> None:
    decision = resolve_access(f"{CONSOLE_ROUTE}/leaves", _user(role))
    assert not decision.allowed
    assert decision.redirect == redirect


def test_department_head_sees_employee_dashboard() -> None:
    assert resolve_access("/dashboard/department-employee", _user(SystemRole.DEPARTMENT_HEAD)).allowed
    assert dashboard_route(SystemRole.DEPARTMENT_HEAD) == "/dashboard/department-head"
