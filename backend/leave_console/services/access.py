"""Route-prefix role gate for the HR dashboards.

This is a convenience for clients: the upstream HR backend still enforces
access on every call it receives.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from leave_console.models.enums import SystemRole
from leave_console.schemas.auth import AuthContext

logger = logging.getLogger(__name__)

LOGIN_ROUTE = "/login"
CONSOLE_ROUTE = "/dashboard/hr-admin"

ROLE_PERMISSIONS: dict[str, tuple[SystemRole, ...]] = {
    "/dashboard/system-admin": (SystemRole.SYSTEM_ADMIN,),
    "/dashboard/hr-admin": (SystemRole.HR_ADMIN, SystemRole.SYSTEM_ADMIN),
    "/dashboard/hr-manager": (SystemRole.HR_MANAGER, SystemRole.HR_ADMIN, SystemRole.SYSTEM_ADMIN),
    "/dashboard/hr-employee": (
        SystemRole.HR_EMPLOYEE,
        SystemRole.HR_MANAGER,
        SystemRole.HR_ADMIN,
        SystemRole.SYSTEM_ADMIN,
    ),
    "/dashboard/payroll-manager": (SystemRole.PAYROLL_MANAGER, SystemRole.SYSTEM_ADMIN),
    "/dashboard/payroll-specialist": (
        SystemRole.PAYROLL_SPECIALIST,
        SystemRole.PAYROLL_MANAGER,
        SystemRole.SYSTEM_ADMIN,
    ),
    "/dashboard/finance-staff": (SystemRole.FINANCE_STAFF, SystemRole.SYSTEM_ADMIN),
    "/dashboard/recruiter": (
        SystemRole.RECRUITER,
        SystemRole.HR_MANAGER,
        SystemRole.HR_ADMIN,
        SystemRole.SYSTEM_ADMIN,
    ),
    "/dashboard/department-head": (SystemRole.DEPARTMENT_HEAD, SystemRole.HR_MANAGER, SystemRole.SYSTEM_ADMIN),
    "/dashboard/legal-policy-admin": (SystemRole.LEGAL_POLICY_ADMIN, SystemRole.SYSTEM_ADMIN),
    "/dashboard/job-candidate": (SystemRole.JOB_CANDIDATE,),
    "/dashboard/department-employee": (
        SystemRole.DEPARTMENT_EMPLOYEE,
        SystemRole.DEPARTMENT_HEAD,
        SystemRole.HR_EMPLOYEE,
        SystemRole.HR_MANAGER,
        SystemRole.HR_ADMIN,
        SystemRole.SYSTEM_ADMIN,
    ),
}

DASHBOARD_ROUTES: dict[SystemRole, str] = {
    SystemRole.SYSTEM_ADMIN: "/dashboard/system-admin",
    SystemRole.HR_ADMIN: "/dashboard/hr-admin",
    SystemRole.HR_MANAGER: "/dashboard/hr-manager",
    SystemRole.HR_EMPLOYEE: "/dashboard/hr-employee",
    SystemRole.PAYROLL_MANAGER: "/dashboard/payroll-manager",
    SystemRole.PAYROLL_SPECIALIST: "/dashboard/payroll-specialist",
    SystemRole.FINANCE_STAFF: "/dashboard/finance-staff",
    SystemRole.RECRUITER: "/dashboard/recruiter",
    SystemRole.DEPARTMENT_HEAD: "/dashboard/department-head",
    SystemRole.LEGAL_POLICY_ADMIN: "/dashboard/legal-policy-admin",
    SystemRole.JOB_CANDIDATE: "/dashboard/job-candidate",
    SystemRole.DEPARTMENT_EMPLOYEE: "/dashboard/department-employee",
}


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    redirect: str | None = None


def dashboard_route(role: SystemRole) -> str:
    return DASHBOARD_ROUTES.get(role, "/dashboard/department-employee")


def allowed_roles(path: str) -> tuple[SystemRole, ...] | None:
    """Roles allowed on ``path``; the longest matching prefix wins. None when unrestricted."""
    matches = [prefix for prefix in ROLE_PERMISSIONS if path == prefix or path.startswith(prefix + "/")]
    if not matches:
        return None
    return ROLE_PERMISSIONS[max(matches, key=len)]


def resolve_access(path: str, user: AuthContext | None) -> AccessDecision:
    """Decide whether ``user`` may open ``path``.

    Unauthenticated users go to the login page; users without the role go
    back to their own dashboard.
    """
    if user is None:
        return AccessDecision(allowed=False, redirect=LOGIN_ROUTE)
    roles = allowed_roles(path)
    if roles is None or user.role in roles:
        return AccessDecision(allowed=True)
    logger.warning("Access denied for role %s on %s", user.role, path)
    return AccessDecision(allowed=False, redirect=dashboard_route(user.role))
