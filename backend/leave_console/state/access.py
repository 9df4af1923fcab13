"""Access control tab: look up a user and change their role."""

from __future__ import annotations

from dataclasses import dataclass

from leave_console.models.enums import AppRole, SystemRole
from leave_console.schemas.access import RoleUser
from leave_console.state.base import StateModel

_TO_APP_ROLE: dict[str, AppRole] = {
    SystemRole.HR_ADMIN: AppRole.HR_ADMIN,
    SystemRole.HR_MANAGER: AppRole.HR_MANAGER,
    SystemRole.DEPARTMENT_HEAD: AppRole.MANAGER,
}

_TO_SYSTEM_ROLE = {
    AppRole.HR_ADMIN: SystemRole.HR_ADMIN,
    AppRole.HR_MANAGER: SystemRole.HR_MANAGER,
    AppRole.MANAGER: SystemRole.DEPARTMENT_HEAD,
    AppRole.EMPLOYEE: SystemRole.DEPARTMENT_EMPLOYEE,
}


def to_app_role(role: str) -> AppRole:
    """Collapse a backend role onto the four roles the tab offers."""
    return _TO_APP_ROLE.get(role, AppRole.EMPLOYEE)


def to_system_role(role: AppRole) -> SystemRole:
    return _TO_SYSTEM_ROLE[role]


class AccessState(StateModel):
    query: str = ""
    user: RoleUser | None = None
    new_role: AppRole = AppRole.EMPLOYEE


@dataclass(frozen=True)
class QueryChanged:
    query: str


@dataclass(frozen=True)
class UserLoaded:
    user: RoleUser | None


@dataclass(frozen=True)
class NewRoleSelected:
    role: AppRole


def reduce_access(state: AccessState, action: object) -> AccessState:
    if isinstance(action, QueryChanged):
        return state.model_copy(update={"query": action.query})
    if isinstance(action, UserLoaded):
        if action.user is None:
            return state.model_copy(update={"user": None})
        return state.model_copy(update={"user": action.user, "new_role": to_app_role(action.user.role)})
    if isinstance(action, NewRoleSelected):
        return state.model_copy(update={"new_role": action.role})
    return state
