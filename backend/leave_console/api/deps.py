# ruff: noqa: B008, TC003
from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import Depends, Header, Query, status

from leave_console.exceptions import AppError, ConfirmationRequiredError
from leave_console.models.enums import SystemRole
from leave_console.schemas.auth import AuthContext
from leave_console.services.access import CONSOLE_ROUTE, resolve_access
from leave_console.services.console import ActionResult, ConfirmFn, LeavesConfigController
from leave_console.services.employee import EmployeeDirectory, get_employee_directory
from leave_console.services.leaves_api import LeavesApi, get_leaves_api
from leave_console.services.sessions import get_session_store
from leave_console.state.console import ConsoleState


async def get_optional_auth(
    x_user_id: str | None = Header(default=None),
    x_role: str | None = Header(default=None),
) -> AuthContext | None:
    """Extract dev auth context from request headers, if present."""
    if not x_user_id or not x_role:
        return None
    try:
        role = SystemRole(x_role)
    except ValueError:
        raise AppError(f"Unknown role: {x_role}", status_code=status.HTTP_403_FORBIDDEN) from None
    return AuthContext(user_id=x_user_id, role=role)


OptionalAuthDep = Annotated[AuthContext | None, Depends(get_optional_auth)]


async def get_auth_context(auth: OptionalAuthDep) -> AuthContext:
    if auth is None:
        raise AppError("Authentication required", status_code=status.HTTP_401_UNAUTHORIZED)
    return auth


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


def require_route_access(route: str) -> Callable[..., Coroutine[Any, Any, AuthContext]]:
    """Dependency factory gating a router on the role rule of a dashboard ``route``."""

    async def dependency(auth: AuthDep) -> AuthContext:
        decision = resolve_access(route, auth)
        if not decision.allowed:
            raise AppError(
                f"Role {auth.role} may not open {route}; go to {decision.redirect}",
                status_code=status.HTTP_403_FORBIDDEN,
            )
        return auth

    return dependency


ConsoleAuthDep = Annotated[AuthContext, Depends(require_route_access(CONSOLE_ROUTE))]


async def get_controller(
    auth: ConsoleAuthDep,
    api: LeavesApi = Depends(get_leaves_api),
    directory: EmployeeDirectory = Depends(get_employee_directory),
) -> LeavesConfigController:
    """The caller's console session, opened (initial load) on first use."""
    controller = get_session_store().get_or_create(auth.user_id, api, directory)
    if not controller.opened:
        await controller.open()
    return controller


ControllerDep = Annotated[LeavesConfigController, Depends(get_controller)]


def get_confirm(confirm: bool = Query(default=False)) -> ConfirmFn:
    """Confirmation answer for destructive actions, given as ``?confirm=true``."""

    def answer(prompt: str) -> bool:
        return confirm

    return answer


ConfirmDep = Annotated[ConfirmFn, Depends(get_confirm)]


def finish(controller: LeavesConfigController, result: ActionResult) -> ConsoleState:
    """Turn an action outcome into the response: the state, or the error it reported."""
    if result.cancelled and not result.ok:
        raise ConfirmationRequiredError("Confirmation required: repeat the request with confirm=true")
    if not result.ok:
        raise AppError(result.message or "Action failed", status_code=result.status_code)
    return controller.state
