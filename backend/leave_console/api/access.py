# ruff: noqa: B008, TC001
from __future__ import annotations

from fastapi import APIRouter, Query
from pydantic import BaseModel

from leave_console.api.deps import ControllerDep, OptionalAuthDep, finish
from leave_console.models.enums import AppRole
from leave_console.schemas.common import WireModel
from leave_console.services.access import resolve_access
from leave_console.state.console import ConsoleState

check_router = APIRouter(prefix="/access", tags=["access"])

roles_router = APIRouter(prefix="/leaves-config/access-control", tags=["access"])


class AccessCheckResponse(BaseModel):
    allowed: bool
    redirect: str | None = None


class RoleSelection(WireModel):
    role: AppRole | None = None


@check_router.get("/check", response_model=AccessCheckResponse)
async def check_access(auth: OptionalAuthDep, path: str = Query()) -> AccessCheckResponse:
    """Whether the caller may open a dashboard route, and where to go otherwise."""
    decision = resolve_access(path, auth)
    return AccessCheckResponse(allowed=decision.allowed, redirect=decision.redirect)


@roles_router.get("/users", response_model=ConsoleState)
async def find_user(controller: ControllerDep, q: str = Query(default="")) -> ConsoleState:
    """Look a user up by id or email."""
    return finish(controller, await controller.find_user(q))


@roles_router.put("/users/role", response_model=ConsoleState)
async def update_user_role(payload: RoleSelection, controller: ControllerDep) -> ConsoleState:
    """Change the loaded user's role."""
    return finish(controller, await controller.update_user_role(payload.role))
