# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter

from leave_console.api.deps import ConfirmDep, ControllerDep, finish
from leave_console.schemas.accrual import ResetInput
from leave_console.state.console import ConsoleState

router = APIRouter(prefix="/leaves-config/reset", tags=["reset"])


@router.post("", response_model=ConsoleState)
async def reset_leave_year(payload: ResetInput, controller: ControllerDep, confirm: ConfirmDep) -> ConsoleState:
    """Dry-run a leave year reset; with ``confirm=true`` the reset is applied after the preview."""
    return finish(controller, await controller.reset_leave_year(payload, confirm=confirm))
