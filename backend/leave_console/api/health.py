import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from leave_console.config import get_settings
from leave_console.exceptions import AppError
from leave_console.services.leaves_api import get_leaves_api

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok", "degraded", "error"]
    version: str
    environment: str
    upstream: Literal["http", "in-memory"]


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Return the health status of the service and its HR backend."""
    settings = get_settings()
    status: Literal["ok", "degraded", "error"] = "ok"

    try:
        await get_leaves_api().list_categories()
    except AppError:
        logger.exception("Health check: HR backend is not reachable")
        status = "degraded"

    return HealthResponse(
        status=status,
        version=settings.app_version,
        environment=settings.environment,
        upstream="http" if settings.leaves_api_url else "in-memory",
    )
