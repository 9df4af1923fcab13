from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx

from leave_console.exceptions import UnexpectedResponseError, UpstreamError, UpstreamUnavailableError, status_text
from leave_console.schemas.common import parse_list
from leave_console.schemas.employee import EmployeeOption

if TYPE_CHECKING:
    from leave_console.config import Settings

logger = logging.getLogger(__name__)


@runtime_checkable
class EmployeeDirectory(Protocol):
    """Interface for the employee profile service."""

    async def list_employees(self) -> list[EmployeeOption]:
        """List employees selectable in the console pickers."""
        ...


def _unwrap_employees(body: Any) -> Any:
    # The admin listing nests the page under ``data.data``.
    if isinstance(body, dict) and isinstance(body.get("data"), dict):
        return body["data"].get("data", [])
    return body


class HttpEmployeeDirectory:
    """Reads employees from ``/employee-profile/admin/employees``."""

    def __init__(self, client: httpx.AsyncClient, page_size: int = 100) -> None:
        self._client = client
        self._page_size = page_size

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_employees(self) -> list[EmployeeOption]:
        params = {"page": 1, "limit": self._page_size}
        try:
            response = await self._client.get("/employee-profile/admin/employees", params=params)
        except httpx.HTTPError as exc:
            logger.warning("Employee listing failed: %s", exc)
            raise UpstreamUnavailableError(str(exc) or "Employee service unreachable") from exc
        if response.is_error:
            raise UpstreamError(status_text(response.status_code), status_code=response.status_code)
        try:
            body = response.json()
        except ValueError as exc:
            raise UnexpectedResponseError("Employee listing was not JSON") from exc
        return parse_list(EmployeeOption, _unwrap_employees(body), "employees")


class InMemoryEmployeeDirectory:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._employees: dict[str, EmployeeOption] = {}
        self.list_calls = 0

    def seed(self, employee: EmployeeOption) -> None:
        """Seed an employee for testing."""
        self._employees[employee.id] = employee

    async def list_employees(self) -> list[EmployeeOption]:
        self.list_calls += 1
        return list(self._employees.values())


def filter_employees(employees: list[EmployeeOption], search: str) -> list[EmployeeOption]:
    """Case-insensitive picker filter; an empty search keeps everything."""
    search = search.strip()
    if not search:
        return list(employees)
    return [e for e in employees if e.matches(search)]


_employee_directory: EmployeeDirectory | None = None


def get_employee_directory() -> EmployeeDirectory:
    """Return the configured employee directory, building it on first use."""
    global _employee_directory
    if _employee_directory is None:
        from leave_console.config import get_settings

        settings = get_settings()
        if settings.leaves_api_url:
            _employee_directory = HttpEmployeeDirectory(
                _build_client(settings), page_size=settings.employee_page_size
            )
        else:
            from leave_console.seed import seeded_employee_directory

            _employee_directory = seeded_employee_directory()
    return _employee_directory


def _build_client(settings: Settings) -> httpx.AsyncClient:
    headers = {}
    if settings.leaves_api_token:
        headers["Authorization"] = f"Bearer {settings.leaves_api_token}"
    return httpx.AsyncClient(
        base_url=settings.leaves_api_url or "",
        headers=headers,
        timeout=settings.upstream_timeout_seconds,
    )


def set_employee_directory(directory: EmployeeDirectory | None) -> None:
    """Override the directory (for testing or production wiring)."""
    global _employee_directory
    _employee_directory = directory


async def close_employee_directory() -> None:
    """Close the HTTP client on shutdown, if one was built."""
    global _employee_directory
    if isinstance(_employee_directory, HttpEmployeeDirectory):
        await _employee_directory.aclose()
    _employee_directory = None
