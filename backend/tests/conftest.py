from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from leave_console.main import app
from leave_console.schemas.employee import EmployeeOption
from leave_console.services.console import LeavesConfigController
from leave_console.services.employee import InMemoryEmployeeDirectory, set_employee_directory
from leave_console.services.leaves_api import set_leaves_api
from leave_console.services.leaves_stub import InMemoryLeavesApi
from leave_console.services.sessions import ConsoleSessionStore, set_session_store

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

HR_ADMIN_ID = "U1"


@pytest.fixture
def leaves_api() -> InMemoryLeavesApi:
    """Empty in-memory leaves backend that records every call."""
    return InMemoryLeavesApi()


@pytest.fixture
def directory() -> InMemoryEmployeeDirectory:
    employees = InMemoryEmployeeDirectory()
    employees.seed(EmployeeOption.model_validate({"_id": "E1", "firstName": "Alice", "lastName": "Johnson"}))
    employees.seed(
        EmployeeOption.model_validate(
            {"_id": "E2", "firstName": "Bob", "lastName": "Smith", "employeeNumber": "EMP-002"}
        )
    )
    return employees


@pytest.fixture
def controller(leaves_api: InMemoryLeavesApi, directory: InMemoryEmployeeDirectory) -> LeavesConfigController:
    """Console controller of HR admin U1; confirmations are declined unless a test says otherwise."""
    return LeavesConfigController(leaves_api, directory, actor_id=HR_ADMIN_ID)


@pytest.fixture
async def async_client(
    leaves_api: InMemoryLeavesApi,
    directory: InMemoryEmployeeDirectory,
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the in-memory backends with a fresh session store."""
    set_leaves_api(leaves_api)
    set_employee_directory(directory)
    set_session_store(ConsoleSessionStore(ttl_seconds=3600))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    set_leaves_api(None)
    set_employee_directory(None)
    set_session_store(None)
