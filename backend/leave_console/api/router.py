from fastapi import APIRouter

from leave_console.api.access import check_router, roles_router
from leave_console.api.accruals import router as accruals_router
from leave_console.api.balances import adjustments_router, entitlements_router
from leave_console.api.calendar import router as calendar_router
from leave_console.api.catalog import router as catalog_router
from leave_console.api.console import router as console_router
from leave_console.api.reset import router as reset_router

api_router = APIRouter()
api_router.include_router(console_router)
api_router.include_router(catalog_router)
api_router.include_router(calendar_router)
api_router.include_router(accruals_router)
api_router.include_router(entitlements_router)
api_router.include_router(adjustments_router)
api_router.include_router(reset_router)
api_router.include_router(roles_router)
api_router.include_router(check_router)
