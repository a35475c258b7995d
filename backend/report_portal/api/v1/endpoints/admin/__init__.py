"""
Admin API endpoints. All endpoints require the ADMIN level.
"""
from fastapi import APIRouter

from report_portal.api.v1.endpoints.admin import users, dummy

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

admin_router.include_router(users.router, prefix="/users", tags=["Admin Users"])
admin_router.include_router(dummy.router, prefix="/dummy", tags=["Admin Dummy Data"])
