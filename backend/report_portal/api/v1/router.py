from fastapi import APIRouter
from report_portal.api.v1.endpoints import health, reports, aggregation, posts, users
from report_portal.api.v1.endpoints.admin import admin_router

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(reports.router)
api_router.include_router(aggregation.router)
api_router.include_router(posts.router)
api_router.include_router(users.router)
api_router.include_router(admin_router)
