"""
Admin User Management endpoints.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from report_portal.core.config import settings
from report_portal.core.database import get_db
from report_portal.models.user import User
from report_portal.modules.auth.dependencies import get_current_admin
from report_portal.schemas.user import UserResponse, UsersResponse, UserStatusUpdate
from report_portal.services.user_service import UserService
from report_portal.utils.pagination import paginate

router = APIRouter()


@router.get("", response_model=UsersResponse)
async def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """List users, searchable by name, email or team"""
    query = UserService(db).list_users_query(search)
    result = await paginate(db, query, page, page_size)
    result["items"] = [UserResponse.model_validate(u) for u in result["items"]]
    return result


@router.patch("/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: str,
    update: UserStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Approve, hold or withdraw an account"""
    user = await UserService(db).update_status(user_id, update.status)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    await UserService(db).delete_user(user_id, current_admin)
    return {"success": True, "user_id": user_id}
