"""
Own-profile endpoints for any approved user.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from report_portal.core.database import get_db
from report_portal.models.user import User
from report_portal.modules.auth.dependencies import get_current_user
from report_portal.schemas.user import ProfileUpdate, UserResponse
from report_portal.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)


@router.patch("/me", response_model=UserResponse)
async def update_profile(
    update: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Change your display name and phone number"""
    user = await UserService(db).update_profile(current_user, update.name, update.phone)
    return UserResponse.model_validate(user)
