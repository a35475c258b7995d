"""User administration backed by SQLAlchemy"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.sql import Select
from typing import Optional
import re

from report_portal.core.exceptions import UserNotFoundError, ValidationError
from report_portal.core.logging_config import logger
from report_portal.models.user import User, UserStatus


_NON_DIGIT = re.compile(r"\D")


def format_phone(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a mobile number to 010-1234-5678 (or 011-123-4567).

    Returns None when the digits cannot form a mobile number.
    """
    digits = _NON_DIGIT.sub("", raw or "")
    if not digits.startswith("01"):
        return None
    if len(digits) == 11:
        return f"{digits[:3]}-{digits[3:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
    return None


class UserService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: str) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def list_users_query(self, search: Optional[str] = None) -> Select:
        """
        Select statement for the admin user list (feed to ``paginate``).

        Search is a case-insensitive substring on name, email or team.
        """
        query = select(User)
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                User.name.ilike(pattern),
                User.email.ilike(pattern),
                User.team_id.ilike(pattern),
            ))
        return query.order_by(User.created_at.desc(), User.name)

    async def update_status(self, user_id: str, status: UserStatus) -> User:
        user = await self.get_user(user_id)
        user.status = UserStatus(status).value
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(f"[UserService] {user.email} status -> {user.status}")
        return user

    async def delete_user(self, user_id: str, actor: User) -> None:
        if user_id == actor.id:
            raise ValidationError("You cannot delete your own account.", field="user_id")
        user = await self.get_user(user_id)
        email = user.email
        await self.db.delete(user)
        await self.db.commit()
        logger.info(f"[UserService] Deleted user {email}")

    async def update_profile(self, actor: User, name: str, phone: str) -> User:
        """Self-service edit of the caller's own name and phone number"""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Enter your name.", field="name")
        formatted = format_phone(phone)
        if formatted is None:
            raise ValidationError("Enter a valid mobile phone number.", field="phone")

        actor.name = name
        actor.phone = formatted
        await self.db.commit()
        await self.db.refresh(actor)
        logger.info(f"[UserService] {actor.email} updated their profile")
        return actor
