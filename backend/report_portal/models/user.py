from sqlalchemy import Column, String, Boolean, DateTime, Integer
from datetime import datetime
import enum

from report_portal.core.database import Base
from report_portal.core.types import generate_uuid


class UserLevel(int, enum.Enum):
    """Access levels - higher values include more privileges"""
    MEMBER = 1      # team member
    LEADER = 2      # responsible manager
    REPORTER = 3    # report compiler
    ADMIN = 4       # administrator


class UserStatus(str, enum.Enum):
    APPROVED = "approved"
    PENDING = "pending"
    WITHDRAWN = "withdrawn"


class User(Base):
    """Portal account (authentication itself lives with the identity provider)"""
    __tablename__ = "users"

    id = Column(String(128), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)

    # Organization
    department = Column(String(100), nullable=False, default="")
    team_id = Column(String(100), index=True, nullable=False, default="")

    level = Column(Integer, default=UserLevel.MEMBER.value, nullable=False)
    status = Column(String(20), default=UserStatus.PENDING.value, nullable=False)

    is_dummy = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def user_level(self) -> UserLevel:
        return UserLevel(self.level)

    @property
    def is_admin(self) -> bool:
        return self.level == UserLevel.ADMIN.value

    @property
    def can_aggregate(self) -> bool:
        return UserLevel.LEADER.value <= self.level < UserLevel.ADMIN.value

    def __repr__(self):
        return f"<User {self.email} lv{self.level}>"
