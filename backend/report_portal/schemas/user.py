from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime

from report_portal.models.user import UserStatus


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    phone: Optional[str] = None
    department: str
    team_id: str
    level: int
    status: str
    is_dummy: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UsersResponse(BaseModel):
    items: List[UserResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


class UserStatusUpdate(BaseModel):
    status: UserStatus


class DummyUsersRequest(BaseModel):
    department: str
    team_id: str
    level: int = Field(1, ge=1, le=4)
    count: int = Field(5, ge=1, le=50)


class DummyReportsRequest(BaseModel):
    user_ids: List[str] = Field(..., min_length=1)
    count_per_user: int = Field(3, ge=1, le=20)


class DummyResult(BaseModel):
    created: List[str] = []
    deleted: int = 0
    log: List[str] = []


class ProfileUpdate(BaseModel):
    name: str
    phone: str
