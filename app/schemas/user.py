from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from app.models.enums import UserRole


class UserOut(BaseModel):
    id: str
    email: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    bio: Optional[str] = None
    is_active: bool
    role: UserRole


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    username: Optional[str] = Field(default=None, min_length=3, max_length=64)
    full_name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)


class UserSummary(BaseModel):
    id: str
    username: str


class UserContact(UserSummary):
    email: str


class UserAdminOut(UserOut):
    is_locked: bool
    lockout_end: Optional[datetime] = None
    created_at: datetime


class UserDetailOut(UserAdminOut):
    boards_count: int
    photos_count: int
