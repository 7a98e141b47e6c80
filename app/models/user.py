from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel
from app.models.base import UTC_DATETIME, IDModel, TimestampModel, ensure_utc, utc_now
from app.models.enums import UserRole, enum_column


class User(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'users'

    email: str = Field(index=True, unique=True, max_length=255)
    username: Optional[str] = Field(default=None, index=True, unique=True, max_length=64)
    hashed_password: str
    full_name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True
    role: UserRole = Field(default=UserRole.USER, sa_column=enum_column(UserRole, 'user_role'))
    lockout_end: Optional[datetime] = Field(default=None, sa_type=UTC_DATETIME)

    @property
    def display_name(self) -> str:
        return self.username or self.email

    @property
    def is_locked(self) -> bool:
        if self.lockout_end is None:
            return False
        return ensure_utc(self.lockout_end) > utc_now()
