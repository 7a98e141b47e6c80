from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime
from sqlalchemy.dialects.mysql import DATETIME as MySQLDateTime
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


UTC_DATETIME = DateTime(timezone=True).with_variant(MySQLDateTime(fsp=6), "mysql")


class IDModel(SQLModel):
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True, index=True)


class CreatedAtModel(SQLModel):
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=UTC_DATETIME,
        sa_column_kwargs={"nullable": False},
    )


class TimestampModel(CreatedAtModel):
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=UTC_DATETIME,
        sa_column_kwargs={"nullable": False, "onupdate": utc_now},
    )
