from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel
from app.models.base import UTC_DATETIME, CreatedAtModel, IDModel
from app.models.enums import ReportStatus, enum_column


class Report(IDModel, CreatedAtModel, SQLModel, table=True):
    __tablename__ = 'reports'

    photo_id: str = Field(index=True, foreign_key='photos.id')
    reported_by_id: str = Field(index=True, foreign_key='users.id')
    reviewed_by_id: Optional[str] = Field(default=None, index=True, foreign_key='users.id')
    reason: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    status: ReportStatus = Field(
        default=ReportStatus.PENDING,
        sa_column=enum_column(ReportStatus, 'report_status'),
    )
    reviewed_at: Optional[datetime] = Field(default=None, sa_type=UTC_DATETIME)
    admin_notes: Optional[str] = Field(default=None, max_length=1000)
