from typing import Annotated, Optional, Union
from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field, field_validator
from app.models.enums import ReportStatus
from app.schemas.photo import PhotoSummary
from app.schemas.user import UserContact, UserSummary


class ReportCreate(BaseModel):
    photo_id: str = Field(validation_alias=AliasChoices('contentId', 'photoId', 'photo_id'))
    reason: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)

    @field_validator('reason')
    @classmethod
    def reason_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('reason must not be blank')
        return value


AdminNotes = Annotated[str, Field(max_length=1000)]


class ReportReview(BaseModel):
    admin_notes: Optional[AdminNotes] = None


# Review bodies come either as {"admin_notes": "..."} or as a bare JSON string.
ReviewBody = Union[ReportReview, AdminNotes, None]


def review_notes(body: ReviewBody) -> Optional[str]:
    if isinstance(body, ReportReview):
        return body.admin_notes
    return body


class ReportOut(BaseModel):
    id: str
    photo_id: str
    reason: str
    description: Optional[str] = None
    status: ReportStatus
    created_at: datetime
    reviewed_at: Optional[datetime] = None
    admin_notes: Optional[str] = None
    reported_by: Optional[UserSummary] = None
    reviewed_by: Optional[UserSummary] = None
    photo: Optional[PhotoSummary] = None


class ReportDetail(ReportOut):
    reported_by: Optional[UserContact] = None
