from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class PhotoSummary(BaseModel):
    id: str
    file_name: str
    file_path: str
    url: str
    is_private: bool


class PhotoOut(PhotoSummary):
    file_size_bytes: int
    uploaded_by_id: str
    uploaded_by: Optional[str] = None
    created_at: datetime


class PhotoUploadOut(BaseModel):
    id: str
    file_path: str
    url: str
