from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class FavoritePhotoOut(BaseModel):
    id: str
    file_name: str
    file_path: str
    url: str
    created_at: datetime
    uploaded_by: Optional[str] = None


class FavoriteOut(BaseModel):
    id: str
    photo_id: str
    favorited_at: datetime
    photo: FavoritePhotoOut


class FavoriteCheck(BaseModel):
    is_favorited: bool
