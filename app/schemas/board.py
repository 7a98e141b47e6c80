from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field
from app.models.board_item import DEFAULT_ITEM_SIZE
from app.schemas.photo import PhotoSummary


class BoardCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)


class BoardUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)


class BoardOut(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    owner_id: str
    owner: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PhotoItemCreate(BaseModel):
    photo_id: str
    pos_x: float = Field(default=0, ge=0)
    pos_y: float = Field(default=0, ge=0)
    width: float = Field(default=DEFAULT_ITEM_SIZE, ge=10, le=2000)
    height: float = Field(default=DEFAULT_ITEM_SIZE, ge=10, le=2000)


class TextItemCreate(BaseModel):
    text: str = Field(min_length=1, max_length=1000)
    pos_x: float = Field(default=0, ge=0)
    pos_y: float = Field(default=0, ge=0)


class ItemUpdate(BaseModel):
    pos_x: float = Field(ge=0)
    pos_y: float = Field(ge=0)
    width: float = Field(ge=10, le=2000)
    height: float = Field(ge=10, le=2000)
    rotation: float = Field(default=0, ge=-360, le=360)
    z_index: int = Field(default=0, ge=0, le=1000)


class BoardItemOut(BaseModel):
    id: str
    board_id: str
    photo_id: Optional[str] = None
    photo: Optional[PhotoSummary] = None
    text_content: Optional[str] = None
    position_x: float
    position_y: float
    width: float
    height: float
    rotation: float
    z_index: int
    updated_at: datetime


class BoardDetail(BoardOut):
    items: list[BoardItemOut]
