from typing import Optional
from sqlmodel import Field, SQLModel
from app.models.base import IDModel, TimestampModel

DEFAULT_ITEM_SIZE = 200.0
TEXT_ITEM_WIDTH = 300.0
TEXT_ITEM_HEIGHT = 100.0


class BoardItem(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'board_items'

    board_id: str = Field(index=True, foreign_key='boards.id')
    photo_id: Optional[str] = Field(default=None, index=True, foreign_key='photos.id')
    text_content: Optional[str] = Field(default=None, max_length=1000)
    position_x: float = 0
    position_y: float = 0
    width: float = DEFAULT_ITEM_SIZE
    height: float = DEFAULT_ITEM_SIZE
    rotation: float = 0
    z_index: int = 0
