from typing import Optional
from sqlmodel import Field, SQLModel
from app.models.base import IDModel, TimestampModel


class Board(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'boards'

    title: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    owner_id: str = Field(index=True, foreign_key='users.id')
