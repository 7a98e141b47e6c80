import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from app.models.base import CreatedAtModel, IDModel


class FavoritePhoto(IDModel, CreatedAtModel, SQLModel, table=True):
    __tablename__ = 'favorite_photos'
    __table_args__ = (sa.UniqueConstraint('user_id', 'photo_id'),)

    user_id: str = Field(index=True, foreign_key='users.id')
    photo_id: str = Field(index=True, foreign_key='photos.id')
