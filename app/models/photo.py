from sqlmodel import Field, SQLModel
from app.models.base import CreatedAtModel, IDModel


class Photo(IDModel, CreatedAtModel, SQLModel, table=True):
    __tablename__ = 'photos'

    file_name: str = Field(max_length=255)
    file_path: str = Field(max_length=500)
    file_size_bytes: int
    uploaded_by_id: str = Field(index=True, foreign_key='users.id')
    # Gates every public listing; moderation approval sets it.
    is_private: bool = Field(default=False, index=True)
