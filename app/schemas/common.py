import math
from typing import Generic, TypeVar
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar('T')


class MessageOut(BaseModel):
    message: str


class CreatedOut(BaseModel):
    id: str
    message: str


class Page(BaseModel, Generic[T]):
    """Paged listing envelope, serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    data: list[T]
    total_count: int = Field(alias='totalCount')
    page_size: int = Field(alias='pageSize')
    current_page: int = Field(alias='currentPage')
    total_pages: int = Field(alias='totalPages')

    @classmethod
    def build(cls, items: list, total: int, page: int, page_size: int) -> 'Page':
        return cls(
            data=items,
            total_count=total,
            page_size=page_size,
            current_page=page,
            total_pages=math.ceil(total / page_size) if page_size else 0,
        )
