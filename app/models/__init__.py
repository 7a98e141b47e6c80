from app.models.base import CreatedAtModel, IDModel, TimestampModel
from app.models.user import User
from app.models.refresh_token import RefreshToken
from app.models.photo import Photo
from app.models.board import Board
from app.models.board_item import BoardItem
from app.models.favorite_photo import FavoritePhoto
from app.models.report import Report

__all__ = [
    'IDModel',
    'CreatedAtModel',
    'TimestampModel',
    'User',
    'RefreshToken',
    'Photo',
    'Board',
    'BoardItem',
    'FavoritePhoto',
    'Report',
]
