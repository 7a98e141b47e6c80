from typing import Optional
from sqlmodel import Session, select
from app.core.errors import BadRequestError, NotFoundError
from app.models.favorite_photo import FavoritePhoto
from app.models.photo import Photo
from app.models.user import User
from app.services.photo_service import can_view_photo, get_visible_photo


def get_favorite(session: Session, user_id: str, photo_id: str) -> Optional[FavoritePhoto]:
    statement = select(FavoritePhoto).where(
        (FavoritePhoto.user_id == user_id) & (FavoritePhoto.photo_id == photo_id)
    )
    return session.exec(statement).first()


def add_favorite(session: Session, user: User, photo_id: str) -> FavoritePhoto:
    get_visible_photo(session, photo_id, user)
    if get_favorite(session, user.id, photo_id):
        raise BadRequestError('Already favorited')
    record = FavoritePhoto(user_id=user.id, photo_id=photo_id)
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def remove_favorite(session: Session, user: User, photo_id: str) -> None:
    record = get_favorite(session, user.id, photo_id)
    if not record:
        raise NotFoundError('Favorite not found')
    session.delete(record)
    session.commit()


def list_favorites(session: Session, user: User) -> list[tuple[FavoritePhoto, Photo, User]]:
    """Favorites of ``user``, newest first, minus photos they can no longer see."""
    statement = (
        select(FavoritePhoto, Photo, User)
        .join(Photo, FavoritePhoto.photo_id == Photo.id)
        .join(User, Photo.uploaded_by_id == User.id)
        .where(FavoritePhoto.user_id == user.id)
        .order_by(FavoritePhoto.created_at.desc())
    )
    return [row for row in session.exec(statement).all() if can_view_photo(row[1], user)]


def is_favorited(session: Session, user_id: str, photo_id: str) -> bool:
    return get_favorite(session, user_id, photo_id) is not None
