from typing import Iterable, Optional
from loguru import logger
from sqlmodel import Session, select
from app.core.errors import ForbiddenError, NotFoundError
from app.models.board_item import BoardItem
from app.models.favorite_photo import FavoritePhoto
from app.models.photo import Photo
from app.models.report import Report
from app.models.user import User
from app.schemas.photo import PhotoOut, PhotoSummary
from app.services.auth_service import is_admin
from app.services.pagination import paginate
from app.services.storage import LocalFileStorage


def can_view_photo(photo: Photo, user: Optional[User]) -> bool:
    """Public photos are visible to everyone; private ones to the uploader and admins."""
    if not photo.is_private:
        return True
    if user is None:
        return False
    if photo.uploaded_by_id == user.id:
        return True
    return is_admin(user)


def get_photo(session: Session, photo_id: str) -> Optional[Photo]:
    return session.get(Photo, photo_id)


def get_visible_photo(session: Session, photo_id: str, viewer: Optional[User]) -> Photo:
    photo = get_photo(session, photo_id)
    if not photo or not can_view_photo(photo, viewer):
        raise NotFoundError('Photo not found')
    return photo


def upload_photo(
    session: Session,
    storage: LocalFileStorage,
    user: User,
    file_name: Optional[str],
    data: bytes,
    is_private: bool = False,
) -> Photo:
    file_path = storage.save(file_name, data, user.id)
    photo = Photo(
        file_name=file_name or '',
        file_path=file_path,
        file_size_bytes=len(data),
        uploaded_by_id=user.id,
        is_private=is_private,
    )
    session.add(photo)
    try:
        session.commit()
    except Exception:
        session.rollback()
        storage.delete(file_path)
        raise
    session.refresh(photo)
    logger.info('photo.uploaded', photo_id=photo.id, user_id=user.id, private=is_private)
    return photo


def list_user_photos(session: Session, user_id: str) -> list[Photo]:
    statement = (
        select(Photo)
        .where(Photo.uploaded_by_id == user_id)
        .order_by(Photo.created_at.desc())
    )
    return list(session.exec(statement).all())


def list_public_photos(session: Session, page: int, page_size: int) -> tuple[list[Photo], int]:
    statement = (
        select(Photo)
        .where(Photo.is_private.is_(False))
        .order_by(Photo.created_at.desc())
    )
    return paginate(session, statement, page, page_size)


def uploader_names(session: Session, photos: Iterable[Photo]) -> dict[str, str]:
    user_ids = {photo.uploaded_by_id for photo in photos}
    if not user_ids:
        return {}
    users = session.exec(select(User).where(User.id.in_(user_ids))).all()
    return {user.id: user.display_name for user in users}


def purge_photos(session: Session, photo_ids: list[str]) -> list[str]:
    """Stage removal of photos and their dependents; returns their file paths.

    Reports and favorites on the photos are deleted, board items that show
    them are detached. Nothing is committed here.
    """
    if not photo_ids:
        return []
    for report in session.exec(select(Report).where(Report.photo_id.in_(photo_ids))).all():
        session.delete(report)
    for favorite in session.exec(select(FavoritePhoto).where(FavoritePhoto.photo_id.in_(photo_ids))).all():
        session.delete(favorite)
    for item in session.exec(select(BoardItem).where(BoardItem.photo_id.in_(photo_ids))).all():
        item.photo_id = None
        session.add(item)
    session.flush()

    file_paths = []
    for photo in session.exec(select(Photo).where(Photo.id.in_(photo_ids))).all():
        file_paths.append(photo.file_path)
        session.delete(photo)
    return file_paths


def delete_photo(
    session: Session,
    storage: LocalFileStorage,
    photo_id: str,
    user: User,
    as_admin: bool = False,
) -> None:
    photo = get_photo(session, photo_id)
    if not photo:
        raise NotFoundError('Photo not found')
    if photo.uploaded_by_id != user.id and not (as_admin and is_admin(user)):
        raise ForbiddenError('Not allowed')

    file_paths = purge_photos(session, [photo.id])
    session.commit()
    for file_path in file_paths:
        storage.delete(file_path)
    logger.info('photo.deleted', photo_id=photo_id, user_id=user.id, as_admin=as_admin)


def to_photo_summary(photo: Photo) -> PhotoSummary:
    return PhotoSummary(
        id=photo.id,
        file_name=photo.file_name,
        file_path=photo.file_path,
        url=LocalFileStorage.url(photo.file_path),
        is_private=photo.is_private,
    )


def to_photo_out(photo: Photo, uploaded_by: Optional[str] = None) -> PhotoOut:
    return PhotoOut(
        **to_photo_summary(photo).model_dump(),
        file_size_bytes=photo.file_size_bytes,
        uploaded_by_id=photo.uploaded_by_id,
        uploaded_by=uploaded_by,
        created_at=photo.created_at,
    )
