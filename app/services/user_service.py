from datetime import timedelta
from loguru import logger
from sqlalchemy import func
from sqlmodel import Session, select

from app.core.config import settings
from app.core.errors import BadRequestError, NotFoundError
from app.models.base import utc_now
from app.models.board import Board
from app.models.favorite_photo import FavoritePhoto
from app.models.photo import Photo
from app.models.refresh_token import RefreshToken
from app.models.report import Report
from app.models.user import User
from app.schemas.user import UserAdminOut, UserDetailOut, UserOut, UserUpdate
from app.services.board_service import purge_boards
from app.services.pagination import paginate
from app.services.photo_service import purge_photos
from app.services.storage import LocalFileStorage


def to_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        username=user.username,
        full_name=user.full_name,
        bio=user.bio,
        is_active=user.is_active,
        role=user.role,
    )


def to_user_admin_out(user: User) -> UserAdminOut:
    return UserAdminOut(
        **to_user_out(user).model_dump(),
        is_locked=user.is_locked,
        lockout_end=user.lockout_end,
        created_at=user.created_at,
    )


def update_user(session: Session, user: User, payload: UserUpdate) -> User:
    data = payload.model_dump(exclude_unset=True)
    email = data.pop('email', None)
    if email is not None and email != user.email:
        existing = session.exec(select(User).where(User.email == email)).first()
        if existing and existing.id != user.id:
            raise BadRequestError('Email already registered')
        user.email = email
    username = data.pop('username', None)
    if username is not None and username != user.username:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing and existing.id != user.id:
            raise BadRequestError('Username already taken')
        user.username = username
    for key, value in data.items():
        setattr(user, key, value)

    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def get_user(session: Session, user_id: str) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFoundError('User not found')
    return user


def list_users(session: Session, page: int = 1, page_size: int = 10) -> tuple[list[User], int]:
    statement = select(User).order_by(User.created_at.asc())
    return paginate(session, statement, page, page_size)


def get_user_detail(session: Session, user_id: str) -> UserDetailOut:
    user = get_user(session, user_id)
    boards_count = session.exec(
        select(func.count()).select_from(Board).where(Board.owner_id == user.id)
    ).one()
    photos_count = session.exec(
        select(func.count()).select_from(Photo).where(Photo.uploaded_by_id == user.id)
    ).one()
    return UserDetailOut(
        **to_user_admin_out(user).model_dump(),
        boards_count=int(boards_count or 0),
        photos_count=int(photos_count or 0),
    )


def _ensure_not_self(user: User, acting_admin: User, action: str) -> None:
    if user.id == acting_admin.id:
        raise BadRequestError(f"Cannot {action} yourself")


def lock_user(session: Session, user_id: str, acting_admin: User) -> User:
    user = get_user(session, user_id)
    _ensure_not_self(user, acting_admin, 'lock')
    user.lockout_end = utc_now() + timedelta(days=365 * settings.LOCKOUT_YEARS)
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info('user.locked', user_id=user.id, admin_id=acting_admin.id)
    return user


def unlock_user(session: Session, user_id: str, acting_admin: User) -> User:
    user = get_user(session, user_id)
    user.lockout_end = None
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info('user.unlocked', user_id=user.id, admin_id=acting_admin.id)
    return user


def delete_user(
    session: Session,
    storage: LocalFileStorage,
    user_id: str,
    acting_admin: User,
) -> None:
    """Delete an account and everything it owns, dependents before owners.

    Ids are collected up front; boards (with their items) go first, then
    photos (with reports, favorites and board references on them), then the
    user's own reports, favorites and tokens. Reports the user reviewed keep
    their outcome and lose the reviewer. Backing files are removed only after
    the database commit succeeds.
    """
    user = get_user(session, user_id)
    _ensure_not_self(user, acting_admin, 'delete')

    board_ids = list(session.exec(select(Board.id).where(Board.owner_id == user.id)).all())
    photo_ids = list(session.exec(select(Photo.id).where(Photo.uploaded_by_id == user.id)).all())

    purge_boards(session, board_ids)
    file_paths = purge_photos(session, photo_ids)

    for report in session.exec(select(Report).where(Report.reported_by_id == user.id)).all():
        session.delete(report)
    for report in session.exec(select(Report).where(Report.reviewed_by_id == user.id)).all():
        report.reviewed_by_id = None
        session.add(report)
    for favorite in session.exec(select(FavoritePhoto).where(FavoritePhoto.user_id == user.id)).all():
        session.delete(favorite)
    for token in session.exec(select(RefreshToken).where(RefreshToken.user_id == user.id)).all():
        session.delete(token)
    session.flush()

    session.delete(user)
    session.commit()

    for file_path in file_paths:
        storage.delete(file_path)
    logger.info(
        'user.deleted',
        user_id=user_id,
        admin_id=acting_admin.id,
        boards=len(board_ids),
        photos=len(photo_ids),
    )
