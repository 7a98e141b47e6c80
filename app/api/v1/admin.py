from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from app.db.session import get_session
from app.models.user import User
from app.schemas.common import Page
from app.schemas.user import UserAdminOut, UserDetailOut
from app.services.auth_service import require_admin
from app.services.photo_service import delete_photo
from app.services.storage import LocalFileStorage, get_storage
from app.services.user_service import (
    delete_user,
    get_user_detail,
    list_users,
    lock_user,
    to_user_admin_out,
    unlock_user,
)

router = APIRouter(prefix='/admin', tags=['admin'])


@router.get('/users', response_model=Page[UserAdminOut])
def list_users_endpoint(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, gt=0, le=100),
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
) -> Page[UserAdminOut]:
    users, total = list_users(session, page=page, page_size=page_size)
    items = [to_user_admin_out(user) for user in users]
    return Page[UserAdminOut].build(items, total, page, page_size)


@router.get('/users/{user_id}', response_model=UserDetailOut)
def get_user_endpoint(
    user_id: str,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
) -> UserDetailOut:
    return get_user_detail(session, user_id)


@router.post('/users/{user_id}/lock', response_model=UserAdminOut)
def lock_user_endpoint(
    user_id: str,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> UserAdminOut:
    return to_user_admin_out(lock_user(session, user_id, admin))


@router.post('/users/{user_id}/unlock', response_model=UserAdminOut)
def unlock_user_endpoint(
    user_id: str,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> UserAdminOut:
    return to_user_admin_out(unlock_user(session, user_id, admin))


@router.delete('/users/{user_id}')
def delete_user_endpoint(
    user_id: str,
    session: Session = Depends(get_session),
    storage: LocalFileStorage = Depends(get_storage),
    admin: User = Depends(require_admin),
) -> dict:
    delete_user(session, storage, user_id, admin)
    return {'status': 'ok'}


@router.delete('/photos/{photo_id}')
def delete_photo_endpoint(
    photo_id: str,
    session: Session = Depends(get_session),
    storage: LocalFileStorage = Depends(get_storage),
    admin: User = Depends(require_admin),
) -> dict:
    delete_photo(session, storage, photo_id, admin, as_admin=True)
    return {'status': 'ok'}
