from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.db.session import get_session
from app.models.user import User
from app.schemas.user import UserOut, UserUpdate
from app.services.auth_service import get_current_user
from app.services.user_service import to_user_out, update_user

router = APIRouter(prefix='/users', tags=['users'])


@router.get('/me', response_model=UserOut)
def me(user: User = Depends(get_current_user)) -> UserOut:
    return to_user_out(user)


@router.patch('/me', response_model=UserOut)
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> UserOut:
    record = update_user(session, user, payload)
    return to_user_out(record)
