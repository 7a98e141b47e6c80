from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from app.db.session import get_session
from app.schemas.auth import LoginRequest, RegisterRequest, RefreshRequest, TokenResponse, LogoutRequest
from app.schemas.user import UserOut
from app.services.auth_service import (
    authenticate_user,
    issue_tokens,
    register_user,
    revoke_refresh_token,
    validate_refresh_token,
)
from app.services.user_service import to_user_out

router = APIRouter(prefix='/auth', tags=['auth'])


@router.post('/register', response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, session: Session = Depends(get_session)) -> UserOut:
    user = register_user(
        session,
        payload.email,
        payload.password,
        username=payload.username,
        full_name=payload.full_name,
    )
    return to_user_out(user)


@router.post('/login', response_model=TokenResponse)
def login(payload: LoginRequest, session: Session = Depends(get_session)) -> TokenResponse:
    user = authenticate_user(session, payload.email, payload.password)
    access_token, refresh_token = issue_tokens(session, user.id)
    return TokenResponse(access_token=access_token, refresh_token=refresh_token)


@router.post('/refresh', response_model=TokenResponse)
def refresh(payload: RefreshRequest, session: Session = Depends(get_session)) -> TokenResponse:
    user_id = validate_refresh_token(session, payload.refresh_token)
    revoke_refresh_token(session, payload.refresh_token)
    access_token, refresh_token = issue_tokens(session, user_id)
    return TokenResponse(access_token=access_token, refresh_token=refresh_token)


@router.post('/logout')
def logout(payload: LogoutRequest, session: Session = Depends(get_session)) -> dict:
    revoke_refresh_token(session, payload.refresh_token)
    return {'status': 'ok'}
