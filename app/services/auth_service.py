from typing import Optional
from datetime import datetime, timedelta
from uuid import uuid4
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session, select
from app.core.config import settings
from app.core.errors import BadRequestError, ForbiddenError, UnauthorizedError
from app.db.session import get_session
from app.models.base import ensure_utc, utc_now
from app.models.user import User
from app.models.enums import UserRole
from app.models.refresh_token import RefreshToken

pwd_context = CryptContext(schemes=['bcrypt'], deprecated='auto')
security = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return pwd_context.verify(password, hashed_password)


def _create_token(subject: str, token_type: str, expires_delta: timedelta) -> str:
    now = utc_now()
    payload = {
        'sub': subject,
        'type': token_type,
        'iat': now,
        'exp': now + expires_delta,
        'jti': uuid4().hex,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _decode_token(token: str, expected_type: str) -> str:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        raise UnauthorizedError('Invalid token') from exc
    if payload.get('type') != expected_type:
        raise UnauthorizedError('Invalid token type')
    subject = payload.get('sub')
    if not subject:
        raise UnauthorizedError('Invalid token')
    return subject


def create_access_token(user_id: str) -> str:
    return _create_token(
        user_id,
        'access',
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user_id: str) -> tuple[str, datetime]:
    now = utc_now()
    expires = now + timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES)
    token = _create_token(user_id, 'refresh', expires - now)
    return token, expires


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email)).first()


def get_user_by_username(session: Session, username: str) -> Optional[User]:
    return session.exec(select(User).where(User.username == username)).first()


def create_user(
    session: Session,
    email: str,
    password: str,
    username: Optional[str] = None,
    full_name: Optional[str] = None,
    role: UserRole = UserRole.USER,
) -> User:
    user = User(
        email=email,
        username=username,
        full_name=full_name,
        hashed_password=hash_password(password),
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def register_user(
    session: Session,
    email: str,
    password: str,
    username: Optional[str] = None,
    full_name: Optional[str] = None,
) -> User:
    if get_user_by_email(session, email):
        raise BadRequestError('Email already registered')
    if username and get_user_by_username(session, username):
        raise BadRequestError('Username already taken')
    return create_user(session, email, password, username=username, full_name=full_name)


def authenticate_user(session: Session, email: str, password: str) -> User:
    user = get_user_by_email(session, email)
    if not user:
        raise UnauthorizedError('Account not found')
    if not verify_password(password, user.hashed_password):
        raise UnauthorizedError('Incorrect password')
    ensure_can_sign_in(user)
    return user


def ensure_can_sign_in(user: User) -> None:
    if not user.is_active:
        raise ForbiddenError('Account disabled')
    if user.is_locked:
        raise ForbiddenError('Account locked')


def store_refresh_token(session: Session, token: str, user_id: str, expires_at: datetime) -> None:
    session.add(RefreshToken(token=token, user_id=user_id, expires_at=expires_at))
    session.commit()


def issue_tokens(session: Session, user_id: str) -> tuple[str, str]:
    access_token = create_access_token(user_id)
    refresh_token, expires_at = create_refresh_token(user_id)
    store_refresh_token(session, refresh_token, user_id, expires_at)
    return access_token, refresh_token


def revoke_refresh_token(session: Session, token: str) -> None:
    record = session.exec(select(RefreshToken).where(RefreshToken.token == token)).first()
    if record:
        session.delete(record)
        session.commit()


def validate_refresh_token(session: Session, token: str) -> str:
    user_id = _decode_token(token, 'refresh')

    record = session.exec(select(RefreshToken).where(RefreshToken.token == token)).first()
    if not record:
        raise UnauthorizedError('Refresh token revoked')
    if ensure_utc(record.expires_at) < utc_now():
        session.delete(record)
        session.commit()
        raise UnauthorizedError('Refresh token expired')

    user = session.get(User, user_id)
    if not user:
        raise UnauthorizedError('User not found')
    ensure_can_sign_in(user)
    return user_id


def _user_from_credentials(
    session: Session,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> User:
    if credentials is None:
        raise UnauthorizedError()
    user_id = _decode_token(credentials.credentials, 'access')
    user = session.get(User, user_id)
    if not user:
        raise UnauthorizedError('User not found')
    ensure_can_sign_in(user)
    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: Session = Depends(get_session),
) -> User:
    return _user_from_credentials(session, credentials)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: Session = Depends(get_session),
) -> Optional[User]:
    if credentials is None:
        return None
    return _user_from_credentials(session, credentials)


def is_admin(user: Optional[User]) -> bool:
    return user is not None and user.role == UserRole.ADMIN


def ensure_admin(user: Optional[User]) -> None:
    if not is_admin(user):
        raise ForbiddenError('Admin only')


def require_admin(user: User = Depends(get_current_user)) -> User:
    ensure_admin(user)
    return user
