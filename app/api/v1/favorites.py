from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.db.session import get_session
from app.models.user import User
from app.schemas.common import MessageOut
from app.schemas.favorite import FavoriteCheck, FavoriteOut, FavoritePhotoOut
from app.services.auth_service import get_current_user
from app.services.favorite_service import add_favorite, is_favorited, list_favorites, remove_favorite
from app.services.storage import LocalFileStorage

router = APIRouter(prefix='/favorites', tags=['favorites'])


@router.get('', response_model=list[FavoriteOut])
def list_favorites_endpoint(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> list[FavoriteOut]:
    return [
        FavoriteOut(
            id=favorite.id,
            photo_id=favorite.photo_id,
            favorited_at=favorite.created_at,
            photo=FavoritePhotoOut(
                id=photo.id,
                file_name=photo.file_name,
                file_path=photo.file_path,
                url=LocalFileStorage.url(photo.file_path),
                created_at=photo.created_at,
                uploaded_by=uploader.display_name,
            ),
        )
        for favorite, photo, uploader in list_favorites(session, user)
    ]


@router.get('/check/{photo_id}', response_model=FavoriteCheck)
def check_favorite(
    photo_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> FavoriteCheck:
    return FavoriteCheck(is_favorited=is_favorited(session, user.id, photo_id))


@router.post('/{photo_id}', response_model=MessageOut)
def add_favorite_endpoint(
    photo_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> MessageOut:
    add_favorite(session, user, photo_id)
    return MessageOut(message='Added to favorites')


@router.delete('/{photo_id}', response_model=MessageOut)
def remove_favorite_endpoint(
    photo_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> MessageOut:
    remove_favorite(session, user, photo_id)
    return MessageOut(message='Removed from favorites')
