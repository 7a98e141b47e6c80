from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlmodel import Session
from app.db.session import get_session
from app.models.user import User
from app.schemas.photo import PhotoOut, PhotoUploadOut
from app.services.auth_service import get_current_user, get_optional_user
from app.services.photo_service import (
    delete_photo,
    get_visible_photo,
    list_user_photos,
    to_photo_out,
    upload_photo,
    uploader_names,
)
from app.services.storage import LocalFileStorage, get_storage

router = APIRouter(prefix='/photos', tags=['photos'])


@router.post('/upload', response_model=PhotoUploadOut)
def upload_photo_endpoint(
    file: UploadFile = File(...),
    is_private: bool = Form(False),
    session: Session = Depends(get_session),
    storage: LocalFileStorage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> PhotoUploadOut:
    data = file.file.read()
    photo = upload_photo(session, storage, user, file.filename, data, is_private=is_private)
    return PhotoUploadOut(id=photo.id, file_path=photo.file_path, url=storage.url(photo.file_path))


@router.get('/mine', response_model=list[PhotoOut])
def list_my_photos(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> list[PhotoOut]:
    photos = list_user_photos(session, user.id)
    return [to_photo_out(photo, user.display_name) for photo in photos]


@router.get('/{photo_id}', response_model=PhotoOut)
def get_photo_endpoint(
    photo_id: str,
    session: Session = Depends(get_session),
    viewer: Optional[User] = Depends(get_optional_user),
) -> PhotoOut:
    photo = get_visible_photo(session, photo_id, viewer)
    names = uploader_names(session, [photo])
    return to_photo_out(photo, names.get(photo.uploaded_by_id))


@router.delete('/{photo_id}')
def delete_photo_endpoint(
    photo_id: str,
    session: Session = Depends(get_session),
    storage: LocalFileStorage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> dict:
    delete_photo(session, storage, photo_id, user)
    return {'status': 'ok'}
