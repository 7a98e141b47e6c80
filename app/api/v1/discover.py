from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from app.db.session import get_session
from app.schemas.common import Page
from app.schemas.photo import PhotoOut
from app.services.photo_service import list_public_photos, to_photo_out, uploader_names

router = APIRouter(prefix='/discover', tags=['discover'])


@router.get('', response_model=Page[PhotoOut])
def discover_photos(
    page: int = Query(1, ge=1),
    page_size: int = Query(12, gt=0, le=100),
    session: Session = Depends(get_session),
) -> Page[PhotoOut]:
    photos, total = list_public_photos(session, page, page_size)
    names = uploader_names(session, photos)
    items = [to_photo_out(photo, names.get(photo.uploaded_by_id)) for photo in photos]
    return Page[PhotoOut].build(items, total, page, page_size)
