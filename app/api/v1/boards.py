from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from app.db.session import get_session
from app.models.board import Board
from app.models.board_item import BoardItem
from app.models.photo import Photo
from app.models.user import User
from app.schemas.board import (
    BoardCreate,
    BoardDetail,
    BoardItemOut,
    BoardOut,
    BoardUpdate,
    ItemUpdate,
    PhotoItemCreate,
    TextItemCreate,
)
from app.schemas.common import CreatedOut
from app.services.auth_service import get_current_user, get_optional_user
from app.services.board_service import (
    add_photo_item,
    add_text_item,
    create_board,
    delete_board,
    delete_item,
    get_board,
    get_owned_board,
    get_owned_item,
    list_boards,
    list_items,
    list_user_boards,
    owner_names,
    update_board,
    update_item,
)
from app.services.photo_service import can_view_photo, to_photo_summary

router = APIRouter(prefix='/boards', tags=['boards'])


def _to_board_out(board: Board, owner: Optional[str] = None) -> BoardOut:
    return BoardOut(
        id=board.id,
        title=board.title,
        description=board.description,
        owner_id=board.owner_id,
        owner=owner,
        created_at=board.created_at,
        updated_at=board.updated_at,
    )


def _to_item_out(item: BoardItem, photo: Optional[Photo] = None) -> BoardItemOut:
    return BoardItemOut(
        id=item.id,
        board_id=item.board_id,
        photo_id=photo.id if photo else None,
        photo=to_photo_summary(photo) if photo else None,
        text_content=item.text_content,
        position_x=item.position_x,
        position_y=item.position_y,
        width=item.width,
        height=item.height,
        rotation=item.rotation,
        z_index=item.z_index,
        updated_at=item.updated_at,
    )


@router.get('', response_model=list[BoardOut])
def list_boards_endpoint(
    limit: int = 50,
    offset: int = 0,
    session: Session = Depends(get_session),
) -> list[BoardOut]:
    boards = list_boards(session, limit=limit, offset=offset)
    names = owner_names(session, boards)
    return [_to_board_out(board, names.get(board.owner_id)) for board in boards]


@router.post('', response_model=BoardOut, status_code=status.HTTP_201_CREATED)
def create_board_endpoint(
    payload: BoardCreate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> BoardOut:
    board = create_board(session, payload, user.id)
    return _to_board_out(board, user.display_name)


@router.get('/mine', response_model=list[BoardOut])
def list_my_boards(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> list[BoardOut]:
    return [_to_board_out(board, user.display_name) for board in list_user_boards(session, user.id)]


@router.get('/{board_id}', response_model=BoardDetail)
def get_board_endpoint(
    board_id: str,
    session: Session = Depends(get_session),
    viewer: Optional[User] = Depends(get_optional_user),
) -> BoardDetail:
    board = get_board(session, board_id)
    owner = session.get(User, board.owner_id)
    items = [_to_item_out(item, photo) for item, photo in list_items(session, board.id, viewer)]
    return BoardDetail(
        **_to_board_out(board, owner.display_name if owner else None).model_dump(),
        items=items,
    )


@router.patch('/{board_id}', response_model=BoardOut)
def update_board_endpoint(
    board_id: str,
    payload: BoardUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> BoardOut:
    board = get_owned_board(session, board_id, user)
    board = update_board(session, board, payload)
    return _to_board_out(board, user.display_name)


@router.delete('/{board_id}')
def delete_board_endpoint(
    board_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> dict:
    board = get_owned_board(session, board_id, user)
    delete_board(session, board)
    return {'status': 'ok'}


@router.post('/{board_id}/items/photo', response_model=CreatedOut, status_code=status.HTTP_201_CREATED)
def add_photo_item_endpoint(
    board_id: str,
    payload: PhotoItemCreate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> CreatedOut:
    board = get_board(session, board_id)
    item = add_photo_item(session, board, payload, user)
    return CreatedOut(id=item.id, message='Photo added to board')


@router.post('/{board_id}/items/text', response_model=CreatedOut, status_code=status.HTTP_201_CREATED)
def add_text_item_endpoint(
    board_id: str,
    payload: TextItemCreate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> CreatedOut:
    board = get_board(session, board_id)
    item = add_text_item(session, board, payload, user)
    return CreatedOut(id=item.id, message='Text added to board')


@router.patch('/items/{item_id}', response_model=BoardItemOut)
def update_item_endpoint(
    item_id: str,
    payload: ItemUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> BoardItemOut:
    item = get_owned_item(session, item_id, user)
    item = update_item(session, item, payload)
    photo = session.get(Photo, item.photo_id) if item.photo_id else None
    return _to_item_out(item, photo if photo and can_view_photo(photo, user) else None)


@router.delete('/items/{item_id}')
def delete_item_endpoint(
    item_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> dict:
    item = get_owned_item(session, item_id, user)
    delete_item(session, item)
    return {'status': 'ok'}
