from typing import Optional
from loguru import logger
from sqlmodel import Session, select
from app.core.errors import ForbiddenError, NotFoundError
from app.models.base import utc_now
from app.models.board import Board
from app.models.board_item import TEXT_ITEM_HEIGHT, TEXT_ITEM_WIDTH, BoardItem
from app.models.photo import Photo
from app.models.user import User
from app.schemas.board import BoardCreate, BoardUpdate, ItemUpdate, PhotoItemCreate, TextItemCreate
from app.services.photo_service import can_view_photo, get_visible_photo


def _ensure_owner(board: Board, user: User) -> None:
    if board.owner_id != user.id:
        raise ForbiddenError('Not allowed')


def create_board(session: Session, payload: BoardCreate, owner_id: str) -> Board:
    board = Board(title=payload.title, description=payload.description, owner_id=owner_id)
    session.add(board)
    session.commit()
    session.refresh(board)
    logger.info('board.created', board_id=board.id, owner_id=owner_id)
    return board


def list_boards(session: Session, limit: int = 50, offset: int = 0) -> list[Board]:
    statement = select(Board).order_by(Board.created_at.desc()).offset(offset).limit(limit)
    return list(session.exec(statement).all())


def owner_names(session: Session, boards: list[Board]) -> dict[str, str]:
    owner_ids = {board.owner_id for board in boards}
    if not owner_ids:
        return {}
    users = session.exec(select(User).where(User.id.in_(owner_ids))).all()
    return {user.id: user.display_name for user in users}


def list_user_boards(session: Session, owner_id: str) -> list[Board]:
    statement = (
        select(Board)
        .where(Board.owner_id == owner_id)
        .order_by(Board.updated_at.desc())
    )
    return list(session.exec(statement).all())


def get_board(session: Session, board_id: str) -> Board:
    board = session.get(Board, board_id)
    if not board:
        raise NotFoundError('Board not found')
    return board


def get_owned_board(session: Session, board_id: str, user: User) -> Board:
    board = get_board(session, board_id)
    _ensure_owner(board, user)
    return board


def list_items(
    session: Session,
    board_id: str,
    viewer: Optional[User] = None,
) -> list[tuple[BoardItem, Optional[Photo]]]:
    """Items of a board in paint order, each with the photo it shows.

    Photos the viewer may not see come back as ``None``.
    """
    statement = (
        select(BoardItem, Photo)
        .join(Photo, BoardItem.photo_id == Photo.id, isouter=True)
        .where(BoardItem.board_id == board_id)
        .order_by(BoardItem.z_index.asc(), BoardItem.created_at.asc())
    )
    return [
        (item, photo if photo and can_view_photo(photo, viewer) else None)
        for item, photo in session.exec(statement).all()
    ]


def update_board(session: Session, board: Board, payload: BoardUpdate) -> Board:
    data = payload.model_dump(exclude_unset=True)
    if data.get('title') is None:
        data.pop('title', None)
    for key, value in data.items():
        setattr(board, key, value)
    board.updated_at = utc_now()
    session.add(board)
    session.commit()
    session.refresh(board)
    return board


def purge_boards(session: Session, board_ids: list[str]) -> None:
    """Stage deletion of boards, items first. Nothing is committed here."""
    if not board_ids:
        return
    for item in session.exec(select(BoardItem).where(BoardItem.board_id.in_(board_ids))).all():
        session.delete(item)
    session.flush()
    for board in session.exec(select(Board).where(Board.id.in_(board_ids))).all():
        session.delete(board)


def delete_board(session: Session, board: Board) -> None:
    purge_boards(session, [board.id])
    session.commit()
    logger.info('board.deleted', board_id=board.id)


def _touch(session: Session, board_id: str) -> None:
    board = session.get(Board, board_id)
    if board:
        board.updated_at = utc_now()
        session.add(board)


def add_photo_item(session: Session, board: Board, payload: PhotoItemCreate, user: User) -> BoardItem:
    _ensure_owner(board, user)
    photo = get_visible_photo(session, payload.photo_id, user)
    item = BoardItem(
        board_id=board.id,
        photo_id=photo.id,
        position_x=payload.pos_x,
        position_y=payload.pos_y,
        width=payload.width,
        height=payload.height,
        z_index=0,
    )
    session.add(item)
    _touch(session, board.id)
    session.commit()
    session.refresh(item)
    return item


def add_text_item(session: Session, board: Board, payload: TextItemCreate, user: User) -> BoardItem:
    _ensure_owner(board, user)
    item = BoardItem(
        board_id=board.id,
        text_content=payload.text,
        position_x=payload.pos_x,
        position_y=payload.pos_y,
        width=TEXT_ITEM_WIDTH,
        height=TEXT_ITEM_HEIGHT,
    )
    session.add(item)
    _touch(session, board.id)
    session.commit()
    session.refresh(item)
    return item


def get_owned_item(session: Session, item_id: str, user: User) -> BoardItem:
    item = session.get(BoardItem, item_id)
    if not item:
        raise NotFoundError('Item not found')
    board = session.get(Board, item.board_id)
    if not board or board.owner_id != user.id:
        raise ForbiddenError('Not allowed')
    return item


def update_item(session: Session, item: BoardItem, payload: ItemUpdate) -> BoardItem:
    item.position_x = payload.pos_x
    item.position_y = payload.pos_y
    item.width = payload.width
    item.height = payload.height
    item.rotation = payload.rotation
    item.z_index = payload.z_index
    item.updated_at = utc_now()
    session.add(item)
    _touch(session, item.board_id)
    session.commit()
    session.refresh(item)
    return item


def delete_item(session: Session, item: BoardItem) -> None:
    board_id = item.board_id
    session.delete(item)
    _touch(session, board_id)
    session.commit()
