from typing import Any
from sqlalchemy import func
from sqlmodel import Session, select


def paginate(session: Session, statement: Any, page: int, page_size: int) -> tuple[list, int]:
    """Run ``statement`` for one page and count the rows it matches overall."""
    count_statement = select(func.count()).select_from(statement.order_by(None).subquery())
    total = int(session.exec(count_statement).one() or 0)
    offset = (page - 1) * page_size
    items = list(session.exec(statement.offset(offset).limit(page_size)).all())
    return items, total
