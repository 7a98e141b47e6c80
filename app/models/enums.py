from enum import Enum
import sqlalchemy as sa
from sqlalchemy import Column


class UserRole(str, Enum):
    USER = 'user'
    ADMIN = 'admin'


class ReportStatus(str, Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'


def enum_column(enum_cls: type[Enum], name: str) -> Column:
    return Column(
        sa.Enum(
            enum_cls,
            values_callable=lambda enum: [item.value for item in enum],
            name=name,
        ),
        nullable=False,
    )
