"""Photo reports and their moderation lifecycle.

A report is created ``pending`` and reviewed exactly once by an administrator:

    pending --approve--> approved   (the photo is hidden)
    pending --reject-->  rejected   (the photo is left as it is)

Approved and rejected are terminal; reviewing them again raises ConflictError.
"""

from typing import Iterable, Optional
from loguru import logger
from sqlmodel import Session, select
from app.core.errors import ConflictError, DuplicateReportError, NotFoundError
from app.models.base import utc_now
from app.models.enums import ReportStatus
from app.models.photo import Photo
from app.models.report import Report
from app.models.user import User
from app.schemas.report import ReportCreate
from app.services.auth_service import ensure_admin
from app.services.pagination import paginate


def has_reported(session: Session, reporter_id: str, photo_id: str) -> bool:
    """True when the reporter has any report on record against the photo, whatever its status."""
    statement = select(Report.id).where(
        (Report.reported_by_id == reporter_id) & (Report.photo_id == photo_id)
    )
    return session.exec(statement).first() is not None


def create_report(session: Session, user: User, payload: ReportCreate) -> Report:
    photo = session.get(Photo, payload.photo_id)
    if not photo:
        raise NotFoundError('Photo not found')
    if has_reported(session, user.id, photo.id):
        raise DuplicateReportError()

    record = Report(
        photo_id=photo.id,
        reported_by_id=user.id,
        reason=payload.reason,
        description=payload.description,
        status=ReportStatus.PENDING,
    )
    session.add(record)
    session.commit()
    session.refresh(record)
    logger.info('report.created', report_id=record.id, photo_id=photo.id, user_id=user.id)
    return record


def list_pending_reports(session: Session, page: int = 1, page_size: int = 10) -> tuple[list[Report], int]:
    # Oldest first so the review queue is worked in arrival order.
    statement = (
        select(Report)
        .where(Report.status == ReportStatus.PENDING)
        .order_by(Report.created_at.asc())
    )
    return paginate(session, statement, page, page_size)


def list_reports(
    session: Session,
    status: Optional[ReportStatus] = None,
    page: int = 1,
    page_size: int = 10,
) -> tuple[list[Report], int]:
    statement = select(Report)
    if status is not None:
        statement = statement.where(Report.status == status)
    statement = statement.order_by(Report.created_at.desc())
    return paginate(session, statement, page, page_size)


def get_report(session: Session, report_id: str) -> Report:
    record = session.get(Report, report_id)
    if not record:
        raise NotFoundError('Report not found')
    return record


def _review(
    session: Session,
    report_id: str,
    reviewer: User,
    status: ReportStatus,
    admin_notes: Optional[str],
) -> Report:
    ensure_admin(reviewer)
    record = get_report(session, report_id)
    if record.status != ReportStatus.PENDING:
        raise ConflictError(f"Report already {record.status.value}")

    record.status = status
    record.reviewed_at = utc_now()
    record.reviewed_by_id = reviewer.id
    record.admin_notes = admin_notes
    session.add(record)

    if status == ReportStatus.APPROVED:
        photo = session.get(Photo, record.photo_id)
        if photo is not None:
            photo.is_private = True
            session.add(photo)

    session.commit()
    session.refresh(record)
    logger.info(
        f"report.{status.value}",
        report_id=record.id,
        photo_id=record.photo_id,
        reviewer_id=reviewer.id,
    )
    return record


def approve_report(
    session: Session,
    report_id: str,
    reviewer: User,
    admin_notes: Optional[str] = None,
) -> Report:
    return _review(session, report_id, reviewer, ReportStatus.APPROVED, admin_notes)


def reject_report(
    session: Session,
    report_id: str,
    reviewer: User,
    admin_notes: Optional[str] = None,
) -> Report:
    return _review(session, report_id, reviewer, ReportStatus.REJECTED, admin_notes)


def load_report_context(
    session: Session,
    reports: Iterable[Report],
) -> tuple[dict[str, User], dict[str, Photo]]:
    reports = list(reports)
    user_ids = {r.reported_by_id for r in reports} | {r.reviewed_by_id for r in reports if r.reviewed_by_id}
    photo_ids = {r.photo_id for r in reports}
    users = session.exec(select(User).where(User.id.in_(user_ids))).all() if user_ids else []
    photos = session.exec(select(Photo).where(Photo.id.in_(photo_ids))).all() if photo_ids else []
    return {user.id: user for user in users}, {photo.id: photo for photo in photos}
