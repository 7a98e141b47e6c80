from typing import Optional
from fastapi import APIRouter, Body, Depends, Query
from sqlmodel import Session
from app.db.session import get_session
from app.models.enums import ReportStatus
from app.models.photo import Photo
from app.models.report import Report
from app.models.user import User
from app.schemas.common import CreatedOut, MessageOut, Page
from app.schemas.report import ReportCreate, ReportDetail, ReportOut, ReviewBody, review_notes
from app.schemas.user import UserContact, UserSummary
from app.services.auth_service import get_current_user, require_admin
from app.services.photo_service import to_photo_summary
from app.services.report_service import (
    approve_report,
    create_report,
    get_report,
    list_pending_reports,
    list_reports,
    load_report_context,
    reject_report,
)

router = APIRouter(prefix='/reports', tags=['reports'])


def _summary(user: Optional[User]) -> Optional[UserSummary]:
    if user is None:
        return None
    return UserSummary(id=user.id, username=user.display_name)


def _to_report_out(report: Report, users: dict[str, User], photos: dict[str, Photo]) -> ReportOut:
    photo = photos.get(report.photo_id)
    return ReportOut(
        id=report.id,
        photo_id=report.photo_id,
        reason=report.reason,
        description=report.description,
        status=report.status,
        created_at=report.created_at,
        reviewed_at=report.reviewed_at,
        admin_notes=report.admin_notes,
        reported_by=_summary(users.get(report.reported_by_id)),
        reviewed_by=_summary(users.get(report.reviewed_by_id)) if report.reviewed_by_id else None,
        photo=to_photo_summary(photo) if photo else None,
    )


def _to_page(session: Session, reports: list[Report], total: int, page: int, page_size: int) -> Page[ReportOut]:
    users, photos = load_report_context(session, reports)
    items = [_to_report_out(report, users, photos) for report in reports]
    return Page[ReportOut].build(items, total, page, page_size)


@router.post('', response_model=CreatedOut)
def create_report_endpoint(
    payload: ReportCreate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> CreatedOut:
    record = create_report(session, user, payload)
    return CreatedOut(id=record.id, message='Report submitted successfully')


@router.get('', response_model=Page[ReportOut])
def list_pending_reports_endpoint(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, gt=0, le=100),
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
) -> Page[ReportOut]:
    reports, total = list_pending_reports(session, page=page, page_size=page_size)
    return _to_page(session, reports, total, page, page_size)


@router.get('/all', response_model=Page[ReportOut])
def list_reports_endpoint(
    status: Optional[ReportStatus] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, gt=0, le=100),
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
) -> Page[ReportOut]:
    reports, total = list_reports(session, status=status, page=page, page_size=page_size)
    return _to_page(session, reports, total, page, page_size)


@router.get('/{report_id}', response_model=ReportDetail)
def get_report_endpoint(
    report_id: str,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
) -> ReportDetail:
    report = get_report(session, report_id)
    users, photos = load_report_context(session, [report])
    reporter = users.get(report.reported_by_id)
    detail = _to_report_out(report, users, photos).model_dump(exclude={'reported_by'})
    return ReportDetail(
        **detail,
        reported_by=UserContact(
            id=reporter.id,
            username=reporter.display_name,
            email=reporter.email,
        ) if reporter else None,
    )


@router.api_route('/approve/{report_id}', methods=['PUT', 'POST'], response_model=MessageOut)
def approve_report_endpoint(
    report_id: str,
    payload: ReviewBody = Body(default=None),
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> MessageOut:
    approve_report(session, report_id, admin, admin_notes=review_notes(payload))
    return MessageOut(message='Report approved')


@router.api_route('/reject/{report_id}', methods=['PUT', 'POST'], response_model=MessageOut)
def reject_report_endpoint(
    report_id: str,
    payload: ReviewBody = Body(default=None),
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> MessageOut:
    reject_report(session, report_id, admin, admin_notes=review_notes(payload))
    return MessageOut(message='Report rejected')
