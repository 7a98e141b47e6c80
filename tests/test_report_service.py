from datetime import timedelta
from uuid import uuid4

import pytest
from sqlmodel import Session

from app.core.errors import ConflictError, DuplicateReportError, ForbiddenError, NotFoundError
from app.db.init_db import init_db
from app.db.session import engine
from app.models.base import ensure_utc, utc_now
from app.models.enums import ReportStatus, UserRole
from app.models.photo import Photo
from app.models.report import Report
from app.schemas.report import ReportCreate
from app.services.auth_service import create_user
from app.services.report_service import (
    approve_report,
    create_report,
    has_reported,
    list_pending_reports,
    list_reports,
    reject_report,
)


@pytest.fixture()
def session():
    init_db(drop_all=True)
    with Session(engine) as db:
        yield db


def _user(session: Session, role: UserRole = UserRole.USER):
    return create_user(session, f"{uuid4()}@b.com", 'secret123', role=role)


def _photo(session: Session, owner_id: str) -> Photo:
    photo = Photo(
        file_name='p.png',
        file_path=f"uploads/{uuid4()}.png",
        file_size_bytes=10,
        uploaded_by_id=owner_id,
    )
    session.add(photo)
    session.commit()
    session.refresh(photo)
    return photo


def test_create_report_starts_pending(session):
    owner = _user(session)
    reporter = _user(session)
    photo = _photo(session, owner.id)

    assert has_reported(session, reporter.id, photo.id) is False
    record = create_report(session, reporter, ReportCreate(photo_id=photo.id, reason='Spam'))

    assert record.status == ReportStatus.PENDING
    assert record.reviewed_at is None
    assert record.reviewed_by_id is None
    assert has_reported(session, reporter.id, photo.id) is True
    assert has_reported(session, owner.id, photo.id) is False


def test_create_report_guards(session):
    owner = _user(session)
    reporter = _user(session)
    photo = _photo(session, owner.id)

    with pytest.raises(NotFoundError):
        create_report(session, reporter, ReportCreate(photo_id='missing', reason='Spam'))

    create_report(session, reporter, ReportCreate(photo_id=photo.id, reason='Spam'))
    with pytest.raises(DuplicateReportError):
        create_report(session, reporter, ReportCreate(photo_id=photo.id, reason='Other'))


def test_approve_sets_review_fields_and_hides_photo(session):
    admin = _user(session, UserRole.ADMIN)
    reporter = _user(session)
    photo = _photo(session, _user(session).id)
    record = create_report(session, reporter, ReportCreate(photo_id=photo.id, reason='Inappropriate Content'))

    approved = approve_report(session, record.id, admin, admin_notes='confirmed nudity')

    assert approved.status == ReportStatus.APPROVED
    assert approved.reviewed_by_id == admin.id
    assert approved.admin_notes == 'confirmed nudity'
    assert ensure_utc(approved.reviewed_at) >= ensure_utc(approved.created_at)
    session.refresh(photo)
    assert photo.is_private is True


def test_reject_keeps_photo_visibility(session):
    admin = _user(session, UserRole.ADMIN)
    reporter = _user(session)
    photo = _photo(session, _user(session).id)
    record = create_report(session, reporter, ReportCreate(photo_id=photo.id, reason='Spam'))

    rejected = reject_report(session, record.id, admin, admin_notes='not a violation')

    assert rejected.status == ReportStatus.REJECTED
    assert rejected.reviewed_by_id == admin.id
    session.refresh(photo)
    assert photo.is_private is False


def test_reject_does_not_unhide_private_photo(session):
    admin = _user(session, UserRole.ADMIN)
    photo = _photo(session, _user(session).id)
    photo.is_private = True
    session.add(photo)
    session.commit()
    record = create_report(session, _user(session), ReportCreate(photo_id=photo.id, reason='Spam'))

    reject_report(session, record.id, admin)

    session.refresh(photo)
    assert photo.is_private is True


def test_review_requires_admin_and_pending_status(session):
    admin = _user(session, UserRole.ADMIN)
    reporter = _user(session)
    photo = _photo(session, _user(session).id)
    record = create_report(session, reporter, ReportCreate(photo_id=photo.id, reason='Spam'))

    with pytest.raises(ForbiddenError):
        approve_report(session, record.id, reporter)
    with pytest.raises(NotFoundError):
        approve_report(session, 'missing', admin)

    reject_report(session, record.id, admin)
    with pytest.raises(ConflictError):
        approve_report(session, record.id, admin)
    session.refresh(photo)
    assert photo.is_private is False


def test_approve_skips_visibility_when_photo_is_gone(session):
    admin = _user(session, UserRole.ADMIN)
    record = Report(
        photo_id=str(uuid4()),
        reported_by_id=_user(session).id,
        reason='Spam',
    )
    session.add(record)
    session.commit()

    approved = approve_report(session, record.id, admin)

    assert approved.status == ReportStatus.APPROVED


def test_listing_orders(session):
    owner = _user(session)
    reporter = _user(session)
    base = utc_now() - timedelta(hours=1)
    ids = []
    for offset in (0, 2, 1):
        photo = _photo(session, owner.id)
        record = Report(
            photo_id=photo.id,
            reported_by_id=reporter.id,
            reason='Spam',
            created_at=base + timedelta(minutes=offset),
        )
        session.add(record)
        session.commit()
        ids.append(record.id)
    oldest, newest, middle = ids

    pending, total = list_pending_reports(session, page=1, page_size=10)
    assert total == 3
    assert [r.id for r in pending] == [oldest, middle, newest]

    everything, _ = list_reports(session, page=1, page_size=10)
    assert [r.id for r in everything] == [newest, middle, oldest]

    second_page, total = list_pending_reports(session, page=2, page_size=2)
    assert total == 3
    assert [r.id for r in second_page] == [newest]

    filtered, total = list_reports(session, status=ReportStatus.APPROVED)
    assert filtered == []
    assert total == 0
