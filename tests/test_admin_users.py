from sqlmodel import Session, select

from app.core.config import settings
from app.db.session import engine
from app.models.board import Board
from app.models.board_item import BoardItem
from app.models.enums import UserRole
from app.models.favorite_photo import FavoritePhoto
from app.models.photo import Photo
from app.models.refresh_token import RefreshToken
from app.models.report import Report
from app.models.user import User


def _admin_id(client, admin_headers) -> str:
    return client.get('/api/v1/users/me', headers=admin_headers).json()['id']


def test_list_users_is_paged_and_admin_only(client, make_user, admin_headers):
    _, user_headers = make_user('alice')
    make_user('bob')

    page = client.get('/api/v1/admin/users?page=1&page_size=2', headers=admin_headers)
    assert page.status_code == 200
    body = page.json()
    assert body['totalCount'] == 4
    assert body['totalPages'] == 2
    assert len(body['data']) == 2
    assert {'is_locked', 'lockout_end', 'created_at', 'role'} <= set(body['data'][0])

    assert client.get('/api/v1/admin/users', headers=user_headers).status_code == 403
    assert client.get('/api/v1/admin/users').status_code == 401


def test_user_detail_counts(client, make_user, upload_photo, admin_headers):
    user_id, headers = make_user('carol')
    upload_photo(headers)
    upload_photo(headers, is_private=True)
    client.post('/api/v1/boards', json={'title': 'Trip'}, headers=headers)

    detail = client.get(f"/api/v1/admin/users/{user_id}", headers=admin_headers)
    assert detail.status_code == 200
    body = detail.json()
    assert body['username'] == 'carol'
    assert body['photos_count'] == 2
    assert body['boards_count'] == 1
    assert body['is_locked'] is False

    assert client.get('/api/v1/admin/users/missing', headers=admin_headers).status_code == 404


def test_lock_blocks_login_and_existing_tokens(client, login, admin_headers):
    client.post('/api/v1/auth/register', json={'email': 'lock@b.com', 'password': 'secret123'})
    headers = login('lock@b.com', 'secret123')
    user_id = client.get('/api/v1/users/me', headers=headers).json()['id']
    client.post('/api/v1/boards', json={'title': 'Kept'}, headers=headers)

    locked = client.post(f"/api/v1/admin/users/{user_id}/lock", headers=admin_headers)
    assert locked.status_code == 200
    assert locked.json()['is_locked'] is True
    assert locked.json()['lockout_end'] is not None

    denied = client.post('/api/v1/auth/login', json={'email': 'lock@b.com', 'password': 'secret123'})
    assert denied.status_code == 403
    assert denied.json()['detail'] == 'Account locked'
    assert client.get('/api/v1/users/me', headers=headers).status_code == 403

    detail = client.get(f"/api/v1/admin/users/{user_id}", headers=admin_headers).json()
    assert detail['boards_count'] == 1

    unlocked = client.post(f"/api/v1/admin/users/{user_id}/unlock", headers=admin_headers)
    assert unlocked.status_code == 200
    assert unlocked.json()['is_locked'] is False
    assert unlocked.json()['lockout_end'] is None
    assert client.get('/api/v1/users/me', headers=headers).status_code == 200


def test_admin_cannot_lock_or_delete_self(client, admin_headers):
    admin_id = _admin_id(client, admin_headers)

    lock = client.post(f"/api/v1/admin/users/{admin_id}/lock", headers=admin_headers)
    assert lock.status_code == 400
    delete = client.delete(f"/api/v1/admin/users/{admin_id}", headers=admin_headers)
    assert delete.status_code == 400
    assert client.get('/api/v1/users/me', headers=admin_headers).status_code == 200


def test_lock_and_delete_require_admin(client, make_user):
    target_id, _ = make_user()
    _, user_headers = make_user()

    assert client.post(f"/api/v1/admin/users/{target_id}/lock", headers=user_headers).status_code == 403
    assert client.post(f"/api/v1/admin/users/{target_id}/unlock", headers=user_headers).status_code == 403
    assert client.delete(f"/api/v1/admin/users/{target_id}", headers=user_headers).status_code == 403


def test_delete_user_cascades_owned_content(client, make_user, upload_photo, admin_headers):
    victim_id, victim_headers = make_user('victim')
    _, other_headers = make_user('other')

    victim_photo = upload_photo(victim_headers)
    other_photo = upload_photo(other_headers)

    board_id = client.post('/api/v1/boards', json={'title': 'Mine'}, headers=victim_headers).json()['id']
    client.post(f"/api/v1/boards/{board_id}/items/photo", json={'photo_id': victim_photo}, headers=victim_headers)
    client.post(f"/api/v1/boards/{board_id}/items/text", json={'text': 'caption'}, headers=victim_headers)

    other_board = client.post('/api/v1/boards', json={'title': 'Theirs'}, headers=other_headers).json()['id']
    other_item = client.post(
        f"/api/v1/boards/{other_board}/items/photo",
        json={'photo_id': victim_photo},
        headers=other_headers,
    ).json()['id']

    client.post(f"/api/v1/favorites/{victim_photo}", headers=other_headers)
    client.post(f"/api/v1/favorites/{other_photo}", headers=victim_headers)
    client.post('/api/v1/reports', json={'contentId': victim_photo, 'reason': 'Spam'}, headers=other_headers)
    victims_report = client.post(
        '/api/v1/reports',
        json={'contentId': other_photo, 'reason': 'Spam'},
        headers=victim_headers,
    )
    assert victims_report.status_code == 200

    with Session(engine) as session:
        victim_file = session.get(Photo, victim_photo).file_path
    assert (settings.STORAGE_ROOT / victim_file).is_file()

    deleted = client.delete(f"/api/v1/admin/users/{victim_id}", headers=admin_headers)
    assert deleted.status_code == 200

    with Session(engine) as session:
        assert session.get(User, victim_id) is None
        assert session.exec(select(Board).where(Board.owner_id == victim_id)).all() == []
        assert session.exec(select(BoardItem).where(BoardItem.board_id == board_id)).all() == []
        assert session.exec(select(Photo).where(Photo.uploaded_by_id == victim_id)).all() == []
        assert session.exec(select(Report).where(Report.reported_by_id == victim_id)).all() == []
        assert session.exec(select(Report).where(Report.photo_id == victim_photo)).all() == []
        assert session.exec(select(FavoritePhoto).where(FavoritePhoto.user_id == victim_id)).all() == []
        assert session.exec(select(FavoritePhoto).where(FavoritePhoto.photo_id == victim_photo)).all() == []
        assert session.exec(select(RefreshToken).where(RefreshToken.user_id == victim_id)).all() == []
        detached = session.get(BoardItem, other_item)
        assert detached is not None
        assert detached.photo_id is None
        assert session.get(Photo, other_photo) is not None
    assert not (settings.STORAGE_ROOT / victim_file).exists()

    assert client.get('/api/v1/users/me', headers=victim_headers).status_code == 401
    assert client.delete(f"/api/v1/admin/users/{victim_id}", headers=admin_headers).status_code == 404


def test_deleting_reviewer_keeps_review_outcome(client, login, make_user, upload_photo, admin_headers):
    _, owner_headers = make_user()
    _, reporter_headers = make_user()
    photo_id = upload_photo(owner_headers)
    report_id = client.post(
        '/api/v1/reports',
        json={'contentId': photo_id, 'reason': 'Spam'},
        headers=reporter_headers,
    ).json()['id']

    client.post('/api/v1/auth/register', json={'email': 'mod@b.com', 'password': 'secret123'})
    with Session(engine) as session:
        moderator = session.exec(select(User).where(User.email == 'mod@b.com')).one()
        moderator.role = UserRole.ADMIN
        session.add(moderator)
        session.commit()
        moderator_id = moderator.id
    moderator_headers = login('mod@b.com', 'secret123')
    assert client.put(f"/api/v1/reports/reject/{report_id}", headers=moderator_headers).status_code == 200

    assert client.delete(f"/api/v1/admin/users/{moderator_id}", headers=admin_headers).status_code == 200

    detail = client.get(f"/api/v1/reports/{report_id}", headers=admin_headers).json()
    assert detail['status'] == 'rejected'
    assert detail['reviewed_by'] is None


def test_admin_can_delete_any_photo(client, make_user, upload_photo, admin_headers):
    _, owner_headers = make_user()
    _, other_headers = make_user()
    photo_id = upload_photo(owner_headers, is_private=True)

    assert client.delete(f"/api/v1/admin/photos/{photo_id}", headers=other_headers).status_code == 403
    assert client.delete(f"/api/v1/photos/{photo_id}", headers=other_headers).status_code == 403

    deleted = client.delete(f"/api/v1/admin/photos/{photo_id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert client.get(f"/api/v1/photos/{photo_id}", headers=owner_headers).status_code == 404
    assert client.delete(f"/api/v1/admin/photos/{photo_id}", headers=admin_headers).status_code == 404
