import os
import tempfile
from pathlib import Path
from uuid import uuid4

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.engine import make_url

_TEST_ROOT = Path(tempfile.mkdtemp(prefix='storyboard-tests-'))
DEFAULT_TEST_DB_URL = f"sqlite:///{_TEST_ROOT / 'storyboard_test.db'}"
TEST_DB_URL = os.getenv("TEST_DB_URL", DEFAULT_TEST_DB_URL)
TEST_STORAGE_ROOT = _TEST_ROOT / 'storage'
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ["STORAGE_ROOT"] = str(TEST_STORAGE_ROOT)
os.environ.setdefault("SECRET_KEY", "test-secret")

from fastapi.testclient import TestClient

from app.core.config import settings
from app.db.init_db import init_db
from app.main import app

settings.DATABASE_URL = TEST_DB_URL
settings.STORAGE_ROOT = TEST_STORAGE_ROOT

ADMIN_CREDENTIALS = {'email': settings.ADMIN_EMAIL, 'password': settings.ADMIN_PASSWORD}
PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 64


def _ensure_mysql_database(url: str) -> None:
    parsed_url = make_url(url)
    if not parsed_url.drivername.startswith("mysql"):
        return
    database = parsed_url.database
    if not database:
        raise RuntimeError("TEST_DB_URL must include a database name.")
    test_engine = create_engine(parsed_url, pool_pre_ping=True)
    try:
        with test_engine.connect() as connection:
            connection.execute(text("SELECT 1"))
            return
    except OperationalError as exc:
        if "Unknown database" not in str(exc):
            raise
    finally:
        test_engine.dispose()

    admin_url = os.getenv("TEST_DB_ADMIN_URL")
    if admin_url:
        admin_engine = create_engine(admin_url, pool_pre_ping=True)
    else:
        root_password = os.getenv("MYSQL_ROOT_PASSWORD", "")
        server_url = parsed_url.set(
            username="root" if root_password else parsed_url.username,
            password=root_password or parsed_url.password,
            database="mysql",
        )
        admin_engine = create_engine(server_url, pool_pre_ping=True)
    with admin_engine.connect() as connection:
        connection.execute(
            text(
                f"CREATE DATABASE IF NOT EXISTS `{database}` "
                "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            )
        )
    admin_engine.dispose()


@pytest.fixture(autouse=True, scope="session")
def _configure_test_database():
    _ensure_mysql_database(TEST_DB_URL)
    init_db(drop_all=True)
    yield


@pytest.fixture()
def client():
    init_db(drop_all=True)
    with TestClient(app) as test_client:
        yield test_client


def login_headers(client: TestClient, email: str, password: str) -> dict:
    login = client.post('/api/v1/auth/login', json={'email': email, 'password': password})
    assert login.status_code == 200, login.text
    return {'Authorization': f"Bearer {login.json()['access_token']}"}


@pytest.fixture()
def login(client):
    def _login(email: str, password: str) -> dict:
        return login_headers(client, email, password)

    return _login


@pytest.fixture()
def make_user(client):
    def _make_user(username: str | None = None) -> tuple[str, dict]:
        email = f"{uuid4()}@b.com"
        body = {'email': email, 'password': 'secret123'}
        if username:
            body['username'] = username
        created = client.post('/api/v1/auth/register', json=body)
        assert created.status_code == 201, created.text
        return created.json()['id'], login_headers(client, email, 'secret123')

    return _make_user


@pytest.fixture()
def admin_headers(client) -> dict:
    return login_headers(client, ADMIN_CREDENTIALS['email'], ADMIN_CREDENTIALS['password'])


@pytest.fixture()
def upload_photo(client):
    def _upload(headers: dict, is_private: bool = False, name: str = 'photo.png') -> str:
        response = client.post(
            '/api/v1/photos/upload',
            files={'file': (name, PNG_BYTES, 'image/png')},
            data={'is_private': 'true' if is_private else 'false'},
            headers=headers,
        )
        assert response.status_code == 200, response.text
        return response.json()['id']

    return _upload
