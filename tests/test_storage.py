import pytest

from app.core.errors import BadRequestError
from app.services.storage import LocalFileStorage


@pytest.fixture()
def storage(tmp_path):
    return LocalFileStorage(root=tmp_path, max_bytes=1024, allowed_extensions={'.png', '.jpg'})


def test_save_writes_under_uploads_with_user_prefix(storage, tmp_path):
    path = storage.save('Cover.PNG', b'abc', 'user-1')

    assert path.startswith('uploads/user-1_')
    assert path.endswith('.png')
    assert (tmp_path / path).read_bytes() == b'abc'
    assert storage.exists(path)
    assert LocalFileStorage.url(path) == f"/{path}"


def test_save_generates_unique_names(storage):
    assert storage.save('a.jpg', b'1', 'u') != storage.save('a.jpg', b'1', 'u')


@pytest.mark.parametrize(
    ('file_name', 'data'),
    [
        (None, b'abc'),
        ('', b'abc'),
        ('a.png', b''),
        ('a.gif', b'abc'),
        ('a.png', b'x' * 1025),
    ],
)
def test_validate_rejects(storage, file_name, data):
    with pytest.raises(BadRequestError):
        storage.save(file_name, data, 'u')


def test_size_limit_is_inclusive(storage):
    assert storage.validate('a.png', 1024) == '.png'


def test_delete_is_tolerant_of_missing_files(storage):
    path = storage.save('a.png', b'abc', 'u')

    assert storage.delete(path) is True
    assert not storage.exists(path)
    assert storage.delete(path) is False
