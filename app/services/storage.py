"""Local-disk storage for uploaded photo files.

Files live under ``<root>/uploads`` and are addressed by a path relative to
``root`` (``uploads/<user_id>_<uuid>.<ext>``), which is what the database keeps.
"""

from pathlib import Path
from typing import Iterable, Optional
from uuid import uuid4

from loguru import logger

from app.core.config import settings
from app.core.errors import BadRequestError

UPLOAD_FOLDER = 'uploads'


class LocalFileStorage:
    def __init__(
        self,
        root: Path,
        max_bytes: int,
        allowed_extensions: Iterable[str],
    ) -> None:
        self.root = Path(root)
        self.max_bytes = max_bytes
        self.allowed_extensions = {ext.lower() for ext in allowed_extensions}

    def validate(self, file_name: Optional[str], size: int) -> str:
        if not file_name:
            raise BadRequestError('Filename is required')
        if size <= 0:
            raise BadRequestError('File is empty')
        if size > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise BadRequestError(f"File size exceeds the maximum limit of {limit_mb} MB")
        extension = Path(file_name).suffix.lower()
        if extension not in self.allowed_extensions:
            raise BadRequestError('File type is not allowed')
        return extension

    def save(self, file_name: Optional[str], data: bytes, user_id: str) -> str:
        extension = self.validate(file_name, len(data))
        upload_dir = self.root / UPLOAD_FOLDER
        upload_dir.mkdir(parents=True, exist_ok=True)
        unique_name = f"{user_id}_{uuid4()}{extension}"
        (upload_dir / unique_name).write_bytes(data)
        logger.info('storage.photo_saved', file=unique_name, size=len(data))
        return f"{UPLOAD_FOLDER}/{unique_name}"

    def delete(self, file_path: str) -> bool:
        full_path = self.root / file_path
        if not full_path.is_file():
            logger.warning('storage.photo_missing', file=file_path)
            return False
        full_path.unlink()
        logger.info('storage.photo_deleted', file=file_path)
        return True

    def exists(self, file_path: str) -> bool:
        return (self.root / file_path).is_file()

    @staticmethod
    def url(file_path: str) -> str:
        return f"/{file_path}"


def get_storage() -> LocalFileStorage:
    return LocalFileStorage(
        root=settings.STORAGE_ROOT,
        max_bytes=settings.MAX_UPLOAD_BYTES,
        allowed_extensions=settings.ALLOWED_PHOTO_EXTENSIONS,
    )
