"""
Storage Service - writes uploaded files into the local upload directory.

Files are named ``<field>-<millis>-<random><ext>`` and referenced by a
root-relative URL (``/uploads/<name>``); clients prefix it with the API
base URL. The directory is served by the static mount in ``campusnet.main``.
"""

import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from campusnet.core.config import settings
from campusnet.core.exceptions import ValidationError
from campusnet.core.logging_config import logger

CHUNK_SIZE = 1024 * 1024  # 1MB


@dataclass
class StoredFile:
    """Reference to a file that has been written to storage"""
    url: str
    content_type: str
    size_bytes: int


class StorageService:
    """Local disk storage for avatars, post images and notice attachments"""

    def __init__(self, base_path: Optional[Path] = None, url_prefix: Optional[str] = None,
                 max_size: Optional[int] = None):
        self._base_path = base_path
        self._url_prefix = (url_prefix or settings.UPLOAD_URL_PREFIX).rstrip("/")
        self._max_size = max_size or settings.MAX_UPLOAD_SIZE

    @property
    def base_path(self) -> Path:
        return self._base_path or settings.upload_path

    def ensure_directory(self) -> Path:
        path = self.base_path
        path.mkdir(parents=True, exist_ok=True)
        return path

    def build_filename(self, field_name: str, original_name: Optional[str]) -> str:
        suffix = Path(original_name or "").suffix.lower()
        millis = int(time.time() * 1000)
        random_part = secrets.randbelow(10 ** 9)
        return f"{field_name}-{millis}-{random_part}{suffix}"

    async def save(self, upload: UploadFile, field_name: str) -> StoredFile:
        """
        Stream an upload to disk. The destination is removed again if the
        write fails or the file exceeds MAX_UPLOAD_SIZE.
        """
        directory = self.ensure_directory()
        filename = self.build_filename(field_name, upload.filename)
        destination = directory / filename
        written = 0

        try:
            async with aiofiles.open(destination, "wb") as out:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self._max_size:
                        raise ValidationError(
                            f"File too large. Maximum size is {self._max_size // 1024 // 1024}MB",
                            field=field_name,
                        )
                    await out.write(chunk)
        except Exception:
            if destination.exists():
                await aiofiles.os.remove(destination)
            raise
        finally:
            await upload.close()

        logger.info(f"[Storage] Saved {field_name} upload as {filename} ({written} bytes)")
        return StoredFile(
            url=f"{self._url_prefix}/{filename}",
            content_type=upload.content_type or "application/octet-stream",
            size_bytes=written,
        )

    async def delete(self, url: Optional[str]) -> bool:
        """Remove a previously stored file by its URL; missing files are ignored"""
        if not url or not url.startswith(self._url_prefix + "/"):
            return False
        path = self.base_path / url[len(self._url_prefix) + 1:]
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"[Storage] Could not delete {path}: {e}")
            return False
        return True


storage_service = StorageService()


def get_storage_service() -> StorageService:
    """FastAPI dependency"""
    return storage_service
