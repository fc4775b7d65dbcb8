"""
LocalFileStore
Handles resume validation and storage on the local filesystem
"""
import re
import secrets
import time
from pathlib import Path
from typing import Iterable, Optional

import aiofiles
import aiofiles.os

from application.services.storage.interfaces import IFileStore, StoredFile
from domain.value_objects import OperationResult
from core.config import settings
from core.exceptions import StorageException, ValidationException
from core.logging_config import logger

SAFE_STEM = re.compile(r"[^A-Za-z0-9_-]+")
MAX_STEM_LENGTH = 50


class LocalFileStore(IFileStore):
    """Flat directory of uploaded resumes"""

    def __init__(
        self,
        base_path: Optional[str] = None,
        url_prefix: Optional[str] = None,
        max_size_bytes: Optional[int] = None,
        allowed_extensions: Optional[Iterable[str]] = None,
    ):
        """
        Initialize file store

        Args:
            base_path: Directory for stored files (default from settings)
            url_prefix: Public URL prefix files are referenced by
            max_size_bytes: Upload size limit
            allowed_extensions: Lower-case extensions including the dot
        """
        self.base_path = Path(base_path or settings.UPLOAD_DIR).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.url_prefix = (url_prefix or settings.UPLOAD_URL_PREFIX).rstrip("/")
        self.max_size_bytes = max_size_bytes or settings.max_resume_size_bytes
        self.allowed_extensions = {
            ext.lower() for ext in (allowed_extensions or settings.ALLOWED_RESUME_EXTENSIONS)
        }

    async def save(self, original_name: str, content: bytes, content_type: Optional[str] = None) -> StoredFile:
        """
        Save uploaded file under a freshly generated name

        Raises:
            ValidationException: bad extension, empty or oversized file
            StorageException: the write failed
        """
        extension = self._validate(original_name, content)

        for _ in range(3):
            file_name = self._generate_name(original_name, extension)
            file_path = self.base_path / file_name
            try:
                # Exclusive create: an existing file is never overwritten
                async with aiofiles.open(file_path, "xb") as f:
                    await f.write(content)
            except FileExistsError:
                continue
            except OSError as e:
                logger.error(f"Error saving file {file_name}: {e}")
                raise StorageException("save", original_name, str(e))

            logger.info(f"File saved: {file_name} ({len(content)} bytes)")
            return StoredFile(
                file_name=file_name,
                original_name=original_name,
                size=len(content),
                content_type=content_type,
                url=f"{self.url_prefix}/{file_name}",
            )

        raise StorageException("save", original_name, "could not allocate a unique name")

    def resolve(self, reference: str) -> Optional[Path]:
        file_path = self._path_for(reference)
        if file_path is None or not file_path.is_file():
            return None
        return file_path

    async def delete(self, reference: str) -> OperationResult[bool]:
        file_path = self._path_for(reference)
        if file_path is None:
            return OperationResult.failure(f"Invalid file reference: {reference}")

        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError:
            logger.debug(f"File already absent: {file_path.name}")
            return OperationResult.success(False)
        except OSError as e:
            logger.error(f"Error deleting file {file_path.name}: {e}")
            return OperationResult.failure(str(e))

        logger.info(f"File deleted: {file_path.name}")
        return OperationResult.success(True)

    def name_from_reference(self, reference: str) -> str:
        """Bare file name from a url like /uploads/applications/<name>"""
        return reference.rstrip("/").rsplit("/", 1)[-1]

    def _path_for(self, reference: str) -> Optional[Path]:
        if not reference:
            return None
        name = self.name_from_reference(reference)
        if name in ("", ".", ".."):
            return None
        file_path = (self.base_path / name).resolve()
        # Only plain names inside the upload directory
        if file_path.parent != self.base_path:
            return None
        return file_path

    def _validate(self, original_name: str, content: bytes) -> str:
        extension = Path(original_name or "").suffix.lower()
        if extension not in self.allowed_extensions:
            raise ValidationException(
                "cv",
                f"Invalid file type. Allowed: {', '.join(sorted(self.allowed_extensions))}"
            )
        if not content:
            raise ValidationException("cv", "File is empty")
        if len(content) > self.max_size_bytes:
            max_mb = self.max_size_bytes / (1024 * 1024)
            raise ValidationException("cv", f"File too large. Maximum size is {max_mb:g}MB")
        return extension

    @staticmethod
    def _generate_name(original_name: str, extension: str) -> str:
        stem = SAFE_STEM.sub("-", Path(original_name).stem).strip("-")[:MAX_STEM_LENGTH] or "file"
        epoch_ms = int(time.time() * 1000)
        return f"{stem}-{epoch_ms}-{secrets.randbelow(10**9)}{extension}"
