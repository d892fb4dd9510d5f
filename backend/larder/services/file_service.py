"""
Larder Backend — Temporary Upload Storage
==========================================

What:  Writes an uploaded scan image to the upload directory and removes
       it again once the scan is answered.
How:   The multipart body is streamed in chunks with aiofiles, counting
       bytes as it goes; the file is named with a UUID so no client input
       reaches the file system path.
Who:   ScanService, which pairs every `store_upload()` with a
       `cleanup_file()` in a `finally` block.

Lifecycle of an uploaded file:
    1. store_upload() writes uploads/<uuid><ext>
    2. OCR and label detection read it
    3. cleanup_file() deletes it, success or failure
    4. A failed or oversized write deletes its own partial file before raising
"""

import logging
import os
import re
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
from fastapi import UploadFile

from larder.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

_SAFE_SUFFIX = re.compile(r"\.[a-z0-9]{1,8}")


class FileService:
    """Manages the short-lived upload files of the expiry scan."""

    def __init__(self, upload_dir: str, max_upload_size: int = 10_485_760):
        """
        Args:
            upload_dir: Directory for in-flight uploads; created if missing.
            max_upload_size: Largest accepted upload in bytes.
        """
        self.upload_dir = Path(upload_dir).resolve()
        self.max_upload_size = max_upload_size
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with upload_dir=%s", self.upload_dir)

    def _generate_path(self, filename: Optional[str]) -> Path:
        """
        uploads/<uuid><ext>, keeping the original extension only when it
        is short and alphanumeric.
        """
        suffix = Path(filename or "").suffix.lower()
        if not _SAFE_SUFFIX.fullmatch(suffix):
            suffix = ""
        return self.upload_dir / f"{uuid.uuid4()}{suffix}"

    async def store_upload(self, upload: UploadFile) -> str:
        """
        Stream an upload to disk.

        Returns:
            Absolute path of the stored file.

        Raises:
            ValidationError: The upload exceeds max_upload_size.
            FileStorageError: The file could not be written.
        """
        path = self._generate_path(upload.filename)
        written = 0

        try:
            async with aiofiles.open(path, "wb") as f:
                while chunk := await upload.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > self.max_upload_size:
                        raise ValidationError(
                            message="Image too large",
                            field="image",
                            context={"max_size": self.max_upload_size},
                        )
                    await f.write(chunk)
        except ValidationError:
            await self.cleanup_file(str(path))
            raise
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", path, str(e))
            await self.cleanup_file(str(path))
            raise FileStorageError(
                message="Failed to save uploaded image",
                context={"path": str(path), "os_error": str(e)},
            ) from e

        logger.info("Upload stored: %s (%d bytes)", path.name, written)
        return str(path)

    async def cleanup_file(self, file_path: str) -> None:
        """
        Remove a stored upload if it exists.

        Never raises: a file that cannot be removed is logged as a warning
        and the request carries on.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.debug("Cleaned up upload: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except Exception as e:
            logger.warning("Failed to delete temp file %s: %s", file_path, str(e))
