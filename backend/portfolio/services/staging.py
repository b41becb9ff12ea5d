"""
Upload Staging Service

Writes validated uploads to a scratch directory for exactly one asset store
attempt and guarantees the scratch copy is removed afterward.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import UploadFile

from portfolio.middleware.error_handler import LocalIOFailedError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1MB chunks


@dataclass
class StagedFile:
    """
    A validated upload waiting to be handed to an asset store.

    Backed either by a scratch file on disk (``path``) or by an in-memory
    buffer (``data``).
    """

    identifier: str
    original_filename: str
    content_type: str
    size: int
    path: Optional[Path] = None
    data: Optional[bytes] = None

    def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        return self.path.read_bytes()

    @property
    def discarded(self) -> bool:
        return self.path is None and self.data is None

    def discard(self) -> None:
        """Remove the scratch copy. Safe to call more than once."""
        if self.path is not None:
            try:
                self.path.unlink(missing_ok=True)
                logger.debug(f"Removed staged file {self.path}")
            except OSError as e:
                logger.error(f"Failed to remove staged file {self.path}: {e}")
            self.path = None
        self.data = None


class StagingArea:
    """
    Manages the scratch directory used between validation and storage.

    Handles:
    - Creating the scratch directory once at startup
    - Writing an UploadFile to disk in chunks
    - Deleting the staged copy on every exit path
    """

    def __init__(self, base_path: str = "/tmp/portfolio-staging"):
        self.base_path = Path(base_path)

    def ensure(self) -> None:
        """Create the scratch directory if it does not exist. Idempotent."""
        self.base_path.mkdir(parents=True, exist_ok=True)

    async def write(self, identifier: str, file: UploadFile, size: int) -> StagedFile:
        """
        Write an upload into the scratch directory.

        Raises:
            LocalIOFailedError: If the scratch file cannot be written
        """
        path = self.base_path / identifier
        try:
            await file.seek(0)
            with open(path, "wb") as f:
                while chunk := await file.read(CHUNK_SIZE):
                    f.write(chunk)
        except OSError as e:
            path.unlink(missing_ok=True)
            logger.error(f"Failed to stage upload {file.filename}: {e}")
            raise LocalIOFailedError(str(path), str(e))

        logger.info(f"Staged {file.filename} as {identifier} ({size} bytes)")
        return StagedFile(
            identifier=identifier,
            original_filename=file.filename or "",
            content_type=file.content_type or "",
            size=size,
            path=path,
        )

    @asynccontextmanager
    async def stage(
        self, identifier: str, file: UploadFile, size: int
    ) -> AsyncIterator[StagedFile]:
        """
        Stage an upload and always discard it afterward.

        The staged file is removed on success, on error and on cancellation.
        """
        staged = await self.write(identifier, file, size)
        try:
            yield staged
        finally:
            staged.discard()
