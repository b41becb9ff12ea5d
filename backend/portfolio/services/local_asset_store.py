"""
LocalAssetStore - Stores images on local disk.

Images are written under a root directory that the API serves as static
files, shrunk to fit the configured bounds, with a square thumbnail for
each image in ``thumbnails/``.
"""

import asyncio
import logging
import shutil
import time
from pathlib import Path
from typing import Optional, Set, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from portfolio.middleware.error_handler import LocalIOFailedError
from portfolio.models import DeleteResult, StoredAsset, SweepResult

from .asset_store import AssetStore
from .staging import StagedFile

logger = logging.getLogger(__name__)

THUMBNAIL_DIR = "thumbnails"

ImageInfo = Tuple[Optional[int], Optional[int], Optional[str]]


def create_thumbnail(source: Path, destination: Path, size: int) -> ImageInfo:
    """
    Read image dimensions and write a centre-cropped square thumbnail.

    Runs in a worker thread; Pillow calls block.

    Returns:
        tuple: (width, height, format) of the source image

    Raises:
        UnidentifiedImageError: If the source is not a readable image
        OSError: If the thumbnail cannot be written
    """
    with Image.open(source) as img:
        width, height = img.size
        source_format = (img.format or "").upper()

        thumb = ImageOps.fit(img, (size, size), centering=(0.5, 0.5))
        save_format = "JPEG" if source_format in ("JPEG", "MPO") else source_format
        if save_format == "JPEG" and thumb.mode not in ("RGB", "L"):
            thumb = thumb.convert("RGB")
        thumb.save(destination, format=save_format or None)

    return width, height, source_format.lower() or None


def normalize_image(path: Path, max_width: int, max_height: int, quality: int) -> bool:
    """
    Shrink an image in place to fit inside max_width x max_height.

    Aspect ratio is kept and smaller images are never enlarged. Animated
    images are left untouched. Runs in a worker thread.

    Returns:
        bool: True if the image was rewritten

    Raises:
        UnidentifiedImageError: If the file is not a readable image
        OSError: If the image cannot be decoded or rewritten
    """
    with Image.open(path) as img:
        if img.width <= max_width and img.height <= max_height:
            return False
        if getattr(img, "is_animated", False):
            return False
        source_format = (img.format or "").upper()
        img.load()
        resized = img.copy()

    resized.thumbnail((max_width, max_height))
    save_format = "JPEG" if source_format in ("JPEG", "MPO") else source_format
    if save_format == "JPEG" and resized.mode not in ("RGB", "L"):
        resized = resized.convert("RGB")
    options = {"quality": quality} if save_format in ("JPEG", "WEBP") else {}

    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        resized.save(tmp_path, format=save_format, **options)
        tmp_path.replace(path)
    finally:
        tmp_path.unlink(missing_ok=True)
    return True


class LocalAssetStore(AssetStore):
    """
    Asset store backed by a local directory.

    Layout:
        {root}/{identifier}
        {root}/thumbnails/{identifier}

    Public URLs:
        {base_url}/{public_prefix}/{identifier}
        {base_url}/{public_prefix}/thumbnails/{identifier}
    """

    def __init__(
        self,
        root: str = "uploads",
        base_url: str = "http://localhost:8000",
        public_prefix: str = "uploads",
        thumbnail_size: int = 200,
        max_width: int = 1200,
        max_height: int = 800,
        quality: int = 85,
    ):
        self.root = Path(root)
        self.thumbnails = self.root / THUMBNAIL_DIR
        self.base_url = base_url.rstrip("/")
        self.public_prefix = public_prefix.strip("/")
        self.thumbnail_size = thumbnail_size
        self.max_width = max_width
        self.max_height = max_height
        self.quality = quality

    @property
    def store_name(self) -> str:
        return "local"

    @property
    def needs_extension(self) -> bool:
        return True

    def ensure_directories(self) -> None:
        """Create the root and thumbnail directories. Idempotent."""
        self.thumbnails.mkdir(parents=True, exist_ok=True)

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url, self.public_prefix, *parts])

    @staticmethod
    def _is_plain_name(identifier: str) -> bool:
        return (
            bool(identifier)
            and Path(identifier).name == identifier
            and identifier not in (".", "..", THUMBNAIL_DIR)
        )

    async def put(
        self,
        staged: StagedFile,
        target_folder: Optional[str] = None,
        desired_identifier: Optional[str] = None,
    ) -> StoredAsset:
        identifier = desired_identifier or staged.identifier
        if not self._is_plain_name(identifier):
            raise LocalIOFailedError(identifier, "Invalid identifier")

        primary = self.root / identifier
        thumbnail = self.thumbnails / identifier
        loop = asyncio.get_event_loop()

        try:
            if staged.path is not None:
                await loop.run_in_executor(None, shutil.copyfile, staged.path, primary)
            else:
                await loop.run_in_executor(None, primary.write_bytes, staged.read_bytes())
        except OSError as e:
            primary.unlink(missing_ok=True)
            logger.error(f"[LOCAL] Failed to store {identifier}: {e}")
            raise LocalIOFailedError(str(primary), str(e))

        try:
            resized = await loop.run_in_executor(
                None, normalize_image, primary, self.max_width, self.max_height, self.quality
            )
            if resized:
                logger.info(
                    f"[LOCAL] Resized {identifier} to fit {self.max_width}x{self.max_height}"
                )
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.warning(f"[LOCAL] Storing {identifier} unresized: {e}")

        byte_size = primary.stat().st_size

        width = height = None
        image_format = Path(identifier).suffix.lstrip(".") or "unknown"
        derived_urls = {}

        try:
            width, height, detected = await loop.run_in_executor(
                None, create_thumbnail, primary, thumbnail, self.thumbnail_size
            )
            image_format = detected or image_format
            derived_urls["thumbnail"] = self._url(THUMBNAIL_DIR, identifier)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            thumbnail.unlink(missing_ok=True)
            logger.warning(f"[LOCAL] Thumbnail creation failed for {identifier}: {e}")

        logger.info(f"[LOCAL] Stored {identifier} ({byte_size} bytes)")
        return StoredAsset(
            identifier=identifier,
            primaryUrl=self._url(identifier),
            derivedUrls=derived_urls,
            width=width,
            height=height,
            format=image_format,
            byteSize=byte_size,
        )

    async def delete(self, identifier: str) -> DeleteResult:
        if not self._is_plain_name(identifier):
            logger.warning(f"[LOCAL] Refusing to delete invalid identifier: {identifier}")
            return DeleteResult(identifier=identifier, success=False, result="not found")

        primary = self.root / identifier
        if not primary.is_file():
            logger.warning(f"[LOCAL] Image not found: {identifier}")
            return DeleteResult(identifier=identifier, success=False, result="not found")

        try:
            primary.unlink()
        except OSError as e:
            logger.error(f"[LOCAL] Failed to delete {identifier}: {e}")
            return DeleteResult(identifier=identifier, success=False, result=str(e))

        # Thumbnail may never have been created
        try:
            (self.thumbnails / identifier).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"[LOCAL] Failed to delete thumbnail of {identifier}: {e}")

        logger.info(f"[LOCAL] Image deleted: {identifier}")
        return DeleteResult(identifier=identifier, success=True, result="ok")

    def derive_url(
        self,
        identifier: str,
        width: Optional[int] = None,
        height: Optional[int] = None,
        fit: str = "fill",
    ) -> str:
        # Only the fixed-size thumbnail exists on disk
        return self._url(THUMBNAIL_DIR, identifier)

    async def sweep_older_than(self, days: int, keep: Optional[Set[str]] = None) -> SweepResult:
        """
        Delete images whose modification time is older than ``days``.

        Images named in ``keep`` are left alone regardless of age. Thumbnails
        are deleted together with their expired image.
        """
        cutoff = time.time() - days * 86400
        keep = keep or set()
        summary = SweepResult()

        if not self.root.exists():
            logger.debug(f"[LOCAL] Storage root does not exist: {self.root}")
            return summary

        try:
            entries = list(self.root.iterdir())
        except OSError as e:
            summary.errors.append(f"Failed to scan {self.root}: {e}")
            logger.error(f"[LOCAL] Failed to scan {self.root}: {e}")
            return summary

        for entry in entries:
            if not entry.is_file() or entry.name in keep:
                continue
            try:
                if entry.stat().st_mtime >= cutoff:
                    continue
                entry.unlink()
                (self.thumbnails / entry.name).unlink(missing_ok=True)
                summary.deletedCount += 1
                logger.info(f"[LOCAL] Deleted old image: {entry.name}")
            except OSError as e:
                summary.errors.append(f"{entry.name}: {e}")
                logger.error(f"[LOCAL] Failed to delete old image {entry.name}: {e}")

        logger.info(
            f"[LOCAL] Sweep completed: {summary.deletedCount} images deleted, "
            f"{len(summary.errors)} errors"
        )
        return summary
