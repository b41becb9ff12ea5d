"""
RemoteAssetStore - Stores images on the Cloudinary image CDN.

Talks to the Cloudinary Upload and Admin REST APIs through httpx.
Credentials come from an explicit RemoteStoreConfig handed to the
constructor; nothing is configured globally.
"""

import hashlib
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Set, Union

import httpx

from portfolio.middleware.error_handler import RemoteUploadFailedError
from portfolio.models import DeleteResult, StoredAsset, SweepResult

from .asset_store import AssetStore
from .staging import StagedFile

logger = logging.getLogger(__name__)

# Parameters Cloudinary leaves out of the request signature
UNSIGNED_PARAMS = {"file", "api_key", "resource_type", "cloud_name", "signature"}


@dataclass(frozen=True)
class RemoteStoreConfig:
    """Everything the remote store needs to reach one Cloudinary account."""

    cloud_name: str
    api_key: str
    api_secret: str
    folder: str = "portfolio/projects"
    timeout: float = 30.0
    api_base_url: str = "https://api.cloudinary.com/v1_1"
    delivery_base_url: str = "https://res.cloudinary.com"
    thumbnail_size: int = 200
    upload_transformation: str = "c_limit,h_800,w_1200"
    page_size: int = 500

    @classmethod
    def from_settings(cls, settings) -> "RemoteStoreConfig":
        return cls(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            folder=settings.CLOUDINARY_FOLDER,
            timeout=settings.CLOUDINARY_TIMEOUT,
            thumbnail_size=settings.THUMBNAIL_SIZE,
            upload_transformation=(
                f"c_limit,h_{settings.MAX_IMAGE_HEIGHT},w_{settings.MAX_IMAGE_WIDTH}"
            ),
        )


def sign_params(params: Dict[str, str], api_secret: str) -> str:
    """
    Compute a Cloudinary request signature.

    Parameters are sorted by name, joined as ``k=v`` pairs with ``&``,
    suffixed with the API secret and SHA-1 hashed.
    """
    to_sign = "&".join(
        f"{key}={value}"
        for key, value in sorted(params.items())
        if key not in UNSIGNED_PARAMS and value not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _json(response: httpx.Response) -> Dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _error_message(response: httpx.Response, payload: Dict[str, Any]) -> str:
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return f"HTTP {response.status_code}"


class RemoteAssetStore(AssetStore):
    """
    Asset store backed by Cloudinary.

    Every put attempt consumes its staged file: the scratch copy is removed
    whether the upload succeeds or fails.
    """

    def __init__(
        self,
        config: RemoteStoreConfig,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config
        self._client = client or httpx.AsyncClient(timeout=config.timeout)
        logger.info(f"[CLOUDINARY] Store initialized for cloud '{config.cloud_name}'")

    @property
    def store_name(self) -> str:
        return "remote"

    def _api_url(self, *parts: str) -> str:
        return "/".join([self.config.api_base_url, self.config.cloud_name, *parts])

    def _signed(self, params: Dict[str, str]) -> Dict[str, str]:
        signed = dict(params)
        signed["api_key"] = self.config.api_key
        signed["signature"] = sign_params(params, self.config.api_secret)
        return signed

    def _timestamp(self) -> str:
        return str(int(time.time()))

    async def put(
        self,
        staged: Union[StagedFile, bytes, bytearray, memoryview],
        target_folder: Optional[str] = None,
        desired_identifier: Optional[str] = None,
    ) -> StoredAsset:
        if isinstance(staged, (bytes, bytearray, memoryview)):
            data = bytes(staged)
            staged = StagedFile(
                identifier=desired_identifier or "",
                original_filename=desired_identifier or "upload",
                content_type="application/octet-stream",
                size=len(data),
                data=data,
            )

        identifier = desired_identifier or staged.identifier
        folder = self.config.folder if target_folder is None else target_folder

        params = {"timestamp": self._timestamp()}
        if identifier:
            params["public_id"] = identifier
        if folder:
            params["folder"] = folder
        if self.config.upload_transformation:
            params["transformation"] = self.config.upload_transformation

        try:
            content = staged.read_bytes()
            response = await self._client.post(
                self._api_url("image", "upload"),
                data=self._signed(params),
                files={
                    "file": (
                        staged.original_filename or identifier,
                        content,
                        staged.content_type or "application/octet-stream",
                    )
                },
            )
            payload = _json(response)
            if response.is_error or "public_id" not in payload:
                raise RemoteUploadFailedError(_error_message(response, payload))
        except httpx.HTTPError as e:
            logger.error(f"[CLOUDINARY] Upload error for {identifier}: {e}")
            raise RemoteUploadFailedError(str(e) or type(e).__name__)
        except OSError as e:
            logger.error(f"[CLOUDINARY] Could not read staged file for {identifier}: {e}")
            raise RemoteUploadFailedError(str(e))
        except RemoteUploadFailedError as e:
            logger.error(f"[CLOUDINARY] Upload rejected for {identifier}: {e.details}")
            raise
        finally:
            staged.discard()

        public_id = payload["public_id"]
        logger.info(f"[CLOUDINARY] Upload successful: {public_id}")
        return StoredAsset(
            identifier=public_id,
            primaryUrl=payload.get("secure_url") or payload.get("url", ""),
            derivedUrls={"thumbnail": self.derive_url(public_id)},
            width=payload.get("width"),
            height=payload.get("height"),
            format=payload.get("format", ""),
            byteSize=payload.get("bytes", staged.size),
        )

    def derive_url(
        self,
        identifier: str,
        width: Optional[int] = None,
        height: Optional[int] = None,
        fit: str = "fill",
    ) -> str:
        width = width or self.config.thumbnail_size
        height = height or self.config.thumbnail_size
        transformation = f"c_{fit},g_center,h_{height},w_{width}/f_auto,q_auto"
        return (
            f"{self.config.delivery_base_url}/{self.config.cloud_name}"
            f"/image/upload/{transformation}/{identifier}"
        )

    async def delete(self, identifier: str) -> DeleteResult:
        if not identifier:
            return DeleteResult(identifier=identifier, success=False, result="no identifier")

        params = {
            "public_id": identifier,
            "timestamp": self._timestamp(),
            "invalidate": "true",
        }
        try:
            response = await self._client.post(
                self._api_url("image", "destroy"),
                data=self._signed(params),
            )
        except httpx.HTTPError as e:
            logger.error(f"[CLOUDINARY] Error deleting image {identifier}: {e}")
            return DeleteResult(identifier=identifier, success=False, result=f"error: {e}")

        payload = _json(response)
        result = payload.get("result") or _error_message(response, payload)

        if result == "ok":
            logger.info(f"[CLOUDINARY] Successfully deleted image: {identifier}")
            return DeleteResult(identifier=identifier, success=True, result=result)

        logger.warning(f"[CLOUDINARY] Failed to delete image: {identifier}, result: {result}")
        return DeleteResult(identifier=identifier, success=False, result=result)

    async def list_resources(self, prefix: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List every uploaded image under ``prefix``.

        Follows ``next_cursor`` until the Admin API reports no further page
        or hands back a cursor it already returned.

        Raises:
            httpx.HTTPError: If a page cannot be fetched
        """
        resources = []
        cursor = None
        seen_cursors = set()

        while True:
            params = {"max_results": self.config.page_size}
            if prefix:
                params["prefix"] = prefix
            if cursor:
                params["next_cursor"] = cursor

            response = await self._client.get(
                self._api_url("resources", "image", "upload"),
                params=params,
                auth=(self.config.api_key, self.config.api_secret),
            )
            response.raise_for_status()
            payload = _json(response)

            resources.extend(payload.get("resources", []))
            cursor = payload.get("next_cursor")
            if not cursor:
                return resources
            if cursor in seen_cursors:
                logger.warning(f"[CLOUDINARY] Cursor {cursor} repeated; stopping listing")
                return resources
            seen_cursors.add(cursor)

    async def sweep_older_than(
        self,
        days: int,
        keep: Optional[Set[str]] = None,
        folder: Optional[str] = None,
    ) -> SweepResult:
        """
        Delete images under ``folder`` created more than ``days`` ago,
        except those whose public ID is in ``keep``.
        """
        keep = keep or set()
        prefix = self.config.folder if folder is None else folder
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        summary = SweepResult()

        try:
            resources = await self.list_resources(prefix)
        except httpx.HTTPError as e:
            logger.error(f"[CLOUDINARY] Failed to list resources under '{prefix}': {e}")
            summary.errors.append(f"Failed to list resources: {e}")
            return summary

        expired = []
        for resource in resources:
            if resource.get("public_id") in keep:
                continue
            created_at = _parse_timestamp(resource.get("created_at"))
            if created_at is not None and created_at < cutoff:
                expired.append(resource["public_id"])

        for result in await self.batch_delete(expired):
            if result.success:
                summary.deletedCount += 1
            else:
                summary.errors.append(f"{result.identifier}: {result.result}")

        logger.info(
            f"[CLOUDINARY] Sweep completed: {summary.deletedCount} of "
            f"{len(resources)} images deleted, {len(summary.errors)} errors"
        )
        return summary

    async def close(self) -> None:
        await self._client.aclose()
