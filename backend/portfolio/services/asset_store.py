"""
AssetStore abstraction layer for image storage backends.

Defines the interface for asset stores (local disk, Cloudinary)
allowing the API to swap between stores via configuration.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Set

from portfolio.models import DeleteResult, StoredAsset, SweepResult

from .staging import StagedFile


class AssetStore(ABC):
    """
    Abstract base class for asset stores.

    Defines the interface that all storage backends must implement,
    enabling backend swapping via environment configuration.

    Implementations:
    - LocalAssetStore: Files on local disk served as static files
    - RemoteAssetStore: Cloudinary image CDN
    """

    @abstractmethod
    async def put(
        self,
        staged: StagedFile,
        target_folder: Optional[str] = None,
        desired_identifier: Optional[str] = None,
    ) -> StoredAsset:
        """
        Persist a staged upload.

        Args:
            staged: Validated upload in the scratch area
            target_folder: Store-specific folder override (optional)
            desired_identifier: Identifier to store under (default: staged.identifier)

        Returns:
            StoredAsset: Reference with URLs, dimensions and size

        Raises:
            LocalIOFailedError: Local disk failure
            RemoteUploadFailedError: CDN rejected or failed the upload
        """
        pass

    @abstractmethod
    async def delete(self, identifier: str) -> DeleteResult:
        """
        Delete an asset by identifier.

        Unknown identifiers are reported through a non-success result,
        never raised.
        """
        pass

    async def batch_delete(self, identifiers: List[str]) -> List[DeleteResult]:
        """Delete assets one after another; one failure does not stop the rest."""
        results = []
        for identifier in identifiers:
            results.append(await self.delete(identifier))
        return results

    @abstractmethod
    def derive_url(
        self,
        identifier: str,
        width: Optional[int] = None,
        height: Optional[int] = None,
        fit: str = "fill",
    ) -> str:
        """
        Build the delivery URL of a resized variant. No I/O.
        """
        pass

    @abstractmethod
    async def sweep_older_than(self, days: int, keep: Optional[Set[str]] = None) -> SweepResult:
        """
        Delete every asset older than ``days`` whose identifier is not in ``keep``.

        Per-asset failures are collected in the result, not raised.
        """
        pass

    @property
    @abstractmethod
    def store_name(self) -> str:
        """
        Return store identifier for API responses.

        Returns:
            str: Store name - "local" or "remote"
        """
        pass

    @property
    def needs_extension(self) -> bool:
        """Whether identifiers for this store carry the file extension."""
        return False

    async def close(self) -> None:
        """Release network clients or other resources."""
        return None
