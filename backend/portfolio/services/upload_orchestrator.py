"""
Upload Orchestrator

Moves each incoming file through
received -> validated -> staged -> stored | rejected | failed
and reports a uniform per-file result.
"""

import logging
from typing import List, Optional, Sequence

from fastapi import UploadFile

from portfolio.middleware.error_handler import MediaError
from portfolio.middleware.file_size_validator import measure_upload_size
from portfolio.models import FileState, PerFileResult

from .asset_store import AssetStore
from .file_validator import UploadPolicy, ViolationKind
from .identifiers import generate_identifier
from .staging import StagingArea

logger = logging.getLogger(__name__)


class UploadOrchestrator:
    """
    Validates, stages and stores uploaded images.

    Exactly one asset store is active; the orchestrator never branches on
    which one. Files are processed in order, and one file's failure never
    affects another's result.
    """

    def __init__(self, store: AssetStore, policy: UploadPolicy, staging: StagingArea):
        self.store = store
        self.policy = policy
        self.staging = staging

    def _rejected(self, filename: str, violations: List[ViolationKind]) -> PerFileResult:
        return PerFileResult(
            filename=filename,
            success=False,
            state=FileState.REJECTED,
            errors=[self.policy.describe(v) for v in violations],
            reasons=[v.value for v in violations],
        )

    async def process_one(
        self,
        file: Optional[UploadFile],
        target_folder: Optional[str] = None,
    ) -> PerFileResult:
        """
        Process a single upload.

        Never raises for per-file problems; the outcome is in the result.
        """
        if file is None or not file.filename:
            return self._rejected("unknown", [ViolationKind.NO_FILE_PROVIDED])

        filename = file.filename
        state = FileState.RECEIVED
        size = await measure_upload_size(file)

        violations = self.policy.validate(file.content_type, size)
        if violations:
            logger.info(f"Rejected {filename}: {[v.value for v in violations]}")
            return self._rejected(filename, violations)
        state = FileState.VALIDATED

        identifier = generate_identifier(filename, keep_extension=self.store.needs_extension)

        try:
            async with self.staging.stage(identifier, file, size) as staged:
                state = FileState.STAGED
                asset = await self.store.put(staged, target_folder=target_folder)
        except MediaError as e:
            logger.error(f"Upload of {filename} failed in state {state.value}: {e.message}")
            return PerFileResult(
                filename=filename,
                success=False,
                state=FileState.FAILED,
                errors=[e.message],
            )
        except Exception as e:
            logger.exception(f"Unexpected error storing {filename}: {e}")
            return PerFileResult(
                filename=filename,
                success=False,
                state=FileState.FAILED,
                errors=[f"Failed to upload image: {str(e) or type(e).__name__}"],
            )

        logger.info(f"Stored {filename} as {asset.identifier} on {self.store.store_name}")
        return PerFileResult(
            filename=filename,
            success=True,
            state=FileState.STORED,
            storedAsset=asset,
        )

    async def process_many(
        self,
        files: Sequence[UploadFile],
        target_folder: Optional[str] = None,
    ) -> List[PerFileResult]:
        """Process files sequentially; results follow input order."""
        results = []
        for file in files:
            results.append(await self.process_one(file, target_folder=target_folder))

        stored = sum(1 for r in results if r.success)
        logger.info(f"Batch upload finished: {stored}/{len(results)} stored")
        return results
