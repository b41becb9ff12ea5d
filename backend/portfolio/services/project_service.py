"""
Project Service

Project operations that touch both the document repository and the
asset store. No transaction spans the two; when a document write fails
after assets were stored, the assets are deleted again as a compensating
action and any failure there is logged for offline reconciliation.
"""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import List, Sequence, Tuple

from fastapi import UploadFile
from pydantic import ValidationError

from portfolio.middleware.error_handler import MediaError, ProjectNotFoundError
from portfolio.models import (
    PerFileResult,
    Project,
    ProjectCreate,
    ProjectStatus,
    ProjectUpdate,
    StoredAsset,
)

from .asset_store import AssetStore
from .project_repository import ProjectRepository
from .upload_orchestrator import UploadOrchestrator

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(
        self,
        repository: ProjectRepository,
        store: AssetStore,
        orchestrator: UploadOrchestrator,
    ):
        self.repository = repository
        self.store = store
        self.orchestrator = orchestrator

    def get(self, project_id: str) -> Project:
        project = self.repository.get(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    def create(self, data: ProjectCreate) -> Project:
        return self.repository.create(data)

    async def update(self, project_id: str, changes: ProjectUpdate) -> Project:
        """
        Apply a partial update.

        When ``images`` is replaced, assets no longer referenced are deleted
        from the store after the document is saved.
        """
        project = self.get(project_id)
        merged = project.model_dump()
        merged.update(changes.model_dump(exclude_unset=True))
        merged["updatedAt"] = datetime.now(timezone.utc)

        try:
            updated = Project.model_validate(merged)
        except ValidationError as e:
            raise MediaError(
                "Invalid project update",
                status_code=400,
                details=e.errors(include_url=False, include_context=False, include_input=False),
            )

        self.repository.save(updated)
        logger.info(f"Updated project {project_id}")

        kept = {a.identifier for a in updated.images}
        dropped = [a.identifier for a in project.images if a.identifier not in kept]
        if dropped:
            await self._delete_assets(dropped, f"removed from project {project_id}")
        return updated

    async def set_featured(self, project_id: str, featured: bool) -> Project:
        return await self.update(project_id, ProjectUpdate(featured=featured))

    async def _delete_assets(self, identifiers: List[str], context: str) -> None:
        for result in await self.store.batch_delete(identifiers):
            if not result.success:
                logger.error(f"Could not delete image {result.identifier} {context}: {result.result}")

    async def compensate(self, assets: List[StoredAsset]) -> None:
        """Delete assets whose owning document could not be written."""
        results = await self.store.batch_delete([a.identifier for a in assets])
        for result in results:
            if result.success:
                logger.info(f"Compensating delete removed {result.identifier}")
            else:
                logger.error(
                    f"Orphaned asset needs reconciliation: {result.identifier} "
                    f"on {self.store.store_name} ({result.result})"
                )

    async def attach_images(
        self,
        project_id: str,
        files: Sequence[UploadFile],
    ) -> Tuple[Project, List[PerFileResult]]:
        """
        Upload images and append the stored ones to a project.

        The project is saved only after every asset is stored; if the save
        fails, the new assets are deleted again and the error is raised.
        """
        project = self.get(project_id)
        results = await self.orchestrator.process_many(files)
        stored = [r.storedAsset for r in results if r.success]

        if not stored:
            return project, results

        project.images.extend(stored)
        project.updatedAt = datetime.now(timezone.utc)
        try:
            self.repository.save(project)
        except MediaError:
            logger.error(
                f"Saving project {project_id} failed after storing "
                f"{len(stored)} image(s); running compensating delete"
            )
            await self.compensate(stored)
            raise

        return project, results

    async def delete(self, project_id: str) -> Project:
        """Delete a project and then every asset it references."""
        project = self.get(project_id)
        self.repository.delete(project_id)

        if project.images:
            await self._delete_assets(
                [a.identifier for a in project.images], f"of deleted project {project_id}"
            )
        return project

    def stats(self) -> dict:
        projects = self.repository.list()
        by_status = {status.value: 0 for status in ProjectStatus}
        by_status.update(Counter(p.status.value for p in projects))
        return {
            "total": len(projects),
            "featured": sum(1 for p in projects if p.featured),
            "byStatus": by_status,
            "byCategory": dict(Counter(p.category for p in projects)),
        }
