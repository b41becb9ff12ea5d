"""
Store factory for asset backend selection.

Returns the AssetStore selected by STORAGE_BACKEND and the collaborators
built around it.
"""

import logging

from fastapi import Depends

from portfolio.config import settings
from .asset_store import AssetStore
from .contact_repository import ContactRepository
from .contact_service import ContactService
from .file_validator import UploadPolicy
from .local_asset_store import LocalAssetStore
from .project_repository import ProjectRepository
from .project_service import ProjectService
from .remote_asset_store import RemoteAssetStore, RemoteStoreConfig
from .skill_repository import SkillRepository
from .skill_service import SkillService
from .staging import StagingArea
from .upload_orchestrator import UploadOrchestrator

logger = logging.getLogger(__name__)

# Singleton store instance
_store_instance: AssetStore | None = None


def build_asset_store() -> AssetStore:
    """
    Construct the store selected by configuration.

    Returns:
        AssetStore: LocalAssetStore if STORAGE_BACKEND=local,
                    RemoteAssetStore if STORAGE_BACKEND=remote
    """
    if settings.STORAGE_BACKEND == "remote":
        logger.info("Initializing RemoteAssetStore (STORAGE_BACKEND=remote)")
        return RemoteAssetStore(RemoteStoreConfig.from_settings(settings))

    logger.info(
        f"Initializing LocalAssetStore (STORAGE_BACKEND=local) at {settings.LOCAL_STORAGE_ROOT}"
    )
    store = LocalAssetStore(
        root=settings.LOCAL_STORAGE_ROOT,
        base_url=settings.PUBLIC_BASE_URL,
        public_prefix=settings.LOCAL_PUBLIC_PREFIX,
        thumbnail_size=settings.THUMBNAIL_SIZE,
        max_width=settings.MAX_IMAGE_WIDTH,
        max_height=settings.MAX_IMAGE_HEIGHT,
        quality=settings.IMAGE_QUALITY,
    )
    store.ensure_directories()
    return store


def get_asset_store() -> AssetStore:
    """
    Get the configured asset store instance.

    Uses singleton pattern so one store (and one HTTP client) serves all requests.
    """
    global _store_instance

    if _store_instance is None:
        _store_instance = build_asset_store()

    return _store_instance


async def reset_store() -> None:
    """
    Close and reset the store singleton.

    Used at shutdown and by tests to force a fresh store.
    """
    global _store_instance
    if _store_instance is not None:
        await _store_instance.close()
    _store_instance = None
    logger.info("Asset store singleton reset")


def get_upload_policy() -> UploadPolicy:
    return UploadPolicy.from_values(settings.ALLOWED_MIME_TYPES, settings.MAX_UPLOAD_SIZE)


def get_staging_area() -> StagingArea:
    return StagingArea(settings.STAGING_PATH)


def get_upload_orchestrator(
    store: AssetStore = Depends(get_asset_store),
    policy: UploadPolicy = Depends(get_upload_policy),
    staging: StagingArea = Depends(get_staging_area),
) -> UploadOrchestrator:
    """FastAPI dependency wiring the orchestrator to the active store."""
    return UploadOrchestrator(store=store, policy=policy, staging=staging)


def get_project_repository() -> ProjectRepository:
    return ProjectRepository(base_path=settings.STORAGE_PATH)


def get_project_service(
    store: AssetStore = Depends(get_asset_store),
    orchestrator: UploadOrchestrator = Depends(get_upload_orchestrator),
    repository: ProjectRepository = Depends(get_project_repository),
) -> ProjectService:
    """FastAPI dependency for project operations."""
    return ProjectService(
        repository=repository,
        store=store,
        orchestrator=orchestrator,
    )


def get_skill_repository() -> SkillRepository:
    return SkillRepository(base_path=settings.STORAGE_PATH)


def get_skill_service(
    repository: SkillRepository = Depends(get_skill_repository),
) -> SkillService:
    return SkillService(repository)


def get_contact_repository() -> ContactRepository:
    return ContactRepository(base_path=settings.STORAGE_PATH)


def get_contact_service(
    repository: ContactRepository = Depends(get_contact_repository),
) -> ContactService:
    return ContactService(repository)
