"""Service layer for business logic and external integrations."""

from .asset_store import AssetStore
from .file_validator import UploadPolicy, ViolationKind, validate
from .identifiers import generate_identifier
from .local_asset_store import LocalAssetStore
from .remote_asset_store import RemoteAssetStore, RemoteStoreConfig
from .staging import StagedFile, StagingArea
from .upload_orchestrator import UploadOrchestrator
from .document_repository import DocumentRepository
from .project_repository import ProjectRepository
from .project_service import ProjectService
from .skill_repository import SkillRepository
from .skill_service import SkillService
from .contact_repository import ContactRepository
from .contact_service import ContactService
from .store_factory import get_asset_store, reset_store

__all__ = [
    "AssetStore",
    "UploadPolicy",
    "ViolationKind",
    "validate",
    "generate_identifier",
    "LocalAssetStore",
    "RemoteAssetStore",
    "RemoteStoreConfig",
    "StagedFile",
    "StagingArea",
    "UploadOrchestrator",
    "DocumentRepository",
    "ProjectRepository",
    "ProjectService",
    "SkillRepository",
    "SkillService",
    "ContactRepository",
    "ContactService",
    "get_asset_store",
    "reset_store",
]
