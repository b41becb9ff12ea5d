"""Pydantic models for API request/response schemas."""

from .stored_asset import DeleteResult, StoredAsset, SweepResult
from .upload_response import (
    DeleteImageResponse,
    FileState,
    PerFileResult,
    UploadedImageData,
    UploadImageResponse,
    UploadManyResponse,
)
from .project import (
    Project,
    ProjectCreate,
    ProjectImagesResponse,
    ProjectListResponse,
    ProjectResponse,
    ProjectStatsResponse,
    ProjectStatus,
    ProjectUpdate,
    FeaturedUpdate,
)
from .skill import (
    MAX_SKILL_LEVEL,
    MIN_SKILL_LEVEL,
    Skill,
    SkillCreate,
    SkillDeleteResponse,
    SkillGroup,
    SkillListResponse,
    SkillResponse,
    SkillStatsResponse,
    SkillUpdate,
)
from .contact import (
    Contact,
    ContactDeleteResponse,
    ContactListResponse,
    ContactPriority,
    ContactReceipt,
    ContactResponse,
    ContactStatsResponse,
    ContactSubmit,
    ContactSubmitResponse,
    ContactUpdate,
)

__all__ = [
    "DeleteResult",
    "StoredAsset",
    "SweepResult",
    "DeleteImageResponse",
    "FileState",
    "PerFileResult",
    "UploadedImageData",
    "UploadImageResponse",
    "UploadManyResponse",
    "Project",
    "ProjectCreate",
    "ProjectImagesResponse",
    "ProjectListResponse",
    "ProjectResponse",
    "ProjectStatsResponse",
    "ProjectStatus",
    "ProjectUpdate",
    "FeaturedUpdate",
    "MAX_SKILL_LEVEL",
    "MIN_SKILL_LEVEL",
    "Skill",
    "SkillCreate",
    "SkillDeleteResponse",
    "SkillGroup",
    "SkillListResponse",
    "SkillResponse",
    "SkillStatsResponse",
    "SkillUpdate",
    "Contact",
    "ContactDeleteResponse",
    "ContactListResponse",
    "ContactPriority",
    "ContactReceipt",
    "ContactResponse",
    "ContactStatsResponse",
    "ContactSubmit",
    "ContactSubmitResponse",
    "ContactUpdate",
]
