"""
Project Pydantic Models

Request and response schemas for portfolio projects.
"""

from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from .stored_asset import StoredAsset
from .upload_response import PerFileResult


class ProjectStatus(str, Enum):
    """Progress of a portfolio project."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


def _check_dates(start: Optional[date], end: Optional[date]) -> None:
    if start and end and end < start:
        raise ValueError("endDate must not be before startDate")


class ProjectCreate(BaseModel):
    """Fields accepted when creating a project."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    shortDescription: Optional[str] = Field(None, max_length=300)
    category: str = Field(default="Web Development", max_length=100)
    featured: bool = False
    startDate: date
    endDate: date
    status: ProjectStatus = ProjectStatus.NOT_STARTED
    technologies: List[str] = Field(..., min_length=1)
    githubUrl: str = Field(..., min_length=1)
    liveUrl: str = Field(..., min_length=1)
    challenges: List[str] = Field(default_factory=list)
    images: List[StoredAsset] = Field(
        default_factory=list,
        description="Assets already uploaded through /upload-image",
    )

    @model_validator(mode="after")
    def check_dates(self) -> "ProjectCreate":
        _check_dates(self.startDate, self.endDate)
        return self


class ProjectUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    shortDescription: Optional[str] = Field(None, max_length=300)
    category: Optional[str] = Field(None, max_length=100)
    featured: Optional[bool] = None
    startDate: Optional[date] = None
    endDate: Optional[date] = None
    status: Optional[ProjectStatus] = None
    technologies: Optional[List[str]] = Field(None, min_length=1)
    githubUrl: Optional[str] = Field(None, min_length=1)
    liveUrl: Optional[str] = Field(None, min_length=1)
    challenges: Optional[List[str]] = None
    images: Optional[List[StoredAsset]] = None

    @model_validator(mode="after")
    def check_dates(self) -> "ProjectUpdate":
        _check_dates(self.startDate, self.endDate)
        return self


class FeaturedUpdate(BaseModel):
    featured: bool


class Project(ProjectCreate):
    """A persisted project document."""

    id: str
    createdAt: datetime
    updatedAt: datetime


class ProjectResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Project


class ProjectListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[Project]


class ProjectImagesResponse(BaseModel):
    """Result of attaching uploaded images to a project."""

    success: bool
    message: str
    data: List[PerFileResult]
    count: int
    project: Project


class ProjectStatsResponse(BaseModel):
    success: bool = True
    total: int
    featured: int
    byStatus: Dict[str, int]
    byCategory: Dict[str, int]
