"""
Project API Routes

CRUD for portfolio projects and attaching uploaded images to them.
Fixed paths are registered before /{project_id} so they are matched first.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from portfolio.config import settings
from portfolio.middleware import NoFileProvidedError, TooManyFilesError
from portfolio.models import (
    FeaturedUpdate,
    ProjectCreate,
    ProjectImagesResponse,
    ProjectListResponse,
    ProjectResponse,
    ProjectStatsResponse,
    ProjectStatus,
    ProjectUpdate,
)
from portfolio.services.project_service import ProjectService
from portfolio.services.store_factory import get_project_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _listing(projects) -> ProjectListResponse:
    return ProjectListResponse(count=len(projects), data=projects)


@router.post("/create", response_model=ProjectResponse, status_code=201)
async def create_project(
    payload: ProjectCreate,
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    """Create a project. Images are assets returned by /upload-image."""
    project = service.create(payload)
    return ProjectResponse(message="Project created successfully", data=project)


@router.get("/admin/stats", response_model=ProjectStatsResponse)
async def project_stats(
    service: ProjectService = Depends(get_project_service),
) -> ProjectStatsResponse:
    return ProjectStatsResponse(**service.stats())


@router.get("/featured", response_model=ProjectListResponse)
async def featured_projects(
    service: ProjectService = Depends(get_project_service),
) -> ProjectListResponse:
    return _listing(service.repository.list(featured=True))


@router.get("/category/{category}", response_model=ProjectListResponse)
async def projects_by_category(
    category: str,
    service: ProjectService = Depends(get_project_service),
) -> ProjectListResponse:
    return _listing(service.repository.list(category=category))


@router.get("/status/{status}", response_model=ProjectListResponse)
async def projects_by_status(
    status: ProjectStatus,
    service: ProjectService = Depends(get_project_service),
) -> ProjectListResponse:
    return _listing(service.repository.list(status=status.value))


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    category: Optional[str] = Query(None),
    status: Optional[ProjectStatus] = Query(None),
    featured: Optional[bool] = Query(None),
    service: ProjectService = Depends(get_project_service),
) -> ProjectListResponse:
    """List projects, newest first."""
    projects = service.repository.list(
        category=category,
        status=status.value if status else None,
        featured=featured,
    )
    return _listing(projects)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return ProjectResponse(data=service.get(project_id))


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    payload: ProjectUpdate,
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    project = await service.update(project_id, payload)
    return ProjectResponse(message="Project updated successfully", data=project)


@router.patch("/{project_id}/featured", response_model=ProjectResponse)
async def toggle_featured(
    project_id: str,
    payload: FeaturedUpdate,
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    project = await service.set_featured(project_id, payload.featured)
    action = "added to" if payload.featured else "removed from"
    return ProjectResponse(message=f"Project {action} featured", data=project)


@router.post("/{project_id}/images", response_model=ProjectImagesResponse)
async def attach_project_images(
    project_id: str,
    images: Optional[List[UploadFile]] = File(None),
    service: ProjectService = Depends(get_project_service),
) -> ProjectImagesResponse:
    """
    Upload images and append the stored ones to the project.

    Per-file failures are reported in ``data``; the request still succeeds.
    """
    if not images:
        raise NoFileProvidedError("No images provided")
    if len(images) > settings.MAX_BATCH_FILES:
        raise TooManyFilesError(len(images), settings.MAX_BATCH_FILES)

    project, results = await service.attach_images(project_id, images)
    stored = sum(1 for r in results if r.success)

    return ProjectImagesResponse(
        success=stored > 0,
        message=f"{stored} image(s) added to project",
        data=results,
        count=stored,
        project=project,
    )


@router.delete("/{project_id}", response_model=ProjectResponse)
async def delete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    """Delete a project together with its stored images."""
    project = await service.delete(project_id)
    return ProjectResponse(message="Project deleted successfully", data=project)
