"""
Skill API Routes

Public grouped listing plus admin CRUD for skills.
Fixed paths are registered before /{skill_id} so they are matched first.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from portfolio.models import (
    MAX_SKILL_LEVEL,
    MIN_SKILL_LEVEL,
    SkillCreate,
    SkillDeleteResponse,
    SkillListResponse,
    SkillResponse,
    SkillStatsResponse,
    SkillUpdate,
)
from portfolio.services.skill_service import SkillService
from portfolio.services.store_factory import get_skill_service

router = APIRouter()


@router.get("/admin/stats", response_model=SkillStatsResponse)
async def skill_stats(
    service: SkillService = Depends(get_skill_service),
) -> SkillStatsResponse:
    return SkillStatsResponse(data=service.stats())


@router.post("/create", response_model=SkillResponse, status_code=201)
async def create_skill(
    payload: SkillCreate,
    service: SkillService = Depends(get_skill_service),
) -> SkillResponse:
    skill = service.create(payload)
    return SkillResponse(message="Skill created successfully", data=skill)


@router.get("", response_model=SkillListResponse)
async def list_skills(
    category: Optional[str] = Query(None),
    level: Optional[int] = Query(None, ge=MIN_SKILL_LEVEL, le=MAX_SKILL_LEVEL),
    search: Optional[str] = Query(None),
    isActive: Optional[bool] = Query(True),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=100),
    service: SkillService = Depends(get_skill_service),
) -> SkillListResponse:
    """List skills grouped by category, highest level first within a category."""
    result, groups = service.list(
        category=category,
        level=level,
        search=search,
        is_active=isActive,
        page=page,
        limit=limit,
    )
    return SkillListResponse(
        count=len(result.items),
        total=result.total,
        totalPages=result.total_pages,
        currentPage=result.page,
        data=groups,
    )


@router.get("/{skill_id}", response_model=SkillResponse)
async def get_skill(
    skill_id: str,
    service: SkillService = Depends(get_skill_service),
) -> SkillResponse:
    return SkillResponse(data=service.get(skill_id))


@router.put("/{skill_id}", response_model=SkillResponse)
async def update_skill(
    skill_id: str,
    payload: SkillUpdate,
    service: SkillService = Depends(get_skill_service),
) -> SkillResponse:
    skill = service.update(skill_id, payload)
    return SkillResponse(message="Skill updated successfully", data=skill)


@router.delete("/{skill_id}", response_model=SkillDeleteResponse)
async def delete_skill(
    skill_id: str,
    service: SkillService = Depends(get_skill_service),
) -> SkillDeleteResponse:
    skill = service.delete(skill_id)
    return SkillDeleteResponse(
        message="Skill deleted successfully",
        data={"deletedId": skill.id},
    )
