"""
Skill Pydantic Models

Request and response schemas for portfolio skills.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

MIN_SKILL_LEVEL = 1
MAX_SKILL_LEVEL = 10


def _clamp_level(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    return min(MAX_SKILL_LEVEL, max(MIN_SKILL_LEVEL, value))


class SkillCreate(BaseModel):
    """Fields accepted when creating a skill. Levels are clamped to 1-10."""

    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=100)
    level: int = Field(..., description="Proficiency from 1 (beginner) to 10 (expert)")
    description: Optional[str] = Field(None, max_length=1000)
    icon: Optional[str] = Field(None, max_length=100)
    color: Optional[str] = Field(None, max_length=50)
    yearsOfExperience: int = Field(default=0, ge=0)
    isActive: bool = True
    order: int = 0

    @field_validator("name", "category")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("level")
    @classmethod
    def clamp_level(cls, value: int) -> int:
        return _clamp_level(value)


class SkillUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    level: Optional[int] = None
    description: Optional[str] = Field(None, max_length=1000)
    icon: Optional[str] = Field(None, max_length=100)
    color: Optional[str] = Field(None, max_length=50)
    yearsOfExperience: Optional[int] = Field(None, ge=0)
    isActive: Optional[bool] = None
    order: Optional[int] = None

    @field_validator("level")
    @classmethod
    def clamp_level(cls, value: Optional[int]) -> Optional[int]:
        return _clamp_level(value)


class Skill(SkillCreate):
    """A persisted skill document."""

    id: str
    createdAt: datetime
    updatedAt: datetime


class SkillGroup(BaseModel):
    """Skills of one category, as listed on the public site."""

    category: str
    icon: Optional[str] = None
    items: List[Skill]


class SkillResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Skill


class SkillListResponse(BaseModel):
    """Paginated skills grouped by category."""

    success: bool = True
    count: int = Field(..., description="Skills on this page")
    total: int = Field(..., description="Skills matching the filters")
    totalPages: int
    currentPage: int
    data: List[SkillGroup]


class SkillDeleteResponse(BaseModel):
    success: bool = True
    message: str
    data: Dict[str, str]


class SkillStatsResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]
