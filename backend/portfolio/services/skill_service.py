"""
Skill Service

Skill CRUD plus the grouped public listing and the admin statistics.
"""

import logging
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from pydantic import ValidationError

from portfolio.middleware.error_handler import MediaError, SkillNotFoundError
from portfolio.models import (
    MAX_SKILL_LEVEL,
    MIN_SKILL_LEVEL,
    Skill,
    SkillCreate,
    SkillGroup,
    SkillUpdate,
)

from .document_repository import Page, paginate
from .skill_repository import SkillRepository

logger = logging.getLogger(__name__)

RECENT_DAYS = 30

# Inclusive upper bound of each proficiency band
LEVEL_BANDS = (("beginner", 3), ("intermediate", 6), ("advanced", 8), ("expert", MAX_SKILL_LEVEL))


def group_by_category(skills: List[Skill]) -> List[SkillGroup]:
    """Group already-sorted skills; a group's icon is its first skill's icon."""
    groups: "OrderedDict[str, SkillGroup]" = OrderedDict()
    for skill in skills:
        group = groups.get(skill.category)
        if group is None:
            group = groups[skill.category] = SkillGroup(
                category=skill.category, icon=skill.icon, items=[]
            )
        group.items.append(skill)
    return list(groups.values())


def level_band(level: int) -> str:
    for band, upper in LEVEL_BANDS:
        if level <= upper:
            return band
    return LEVEL_BANDS[-1][0]


class SkillService:
    def __init__(self, repository: SkillRepository):
        self.repository = repository

    def get(self, skill_id: str) -> Skill:
        skill = self.repository.get(skill_id)
        if skill is None:
            raise SkillNotFoundError(skill_id)
        return skill

    def create(self, data: SkillCreate) -> Skill:
        return self.repository.insert(data)

    def list(
        self,
        category: Optional[str] = None,
        level: Optional[int] = None,
        search: Optional[str] = None,
        is_active: Optional[bool] = True,
        page: int = 1,
        limit: int = 100,
    ) -> Tuple[Page, List[SkillGroup]]:
        skills = self.repository.list(
            category=category, level=level, search=search, is_active=is_active
        )
        result = paginate(skills, page, limit)
        return result, group_by_category(result.items)

    def update(self, skill_id: str, changes: SkillUpdate) -> Skill:
        skill = self.get(skill_id)
        merged = skill.model_dump()
        merged.update(changes.model_dump(exclude_unset=True))
        merged["updatedAt"] = datetime.now(timezone.utc)

        try:
            updated = Skill.model_validate(merged)
        except ValidationError as e:
            raise MediaError(
                "Invalid skill update",
                status_code=400,
                details=e.errors(include_url=False, include_context=False, include_input=False),
            )

        logger.info(f"Updated skill {skill_id}")
        return self.repository.save(updated)

    def delete(self, skill_id: str) -> Skill:
        skill = self.get(skill_id)
        self.repository.delete(skill_id)
        return skill

    def stats(self) -> dict:
        """Aggregates over active skills."""
        skills = self.repository.list(is_active=True)
        total = len(skills)
        now = datetime.now(timezone.utc)

        by_category = []
        for group in group_by_category(skills):
            levels = [s.level for s in group.items]
            by_category.append({
                "category": group.category,
                "count": len(levels),
                "averageLevel": round(sum(levels) / len(levels), 1),
                "icon": group.icon,
            })
        by_category.sort(key=lambda c: c["count"], reverse=True)

        by_level = []
        for level in range(MIN_SKILL_LEVEL, MAX_SKILL_LEVEL + 1):
            count = sum(1 for s in skills if s.level == level)
            by_level.append({
                "level": level,
                "count": count,
                "percentage": round(count / total * 100) if total else 0,
            })

        summary = {band: 0 for band, _ in LEVEL_BANDS}
        for skill in skills:
            summary[level_band(skill.level)] += 1

        return {
            "totalSkills": total,
            "totalCategories": len(by_category),
            "averageSkillsPerCategory": round(total / len(by_category)) if by_category else 0,
            "averageSkillLevel": round(sum(s.level for s in skills) / total, 1) if total else 0,
            "recentSkills": sum(
                1 for s in skills if s.createdAt >= now - timedelta(days=RECENT_DAYS)
            ),
            "skillsByCategory": by_category,
            "skillsByLevel": by_level,
            "summary": summary,
            "lastUpdated": now.isoformat(),
        }
