"""
Skill Repository

Stores one JSON document per skill under {base_path}/skills/{id}.json.
"""

from typing import List, Optional

from portfolio.models import Skill

from .document_repository import DocumentRepository


def _matches(skill: Skill, search: str) -> bool:
    needle = search.lower()
    return any(
        needle in (value or "").lower()
        for value in (skill.name, skill.category, skill.description)
    )


class SkillRepository(DocumentRepository[Skill]):
    """Skill documents, listed by category, then level descending, then name."""

    collection = "skills"
    model = Skill

    def list(
        self,
        category: Optional[str] = None,
        level: Optional[int] = None,
        search: Optional[str] = None,
        is_active: Optional[bool] = True,
    ) -> List[Skill]:
        skills = []
        for skill in self.all():
            if is_active is not None and skill.isActive != is_active:
                continue
            if category is not None and skill.category.lower() != category.lower():
                continue
            if level is not None and skill.level != level:
                continue
            if search and not _matches(skill, search):
                continue
            skills.append(skill)

        skills.sort(key=lambda s: (s.category.lower(), -s.level, s.name.lower()))
        return skills
