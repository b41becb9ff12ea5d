"""
Project Repository

Stores one JSON document per project under {base_path}/projects/{id}.json.
"""

import logging
from typing import List, Optional, Set

from portfolio.models import Project, ProjectCreate

from .document_repository import DocumentRepository

logger = logging.getLogger(__name__)


class ProjectRepository(DocumentRepository[Project]):
    """Project documents with filtered, newest-first listing."""

    collection = "projects"
    model = Project

    @property
    def projects_path(self):
        return self.collection_path

    def create(self, data: ProjectCreate) -> Project:
        """
        Create and persist a new project.

        Raises:
            LocalIOFailedError: If the document cannot be written
        """
        project = self.insert(data)
        logger.info(f"Created project {project.id}: {project.title}")
        return project

    def list(
        self,
        category: Optional[str] = None,
        status: Optional[str] = None,
        featured: Optional[bool] = None,
    ) -> List[Project]:
        """List projects newest first, optionally filtered."""
        projects = []
        for project in self.all():
            if category is not None and project.category.lower() != category.lower():
                continue
            if status is not None and project.status.value != status:
                continue
            if featured is not None and project.featured != featured:
                continue
            projects.append(project)

        projects.sort(key=lambda p: p.createdAt, reverse=True)
        return projects

    def referenced_identifiers(self) -> Set[str]:
        """Identifiers of every stored image some project still points at."""
        return {asset.identifier for project in self.all() for asset in project.images}
