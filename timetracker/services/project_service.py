"""Project service - business logic for project management."""
import logging

from timetracker.exceptions import NotFoundError, ValidationError, persistence_errors
from timetracker.models.project import (
    Project,
    ProjectCreate,
    ProjectStats,
    ProjectUpdate,
    ProjectWithStats,
)

logger = logging.getLogger(__name__)


class ProjectService:
    """Service for handling project operations."""

    def __init__(self, projects):
        """Initialize service with a project repository."""
        self.projects = projects

    async def get_all_projects(self) -> list[ProjectWithStats]:
        """All projects with tracked hours and entry counts."""
        with persistence_errors("Failed to fetch projects"):
            return await self.projects.find_with_stats()

    async def get_project_by_id(self, project_id: str) -> Project:
        """
        Get a project by ID.

        Raises:
            NotFoundError: If project not found
        """
        with persistence_errors("Failed to fetch project"):
            project = await self.projects.find_by_id(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        return project

    async def create_project(self, project_create: ProjectCreate) -> Project:
        """
        Create a new project.

        Args:
            project_create: Project creation data

        Returns:
            Created project object

        Raises:
            ValidationError: If name or color is missing
        """
        field_errors = {}
        name = (project_create.name or "").strip()
        if not name:
            field_errors["name"] = "Project name is required"
        if not project_create.color:
            field_errors["color"] = "Project color is required"
        if field_errors:
            raise ValidationError(next(iter(field_errors.values())), field_errors)

        with persistence_errors("Failed to create project"):
            return await self.projects.create(name=name, color=project_create.color)

    async def update_project(
        self,
        project_id: str,
        project_update: ProjectUpdate,
    ) -> Project:
        """
        Update a project.

        Args:
            project_id: Project ID
            project_update: Update data

        Returns:
            Updated project object

        Raises:
            ValidationError: If the new name is blank
            NotFoundError: If project not found
        """
        update_doc = {}

        if project_update.name is not None:
            name = project_update.name.strip()
            if not name:
                raise ValidationError(
                    "Project name cannot be empty",
                    {"name": "Project name cannot be empty"},
                )
            update_doc["name"] = name
        if project_update.color is not None:
            update_doc["color"] = project_update.color

        with persistence_errors("Failed to update project"):
            updated = await self.projects.update(project_id, update_doc)
        if updated is None:
            raise NotFoundError("Project not found")
        return updated

    async def delete_project(self, project_id: str) -> Project:
        """
        Delete a project.

        Entries that referenced it keep their projectId and join to no project.

        Raises:
            NotFoundError: If project not found
        """
        with persistence_errors("Failed to delete project"):
            existing = await self.projects.find_by_id(project_id)
            if existing is None:
                raise NotFoundError("Project not found")
            deleted = await self.projects.delete(project_id)

        if deleted is None:
            raise NotFoundError("Project not found")
        logger.info("Deleted project %s", project_id)
        return deleted

    async def get_project_stats(self) -> ProjectStats:
        """Totals across all projects; every project counts as active."""
        projects = await self.get_all_projects()
        return ProjectStats(
            total_projects=len(projects),
            total_hours=sum(project.tracked_hours for project in projects),
            active_projects=len(projects),
        )
