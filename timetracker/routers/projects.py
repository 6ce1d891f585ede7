"""Project router - API endpoints for project management."""
from fastapi import APIRouter, Depends, HTTPException, status

from timetracker.dependencies import get_project_service
from timetracker.exceptions import NotFoundError, ServiceError, ValidationError
from timetracker.models.project import (
    Project,
    ProjectCreate,
    ProjectStats,
    ProjectUpdate,
    ProjectWithStats,
)
from timetracker.services.project_service import ProjectService


router = APIRouter(prefix="/projects", tags=["projects"])


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    project: ProjectCreate,
    service: ProjectService = Depends(get_project_service),
):
    """
    Create a new project.

    Args:
        project: Project creation data
        service: Project service

    Returns:
        Created project object

    Raises:
        HTTPException: If name or color is missing (400)
    """
    try:
        return await service.create_project(project)
    except ServiceError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )


@router.get("", response_model=list[ProjectWithStats])
async def list_projects(
    service: ProjectService = Depends(get_project_service),
):
    """
    List projects with tracked hours and entry counts.

    Returns:
        List of projects
    """
    try:
        return await service.get_all_projects()
    except ServiceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message,
        )


@router.get("/stats", response_model=ProjectStats)
async def get_project_stats(
    service: ProjectService = Depends(get_project_service),
):
    """Totals across all projects."""
    try:
        return await service.get_project_stats()
    except ServiceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message,
        )


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
):
    """
    Get a project by ID.

    Raises:
        HTTPException: If project not found (404)
    """
    try:
        return await service.get_project_by_id(project_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except ServiceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message,
        )


@router.patch("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    project_update: ProjectUpdate,
    service: ProjectService = Depends(get_project_service),
):
    """
    Update a project.

    Args:
        project_id: Project ID
        project_update: Update data
        service: Project service

    Returns:
        Updated project object

    Raises:
        HTTPException: If project not found (404) or name is blank (400)
    """
    try:
        return await service.update_project(project_id, project_update)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except ServiceError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )


@router.delete("/{project_id}", response_model=Project)
async def delete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
):
    """
    Delete a project.

    Returns:
        The deleted project

    Raises:
        HTTPException: If project not found (404)
    """
    try:
        return await service.delete_project(project_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except ServiceError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
