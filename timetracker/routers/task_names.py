"""Task name endpoints - description autocomplete."""
from fastapi import APIRouter, Depends, HTTPException, Query, status

from timetracker.dependencies import get_task_name_service
from timetracker.exceptions import ServiceError, ValidationError
from timetracker.models.task_name import TaskName, TaskNameCreate
from timetracker.services.task_name_service import TaskNameService


router = APIRouter(prefix="/task-names", tags=["task-names"])


@router.get("", response_model=list[TaskName])
async def search_task_names(
    q: str = Query("", description="Substring to match"),
    service: TaskNameService = Depends(get_task_name_service),
):
    """Task names containing q, sorted by name."""
    try:
        return await service.search(q)
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


@router.post("", response_model=TaskName, status_code=status.HTTP_201_CREATED)
async def create_task_name(
    task_name: TaskNameCreate,
    service: TaskNameService = Depends(get_task_name_service),
):
    """Register a task name; an existing name is returned as is."""
    try:
        return await service.find_or_create(task_name.name)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
