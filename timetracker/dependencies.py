"""FastAPI dependencies that assemble services from their collaborators."""
from fastapi import Depends

from timetracker.database import get_database
from timetracker.repositories.project_repository import ProjectRepository
from timetracker.repositories.task_name_repository import TaskNameRepository
from timetracker.repositories.time_entry_repository import TimeEntryRepository
from timetracker.services.project_service import ProjectService
from timetracker.services.task_name_service import TaskNameService
from timetracker.services.time_entry_service import TimeEntryService
from timetracker.utils.clock import Clock, get_clock


def get_time_entry_service(
    db=Depends(get_database),
    clock: Clock = Depends(get_clock),
) -> TimeEntryService:
    """Time entry service wired to MongoDB and the wall clock."""
    return TimeEntryService(
        time_entries=TimeEntryRepository(db),
        task_names=TaskNameRepository(db),
        clock=clock,
    )


def get_project_service(db=Depends(get_database)) -> ProjectService:
    return ProjectService(ProjectRepository(db))


def get_task_name_service(db=Depends(get_database)) -> TaskNameService:
    return TaskNameService(TaskNameRepository(db))
