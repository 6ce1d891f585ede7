"""Task name service - autocomplete and registration of task names."""
from timetracker.exceptions import ValidationError, persistence_errors
from timetracker.models.task_name import TaskName


class TaskNameService:
    """Service for the task name registry."""

    def __init__(self, task_names):
        """Initialize service with a task name repository."""
        self.task_names = task_names

    async def search(self, query: str) -> list[TaskName]:
        """Names containing query; a blank query matches nothing."""
        q = (query or "").strip()
        if not q:
            return []
        with persistence_errors("Failed to search task names"):
            return await self.task_names.search(q)

    async def find_or_create(self, name: str) -> TaskName:
        """
        Register a task name, returning the existing record if present.

        Raises:
            ValidationError: If name is blank
        """
        trimmed = (name or "").strip()
        if not trimmed:
            raise ValidationError("Task name is required", {"name": "Task name is required"})
        with persistence_errors("Failed to create task name"):
            return await self.task_names.find_or_create(trimmed)
