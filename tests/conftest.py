"""Pytest configuration and fixtures."""
from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
import pytz
from bson import ObjectId
from httpx import AsyncClient, ASGITransport

from timetracker.dependencies import (
    get_project_service,
    get_task_name_service,
    get_time_entry_service,
)
from timetracker.main import app
from timetracker.models.project import Project
from timetracker.models.task_name import TaskName
from timetracker.models.time_entry import TimeEntry
from timetracker.repositories.project_repository import ProjectRepository
from timetracker.repositories.task_name_repository import TaskNameRepository
from timetracker.repositories.time_entry_repository import TimeEntryRepository
from timetracker.services.project_service import ProjectService
from timetracker.services.task_name_service import TaskNameService
from timetracker.services.time_entry_service import TimeEntryService
from timetracker.utils.clock import FixedClock

# Wednesday afternoon
NOW = datetime(2025, 11, 12, 15, 30, tzinfo=pytz.UTC)


@pytest.fixture
def fixed_clock():
    """Clock frozen at NOW in UTC."""
    return FixedClock(NOW, pytz.UTC)


@pytest.fixture
def make_project():
    """Factory for Project models."""

    def _make(name="Learn Rust", color="#ff6600", project_id=None):
        return Project(
            _id=project_id or str(ObjectId()),
            name=name,
            color=color,
            created_at=NOW,
            updated_at=NOW,
        )

    return _make


@pytest.fixture
def make_entry():
    """Factory for TimeEntry models."""

    def _make(
        description="Reading chapter 3",
        start=None,
        end=None,
        duration=None,
        project=None,
        entry_id=None,
    ):
        start = start or NOW - timedelta(hours=1)
        return TimeEntry(
            _id=entry_id or str(ObjectId()),
            description=description,
            start=start,
            end=end,
            duration=duration,
            project_id=project.id if project else None,
            project=project,
            created_at=start,
            updated_at=start,
        )

    return _make


@pytest.fixture
def make_task_name():
    """Factory for TaskName models."""

    def _make(name="Reading chapter 3", task_name_id=None):
        return TaskName(_id=task_name_id or str(ObjectId()), name=name, created_at=NOW)

    return _make


@pytest.fixture
def time_entry_repo():
    return AsyncMock(spec=TimeEntryRepository)


@pytest.fixture
def task_name_repo(make_task_name):
    repo = AsyncMock(spec=TaskNameRepository)
    repo.find_or_create.side_effect = lambda name: make_task_name(name)
    return repo


@pytest.fixture
def project_repo():
    return AsyncMock(spec=ProjectRepository)


@pytest.fixture
def time_entry_service(time_entry_repo, task_name_repo, fixed_clock):
    return TimeEntryService(time_entry_repo, task_name_repo, fixed_clock)


@pytest_asyncio.fixture
async def app_client(time_entry_repo, task_name_repo, project_repo, fixed_clock):
    """
    Create a test client with services backed by mock repositories.

    This fixture:
    - Overrides the service dependencies (no MongoDB needed)
    - Yields an async HTTP client for testing
    - Clears the overrides after each test
    """
    app.dependency_overrides[get_time_entry_service] = lambda: TimeEntryService(
        time_entry_repo, task_name_repo, fixed_clock
    )
    app.dependency_overrides[get_project_service] = lambda: ProjectService(project_repo)
    app.dependency_overrides[get_task_name_service] = lambda: TaskNameService(task_name_repo)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
