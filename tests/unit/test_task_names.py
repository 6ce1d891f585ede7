"""Tests for the task name registry."""
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytz
from bson import ObjectId

CREATED = datetime(2025, 11, 12, 9, 0, tzinfo=pytz.UTC)


def make_repository():
    from timetracker.repositories.task_name_repository import TaskNameRepository

    mock_db = MagicMock()
    mock_task_names = MagicMock()
    mock_db.__getitem__.return_value = mock_task_names
    return TaskNameRepository(mock_db), mock_task_names


@pytest.mark.asyncio
class TestTaskNameRepository:
    """Tests for TaskNameRepository."""

    async def test_find_or_create_is_idempotent(self):
        """Test the same name resolves to the same record twice."""
        repo, mock_task_names = make_repository()
        stored = {"_id": ObjectId(), "name": "Reading", "created_at": CREATED}
        mock_task_names.find_one_and_update = AsyncMock(return_value=stored)

        first = await repo.find_or_create("Reading")
        second = await repo.find_or_create("Reading")

        assert first.id == second.id == str(stored["_id"])
        filter_doc, update_doc = mock_task_names.find_one_and_update.call_args[0]
        assert filter_doc == {"name": "Reading"}
        assert "$setOnInsert" in update_doc
        assert mock_task_names.find_one_and_update.call_args[1]["upsert"] is True

    async def test_search_escapes_regex(self):
        repo, mock_task_names = make_repository()
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.to_list = AsyncMock(return_value=[])
        mock_task_names.find.return_value = cursor

        await repo.search("c++")

        query = mock_task_names.find.call_args[0][0]
        assert query == {"name": {"$regex": r"c\+\+", "$options": "i"}}
        cursor.sort.assert_called_once_with("name", 1)

    async def test_find_by_name_missing(self):
        repo, mock_task_names = make_repository()
        mock_task_names.find_one = AsyncMock(return_value=None)

        assert await repo.find_by_name("Nothing") is None


@pytest.mark.asyncio
class TestTaskNameService:
    """Tests for TaskNameService."""

    async def test_blank_search_returns_nothing(self, task_name_repo):
        from timetracker.services.task_name_service import TaskNameService

        service = TaskNameService(task_name_repo)

        assert await service.search("   ") == []
        task_name_repo.search.assert_not_awaited()

    async def test_search_trims_query(self, task_name_repo, make_task_name):
        from timetracker.services.task_name_service import TaskNameService

        task_name_repo.search.return_value = [make_task_name("Reading")]
        service = TaskNameService(task_name_repo)

        results = await service.search("  read ")

        assert [t.name for t in results] == ["Reading"]
        task_name_repo.search.assert_awaited_once_with("read")

    async def test_find_or_create_trims(self, task_name_repo):
        from timetracker.services.task_name_service import TaskNameService

        service = TaskNameService(task_name_repo)

        task_name = await service.find_or_create("  Reading ")

        assert task_name.name == "Reading"
        task_name_repo.find_or_create.assert_awaited_once_with("Reading")

    async def test_find_or_create_blank(self, task_name_repo):
        from timetracker.exceptions import ValidationError
        from timetracker.services.task_name_service import TaskNameService

        service = TaskNameService(task_name_repo)

        with pytest.raises(ValidationError, match="Task name is required"):
            await service.find_or_create(" ")
