"""Tests for TimeEntryRepository."""
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytz
from bson import ObjectId

START = datetime(2025, 11, 12, 9, 0, tzinfo=pytz.UTC)


def entry_doc(**overrides):
    doc = {
        "_id": ObjectId(),
        "description": "Reading",
        "start": START,
        "end": None,
        "duration": None,
        "project_id": None,
        "created_at": START,
        "updated_at": START,
    }
    doc.update(overrides)
    return doc


def make_repository(docs=None):
    """Repository over mocked collections; find() yields docs."""
    from timetracker.repositories.time_entry_repository import TimeEntryRepository

    mock_db = MagicMock()
    mock_entries = MagicMock()
    mock_projects = MagicMock()
    mock_db.__getitem__.side_effect = lambda key: {
        "time_entries": mock_entries,
        "projects": mock_projects,
    }[key]

    mock_cursor = MagicMock()
    mock_cursor.to_list = AsyncMock(return_value=docs or [])
    mock_cursor.sort.return_value = mock_cursor
    mock_entries.find.return_value = mock_cursor

    project_cursor = MagicMock()
    project_cursor.to_list = AsyncMock(return_value=[])
    mock_projects.find.return_value = project_cursor

    return TimeEntryRepository(mock_db), mock_entries, mock_projects


@pytest.mark.asyncio
class TestTimeEntryRepositoryQueries:
    """Tests for list queries."""

    async def test_find_all_sorted_by_start_desc(self):
        repo, mock_entries, _ = make_repository([entry_doc(), entry_doc()])

        entries = await repo.find_all()

        assert len(entries) == 2
        mock_entries.find.assert_called_once_with({})
        mock_entries.find.return_value.sort.assert_called_once_with("start", -1)

    async def test_find_active_timers(self):
        repo, mock_entries, _ = make_repository([entry_doc()])

        entries = await repo.find_active_timers()

        assert entries[0].end is None
        mock_entries.find.assert_called_once_with({"end": None})

    async def test_find_in_window_is_half_open(self):
        repo, mock_entries, _ = make_repository()
        end = START + timedelta(days=1)

        await repo.find_in_window(START, end)

        mock_entries.find.assert_called_once_with({"start": {"$gte": START, "$lt": end}})

    async def test_find_by_date_range_is_inclusive(self):
        repo, mock_entries, _ = make_repository()
        end = START + timedelta(days=1)

        await repo.find_by_date_range(START, end)

        mock_entries.find.assert_called_once_with({"start": {"$gte": START, "$lte": end}})

    async def test_find_by_project(self):
        repo, mock_entries, _ = make_repository([entry_doc(project_id="p1")])

        entries = await repo.find_by_project("p1")

        assert entries[0].project_id == "p1"
        mock_entries.find.assert_called_once_with({"project_id": "p1"})
        mock_entries.find.return_value.sort.assert_called_once_with("start", -1)

    async def test_report_with_all_filters(self):
        repo, mock_entries, _ = make_repository()
        end = START + timedelta(days=7)

        await repo.get_report_data(START, end, "p1")

        query = mock_entries.find.call_args[0][0]
        assert query == {"start": {"$gte": START, "$lte": end}, "project_id": "p1"}

    async def test_report_needs_both_dates(self):
        """Test a lone start date does not filter."""
        repo, mock_entries, _ = make_repository()

        await repo.get_report_data(START, None, None)

        mock_entries.find.assert_called_once_with({})

    async def test_report_without_filters_is_full_list(self):
        repo, mock_entries, _ = make_repository([entry_doc()])

        entries = await repo.get_report_data()

        assert len(entries) == 1
        mock_entries.find.assert_called_once_with({})

    async def test_joins_projects(self):
        project_id = ObjectId()
        repo, _, mock_projects = make_repository([
            entry_doc(project_id=str(project_id)),
            entry_doc(project_id=str(ObjectId())),
        ])
        mock_projects.find.return_value.to_list.return_value = [{
            "_id": project_id,
            "name": "Learn Rust",
            "color": "#ff6600",
            "created_at": START,
            "updated_at": START,
        }]

        entries = await repo.find_all()

        assert entries[0].project.name == "Learn Rust"
        # Project of the second entry no longer exists
        assert entries[1].project is None
        assert entries[1].project_id is not None


@pytest.mark.asyncio
class TestTimeEntryRepositoryWrites:
    """Tests for writes."""

    async def test_create(self):
        repo, mock_entries, _ = make_repository()
        mock_entries.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))

        entry = await repo.create({
            "description": "Reading",
            "start": START,
            "end": START + timedelta(minutes=30),
            "duration": 1800,
            "project_id": None,
        })

        assert entry.duration == 1800
        assert entry.project is None
        stored = mock_entries.insert_one.call_args[0][0]
        assert stored["description"] == "Reading"
        assert "created_at" in stored

    async def test_update_missing_returns_none(self):
        repo, mock_entries, _ = make_repository()
        mock_entries.find_one_and_update = AsyncMock(return_value=None)

        assert await repo.update(str(ObjectId()), {"description": "x"}) is None

    async def test_invalid_id_is_not_found(self):
        repo, mock_entries, _ = make_repository()
        mock_entries.find_one = AsyncMock()

        assert await repo.find_by_id("not-an-object-id") is None
        assert await repo.delete("not-an-object-id") is None
        mock_entries.find_one.assert_not_awaited()

    async def test_delete_returns_deleted_entry(self):
        repo, mock_entries, _ = make_repository()
        doc = entry_doc()
        mock_entries.find_one_and_delete = AsyncMock(return_value=doc)

        entry = await repo.delete(str(doc["_id"]))

        assert entry.id == str(doc["_id"])


@pytest.mark.asyncio
class TestTimeEntryRepositoryAggregates:
    """Tests for window aggregates."""

    async def test_sum_duration(self):
        repo, mock_entries, _ = make_repository()
        mock_entries.aggregate.return_value.to_list = AsyncMock(return_value=[{"_id": None, "total": 5400}])
        end = START + timedelta(days=1)

        total = await repo.sum_duration_in_range(START, end)

        assert total == 5400
        pipeline = mock_entries.aggregate.call_args[0][0]
        assert pipeline[0]["$match"]["start"] == {"$gte": START, "$lt": end}
        assert pipeline[0]["$match"]["duration"] == {"$ne": None}

    async def test_sum_duration_empty_window(self):
        repo, mock_entries, _ = make_repository()
        mock_entries.aggregate.return_value.to_list = AsyncMock(return_value=[])

        assert await repo.sum_duration_in_range(START, START + timedelta(days=1)) == 0

    async def test_count_in_range(self):
        repo, mock_entries, _ = make_repository()
        mock_entries.count_documents = AsyncMock(return_value=7)

        assert await repo.count_in_range(START, START + timedelta(days=7)) == 7

    async def test_count_distinct_projects_ignores_null(self):
        repo, mock_entries, _ = make_repository()
        mock_entries.distinct = AsyncMock(return_value=["p1", "p2"])
        end = START + timedelta(days=30)

        count = await repo.count_distinct_projects_in_range(START, end)

        assert count == 2
        field, query = mock_entries.distinct.call_args[0]
        assert field == "project_id"
        assert query["project_id"] == {"$ne": None}
