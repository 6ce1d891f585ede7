"""Time entry repository - MongoDB access for time entries."""
from datetime import datetime, timezone
from typing import Optional

from pymongo import ReturnDocument

from timetracker.models.time_entry import TimeEntry
from timetracker.repositories.project_repository import ProjectRepository, to_object_id


class TimeEntryRepository:
    """
    Persistence for TimeEntry records.

    Every entry returned carries its related project, or None when the entry
    has no project or the project no longer exists.
    """

    def __init__(self, db, projects: Optional[ProjectRepository] = None):
        """Initialize repository with database connection."""
        self.db = db
        self.time_entries = db["time_entries"]
        self.projects = projects or ProjectRepository(db)

    def _doc_to_entry(self, doc: dict, project=None) -> TimeEntry:
        """Convert database document to TimeEntry model."""
        return TimeEntry(
            _id=str(doc["_id"]),
            description=doc.get("description", ""),
            start=doc["start"],
            end=doc.get("end"),
            duration=doc.get("duration"),
            project_id=doc.get("project_id"),
            project=project,
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def _with_projects(self, docs: list[dict]) -> list[TimeEntry]:
        """Join each document to its project."""
        project_ids = [doc["project_id"] for doc in docs if doc.get("project_id")]
        projects = await self.projects.find_by_ids(project_ids) if project_ids else {}
        return [
            self._doc_to_entry(doc, projects.get(doc.get("project_id")))
            for doc in docs
        ]

    async def _find(self, query: dict) -> list[TimeEntry]:
        """Run a query sorted by start, most recent first."""
        cursor = self.time_entries.find(query).sort("start", -1)
        docs = await cursor.to_list(length=None)
        return await self._with_projects(docs)

    @staticmethod
    def _window(start: datetime, end: datetime) -> dict:
        """Half-open [start, end) filter on the start instant."""
        return {"start": {"$gte": start, "$lt": end}}

    async def find_by_id(self, entry_id: str) -> Optional[TimeEntry]:
        object_id = to_object_id(entry_id)
        if object_id is None:
            return None
        doc = await self.time_entries.find_one({"_id": object_id})
        if not doc:
            return None
        return (await self._with_projects([doc]))[0]

    async def find_all(self) -> list[TimeEntry]:
        return await self._find({})

    async def find_by_date_range(self, start: datetime, end: datetime) -> list[TimeEntry]:
        """Entries starting within [start, end], both ends inclusive."""
        return await self._find({"start": {"$gte": start, "$lte": end}})

    async def find_by_project(self, project_id: str) -> list[TimeEntry]:
        return await self._find({"project_id": project_id})

    async def find_active_timers(self) -> list[TimeEntry]:
        """Entries without an end."""
        return await self._find({"end": None})

    async def find_in_window(self, start: datetime, end: datetime) -> list[TimeEntry]:
        """Entries starting within [start, end)."""
        return await self._find(self._window(start, end))

    async def get_report_data(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        project_id: Optional[str] = None,
    ) -> list[TimeEntry]:
        """
        Entries for a report.

        The date filter only applies when both start and end are given. With
        no filters at all this is the full list.
        """
        query: dict = {}
        if start and end:
            query["start"] = {"$gte": start, "$lte": end}
        if project_id:
            query["project_id"] = project_id
        return await self._find(query)

    async def create(self, data: dict) -> TimeEntry:
        now = datetime.now(timezone.utc)
        entry_doc = {
            "description": data["description"],
            "start": data["start"],
            "end": data.get("end"),
            "duration": data.get("duration"),
            "project_id": data.get("project_id"),
            "created_at": now,
            "updated_at": now,
        }
        result = await self.time_entries.insert_one(entry_doc)
        entry_doc["_id"] = result.inserted_id
        return (await self._with_projects([entry_doc]))[0]

    async def update(self, entry_id: str, data: dict) -> Optional[TimeEntry]:
        object_id = to_object_id(entry_id)
        if object_id is None:
            return None
        update_doc = {**data, "updated_at": datetime.now(timezone.utc)}
        doc = await self.time_entries.find_one_and_update(
            {"_id": object_id},
            {"$set": update_doc},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return (await self._with_projects([doc]))[0]

    async def delete(self, entry_id: str) -> Optional[TimeEntry]:
        object_id = to_object_id(entry_id)
        if object_id is None:
            return None
        doc = await self.time_entries.find_one_and_delete({"_id": object_id})
        if not doc:
            return None
        return (await self._with_projects([doc]))[0]

    async def sum_duration_in_range(self, start: datetime, end: datetime) -> int:
        """Total seconds of entries starting in [start, end); running timers add nothing."""
        pipeline = [
            {"$match": {**self._window(start, end), "duration": {"$ne": None}}},
            {"$group": {"_id": None, "total": {"$sum": "$duration"}}},
        ]
        rows = await self.time_entries.aggregate(pipeline).to_list(length=None)
        return int(rows[0]["total"]) if rows else 0

    async def count_in_range(self, start: datetime, end: datetime) -> int:
        return await self.time_entries.count_documents(self._window(start, end))

    async def count_distinct_projects_in_range(self, start: datetime, end: datetime) -> int:
        project_ids = await self.time_entries.distinct(
            "project_id",
            {**self._window(start, end), "project_id": {"$ne": None}},
        )
        return len(project_ids)
