"""Project repository - MongoDB access for projects."""
from datetime import datetime, timezone
from typing import Iterable, Optional

from bson import ObjectId
from pymongo import ReturnDocument

from timetracker.models.project import Project, ProjectWithStats


def to_object_id(value: Optional[str]) -> Optional[ObjectId]:
    """Convert an id string to ObjectId, or None if it is not a valid id."""
    if value is None or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


class ProjectRepository:
    """Persistence for Project records."""

    def __init__(self, db):
        """Initialize repository with database connection."""
        self.db = db
        self.projects = db["projects"]
        self.time_entries = db["time_entries"]

    def _doc_to_project(self, doc: dict) -> Project:
        """Convert database document to Project model."""
        return Project(
            _id=str(doc["_id"]),
            name=doc["name"],
            color=doc["color"],
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def find_all(self) -> list[Project]:
        """All projects, newest first."""
        cursor = self.projects.find({}).sort("created_at", -1)
        docs = await cursor.to_list(length=None)
        return [self._doc_to_project(doc) for doc in docs]

    async def find_by_id(self, project_id: str) -> Optional[Project]:
        object_id = to_object_id(project_id)
        if object_id is None:
            return None
        doc = await self.projects.find_one({"_id": object_id})
        return self._doc_to_project(doc) if doc else None

    async def find_by_ids(self, project_ids: Iterable[str]) -> dict[str, Project]:
        """
        Look up several projects at once.

        Returns:
            Mapping of project id to Project; unknown ids are absent
        """
        object_ids = [oid for oid in (to_object_id(pid) for pid in set(project_ids)) if oid]
        if not object_ids:
            return {}
        cursor = self.projects.find({"_id": {"$in": object_ids}})
        docs = await cursor.to_list(length=None)
        return {str(doc["_id"]): self._doc_to_project(doc) for doc in docs}

    async def create(self, name: str, color: str) -> Project:
        now = datetime.now(timezone.utc)
        project_doc = {
            "name": name,
            "color": color,
            "created_at": now,
            "updated_at": now,
        }
        result = await self.projects.insert_one(project_doc)
        project_doc["_id"] = result.inserted_id
        return self._doc_to_project(project_doc)

    async def update(self, project_id: str, data: dict) -> Optional[Project]:
        object_id = to_object_id(project_id)
        if object_id is None:
            return None
        update_doc = {**data, "updated_at": datetime.now(timezone.utc)}
        doc = await self.projects.find_one_and_update(
            {"_id": object_id},
            {"$set": update_doc},
            return_document=ReturnDocument.AFTER,
        )
        return self._doc_to_project(doc) if doc else None

    async def delete(self, project_id: str) -> Optional[Project]:
        object_id = to_object_id(project_id)
        if object_id is None:
            return None
        doc = await self.projects.find_one_and_delete({"_id": object_id})
        return self._doc_to_project(doc) if doc else None

    async def find_with_stats(self) -> list[ProjectWithStats]:
        """
        All projects with tracked hours and entry counts.

        Durations of running timers count as zero.
        """
        projects = await self.find_all()
        pipeline = [
            {"$match": {"project_id": {"$ne": None}}},
            {"$group": {
                "_id": "$project_id",
                "seconds": {"$sum": {"$ifNull": ["$duration", 0]}},
                "count": {"$sum": 1},
            }},
        ]
        rows = await self.time_entries.aggregate(pipeline).to_list(length=None)
        totals = {row["_id"]: row for row in rows}

        result = []
        for project in projects:
            row = totals.get(project.id, {})
            result.append(ProjectWithStats(
                **project.model_dump(),
                tracked_hours=row.get("seconds", 0) / 3600,
                entry_count=row.get("count", 0),
            ))
        return result
