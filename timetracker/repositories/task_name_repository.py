"""Task name repository - MongoDB access for the task name registry."""
import re
from datetime import datetime, timezone
from typing import Optional

from pymongo import ReturnDocument

from timetracker.models.task_name import TaskName


class TaskNameRepository:
    """Deduplicated registry of task descriptions."""

    def __init__(self, db):
        """Initialize repository with database connection."""
        self.db = db
        self.task_names = db["task_names"]

    def _doc_to_task_name(self, doc: dict) -> TaskName:
        return TaskName(
            _id=str(doc["_id"]),
            name=doc["name"],
            created_at=doc["created_at"],
        )

    async def find_all(self) -> list[TaskName]:
        cursor = self.task_names.find({}).sort("name", 1)
        docs = await cursor.to_list(length=None)
        return [self._doc_to_task_name(doc) for doc in docs]

    async def find_by_name(self, name: str) -> Optional[TaskName]:
        doc = await self.task_names.find_one({"name": name})
        return self._doc_to_task_name(doc) if doc else None

    async def search(self, query: str) -> list[TaskName]:
        """Names containing query, case-insensitive, sorted by name."""
        cursor = self.task_names.find(
            {"name": {"$regex": re.escape(query), "$options": "i"}}
        ).sort("name", 1)
        docs = await cursor.to_list(length=None)
        return [self._doc_to_task_name(doc) for doc in docs]

    async def find_or_create(self, name: str) -> TaskName:
        """
        Return the task name record for name, creating it if missing.

        The upsert is atomic, so repeated calls with the same name resolve to
        the same record.
        """
        doc = await self.task_names.find_one_and_update(
            {"name": name},
            {"$setOnInsert": {"created_at": datetime.now(timezone.utc)}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return self._doc_to_task_name(doc)
