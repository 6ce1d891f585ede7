"""Task name model definitions."""
from datetime import datetime

from pydantic import BaseModel, Field


class TaskNameCreate(BaseModel):
    """Task name creation model."""

    name: str = ""


class TaskName(BaseModel):
    """Registered task name."""

    id: str = Field(alias="_id", serialization_alias="id")
    name: str
    created_at: datetime

    model_config = {"populate_by_name": True}
