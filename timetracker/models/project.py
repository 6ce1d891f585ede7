"""Project model definitions."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ProjectBase(BaseModel):
    """Base project fields."""

    name: str
    color: str


class ProjectCreate(BaseModel):
    """Project creation model."""

    name: str = ""
    color: str = ""


class ProjectUpdate(BaseModel):
    """Project update model - all fields optional."""

    name: Optional[str] = None
    color: Optional[str] = None


class Project(ProjectBase):
    """Full project model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}


class ProjectWithStats(Project):
    """Project with tracked time rollups."""

    tracked_hours: float = 0.0
    entry_count: int = 0


class ProjectStats(BaseModel):
    """Totals across all projects."""

    total_projects: int
    total_hours: float
    active_projects: int
