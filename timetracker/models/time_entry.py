"""Time entry model definitions."""
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field

from timetracker.models.project import Project


class TimeEntryCreate(BaseModel):
    """
    Time entry creation payload.

    Instants are kept as received (datetime or ISO-8601 text) so that
    unparseable values surface as field errors instead of request errors.
    """

    description: Optional[str] = None
    start: Optional[Union[datetime, str]] = None
    end: Optional[Union[datetime, str]] = None
    duration: Optional[float] = None
    project_id: Optional[str] = Field(None, alias="projectId")

    model_config = {"populate_by_name": True}


class TimeEntryUpdate(BaseModel):
    """Time entry update payload - all fields optional."""

    description: Optional[str] = None
    start: Optional[Union[datetime, str]] = None
    end: Optional[Union[datetime, str]] = None
    duration: Optional[float] = None
    project_id: Optional[str] = Field(None, alias="projectId")

    model_config = {"populate_by_name": True}

    @property
    def clears_project(self) -> bool:
        """True when projectId was sent as an explicit null."""
        return "project_id" in self.model_fields_set and self.project_id is None


class TimerStart(BaseModel):
    """Request model for starting a timer."""

    description: Optional[str] = None
    project_id: Optional[str] = Field(None, alias="projectId")

    model_config = {"populate_by_name": True}


class TimeEntry(BaseModel):
    """Full time entry model with database fields and joined project."""

    id: str = Field(alias="_id", serialization_alias="id")
    description: str
    start: datetime
    end: Optional[datetime] = None
    duration: Optional[int] = None
    project_id: Optional[str] = Field(None, alias="projectId")
    project: Optional[Project] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}

    @property
    def is_active(self) -> bool:
        """An entry without an end is a running timer."""
        return self.end is None


class TodayStats(BaseModel):
    """Aggregates over today's entries."""

    total_entries: int
    total_hours: float
    average_entry_duration: float


class PeriodSummary(BaseModel):
    """Summary figures for one calendar period."""

    period: str
    seconds: int
    entries: int
    projects: int


class SummaryStats(BaseModel):
    """Dashboard summary across day, week and month."""

    day_seconds: int
    week_seconds: int
    month_seconds: int
    day_entries: int
    week_entries: int
    month_entries: int
    active_projects: int
