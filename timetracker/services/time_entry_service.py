"""Time entry service - business logic for time tracking."""
import asyncio
import logging
from datetime import datetime
from typing import Optional

from timetracker.exceptions import NotFoundError, ValidationError, persistence_errors
from timetracker.models.time_entry import (
    PeriodSummary,
    TimeEntry,
    TimeEntryCreate,
    TimeEntryUpdate,
    TodayStats,
)
from timetracker.services.validation import validate_create, validate_update
from timetracker.utils.calendar import SummaryPeriod, get_date_range, today_range
from timetracker.utils.clock import Clock

logger = logging.getLogger(__name__)


class TimeEntryService:
    """
    Service for the time entry lifecycle and summary windows.

    Collaborators are passed in explicitly: a time entry repository, a task
    name repository and a clock. The service keeps no state between calls.
    Several timers may run at once; no single-active-timer rule is enforced.
    """

    def __init__(self, time_entries, task_names, clock: Clock):
        """Initialize service with its collaborators."""
        self.time_entries = time_entries
        self.task_names = task_names
        self.clock = clock

    def _window(self, period: SummaryPeriod) -> tuple[datetime, datetime]:
        return get_date_range(period, self.clock.now(), self.clock.tz)

    async def create_time_entry(self, entry_create: TimeEntryCreate) -> TimeEntry:
        """
        Create a time entry (running timer or completed/manual entry).

        Args:
            entry_create: Raw creation payload

        Returns:
            Stored time entry including its project

        Raises:
            ValidationError: If any field is invalid; nothing is written
            ServiceError: If persistence fails
        """
        result = validate_create(entry_create, self.clock.tz)
        if not result.ok:
            logger.warning("Rejected time entry: %s", sorted(result.field_errors))
            raise ValidationError("Invalid time entry", result.field_errors)

        data = result.value
        with persistence_errors("Failed to create time entry"):
            await self.task_names.find_or_create(data["description"])
            return await self.time_entries.create(data)

    async def update_time_entry(
        self,
        entry_id: str,
        entry_update: TimeEntryUpdate,
    ) -> TimeEntry:
        """
        Apply a partial update to a time entry.

        Args:
            entry_id: Time entry ID
            entry_update: Fields to change; absent fields stay untouched

        Returns:
            Updated time entry including its project

        Raises:
            NotFoundError: If the entry does not exist
            ValidationError: If any supplied field is invalid
            ServiceError: If persistence fails
        """
        with persistence_errors("Failed to update time entry"):
            existing = await self.time_entries.find_by_id(entry_id)

        if existing is None:
            raise NotFoundError("Time entry not found")

        result = validate_update(entry_update, existing, self.clock.tz)
        if not result.ok:
            logger.warning("Rejected update of %s: %s", entry_id, sorted(result.field_errors))
            raise ValidationError("Invalid time entry", result.field_errors)

        data = result.value
        with persistence_errors("Failed to update time entry"):
            if "description" in data:
                await self.task_names.find_or_create(data["description"])
            updated = await self.time_entries.update(entry_id, data)

        # Deleted between the lookup and the write
        if updated is None:
            raise NotFoundError("Time entry not found")
        return updated

    async def delete_time_entry(self, entry_id: str) -> TimeEntry:
        """
        Delete a time entry.

        Raises:
            NotFoundError: If the entry does not exist
        """
        with persistence_errors("Failed to delete time entry"):
            existing = await self.time_entries.find_by_id(entry_id)
            if existing is None:
                raise NotFoundError("Time entry not found")
            deleted = await self.time_entries.delete(entry_id)

        if deleted is None:
            raise NotFoundError("Time entry not found")
        logger.info("Deleted time entry %s", entry_id)
        return deleted

    async def get_time_entry(self, entry_id: str) -> TimeEntry:
        """
        Get a single time entry.

        Raises:
            NotFoundError: If the entry does not exist
        """
        with persistence_errors("Failed to fetch time entry"):
            entry = await self.time_entries.find_by_id(entry_id)
        if entry is None:
            raise NotFoundError("Time entry not found")
        return entry

    async def get_all_time_entries(self) -> list[TimeEntry]:
        with persistence_errors("Failed to fetch time entries"):
            return await self.time_entries.find_all()

    async def get_today_entries(self) -> list[TimeEntry]:
        """Entries starting between local midnight today and tomorrow."""
        start, end = today_range(self.clock.now(), self.clock.tz)
        with persistence_errors("Failed to fetch today entries"):
            return await self.time_entries.find_in_window(start, end)

    async def get_active_timers(self) -> list[TimeEntry]:
        """Running timers, most recently started first."""
        with persistence_errors("Failed to fetch active timers"):
            return await self.time_entries.find_active_timers()

    async def get_entries_by_date_range(
        self,
        start_date: datetime,
        end_date: datetime,
    ) -> list[TimeEntry]:
        with persistence_errors("Failed to fetch entries by date range"):
            return await self.time_entries.find_by_date_range(start_date, end_date)

    async def get_entries_by_project(self, project_id: str) -> list[TimeEntry]:
        with persistence_errors("Failed to fetch entries by project"):
            return await self.time_entries.find_by_project(project_id)

    async def get_report_data(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        project_id: Optional[str] = None,
    ) -> list[TimeEntry]:
        """
        Entries for a report.

        Args:
            start_date: Inclusive lower bound, applied only with end_date
            end_date: Inclusive upper bound, applied only with start_date
            project_id: Optional project filter

        Returns:
            Matching entries, most recent first; everything when no filter is given
        """
        with persistence_errors("Failed to fetch report data"):
            return await self.time_entries.get_report_data(start_date, end_date, project_id)

    async def get_summary_stats(self, period: SummaryPeriod) -> int:
        """Seconds tracked by entries starting in the period."""
        start, end = self._window(period)
        with persistence_errors("Failed to fetch summary stats"):
            return await self.time_entries.sum_duration_in_range(start, end)

    async def get_summary_entry_count(self, period: SummaryPeriod) -> int:
        """Number of entries starting in the period."""
        start, end = self._window(period)
        with persistence_errors("Failed to fetch summary entry count"):
            return await self.time_entries.count_in_range(start, end)

    async def get_summary_distinct_projects_count(self, period: SummaryPeriod) -> int:
        """Number of distinct projects with entries starting in the period."""
        start, end = self._window(period)
        with persistence_errors("Failed to fetch summary project count"):
            return await self.time_entries.count_distinct_projects_in_range(start, end)

    async def get_summary(self, period: SummaryPeriod) -> PeriodSummary:
        """
        All summary figures for one period.

        The three queries run concurrently and may see slightly different
        snapshots if a write lands in between.
        """
        seconds, entries, projects = await asyncio.gather(
            self.get_summary_stats(period),
            self.get_summary_entry_count(period),
            self.get_summary_distinct_projects_count(period),
        )
        return PeriodSummary(
            period=SummaryPeriod(period).value,
            seconds=seconds,
            entries=entries,
            projects=projects,
        )

    async def get_today_stats(self) -> TodayStats:
        """Entry count, tracked hours and average duration for today."""
        entries = await self.get_today_entries()

        total_entries = len(entries)
        total_seconds = sum(entry.duration or 0 for entry in entries)

        return TodayStats(
            total_entries=total_entries,
            total_hours=total_seconds / 3600,
            average_entry_duration=total_seconds / total_entries if total_entries else 0,
        )

    async def start_timer(
        self,
        description: Optional[str],
        project_id: Optional[str] = None,
    ) -> TimeEntry:
        """
        Start a new timer at the current instant.

        Raises:
            ValidationError: If description or project is missing
        """
        entry = await self.create_time_entry(TimeEntryCreate(
            description=description,
            start=self.clock.now(),
            project_id=project_id,
        ))
        logger.info("Started timer %s", entry.id)
        return entry

    async def stop_timer(self, entry_id: str) -> TimeEntry:
        """
        Stop a running timer at the current instant.

        The duration is derived from the stored start.

        Raises:
            NotFoundError: If the entry does not exist
            ValidationError: If the resulting duration is not positive
        """
        entry = await self.update_time_entry(
            entry_id,
            TimeEntryUpdate(end=self.clock.now()),
        )
        logger.info("Stopped timer %s after %ss", entry.id, entry.duration)
        return entry
