"""Summary endpoints - dashboard aggregates."""
import asyncio

from fastapi import APIRouter, Depends, HTTPException, status

from timetracker.dependencies import get_time_entry_service
from timetracker.exceptions import ServiceError
from timetracker.models.time_entry import PeriodSummary, SummaryStats, TodayStats
from timetracker.services.time_entry_service import TimeEntryService
from timetracker.utils.calendar import SummaryPeriod


router = APIRouter(prefix="/summary-stats", tags=["summary-stats"])


@router.get("", response_model=SummaryStats)
async def get_summary_stats(
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """
    Tracked seconds and entry counts for day, week and month, plus the
    number of distinct projects touched this month.
    """
    try:
        day_seconds, week_seconds, month_seconds = await asyncio.gather(
            service.get_summary_stats(SummaryPeriod.DAY),
            service.get_summary_stats(SummaryPeriod.WEEK),
            service.get_summary_stats(SummaryPeriod.MONTH),
        )
        day_entries, week_entries, month_entries, active_projects = await asyncio.gather(
            service.get_summary_entry_count(SummaryPeriod.DAY),
            service.get_summary_entry_count(SummaryPeriod.WEEK),
            service.get_summary_entry_count(SummaryPeriod.MONTH),
            service.get_summary_distinct_projects_count(SummaryPeriod.MONTH),
        )
    except ServiceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch summary stats",
        ) from e

    return SummaryStats(
        day_seconds=day_seconds,
        week_seconds=week_seconds,
        month_seconds=month_seconds,
        day_entries=day_entries,
        week_entries=week_entries,
        month_entries=month_entries,
        active_projects=active_projects,
    )


@router.get("/today", response_model=TodayStats)
async def get_today_stats(
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """Entry count, hours and average duration for today."""
    try:
        return await service.get_today_stats()
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


@router.get("/{period}", response_model=PeriodSummary)
async def get_period_summary(
    period: SummaryPeriod,
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """Seconds, entry count and distinct project count for one period."""
    try:
        return await service.get_summary(period)
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
