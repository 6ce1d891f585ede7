"""Time entry endpoints - time tracking operations."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from timetracker.dependencies import get_time_entry_service
from timetracker.exceptions import NotFoundError, ServiceError, ValidationError
from timetracker.models.time_entry import (
    TimeEntry,
    TimeEntryCreate,
    TimeEntryUpdate,
    TimerStart,
)
from timetracker.services.time_entry_service import TimeEntryService
from timetracker.services.validation import parse_instant


router = APIRouter(prefix="/time-entries", tags=["time-entries"])


def validation_detail(error: ValidationError) -> dict:
    """Response detail for a rejected payload."""
    return {"message": error.message, "field_errors": error.field_errors}


@router.get("", response_model=list[TimeEntry])
async def list_entries(
    today: Optional[bool] = Query(None),
    active: Optional[bool] = Query(None),
    start: Optional[str] = Query(None),
    end: Optional[str] = Query(None),
    project_id: Optional[str] = Query(None, alias="projectId"),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """
    List time entries.

    - today=true: entries started today (local calendar)
    - active=true: running timers
    - start/end/projectId: report filters; dates apply only when both are given
    - no parameters: every entry
    - Results sorted by start descending (most recent first)
    """
    start_date = parse_instant(start, service.clock.tz)
    end_date = parse_instant(end, service.clock.tz)

    try:
        if today:
            return await service.get_today_entries()
        if active:
            return await service.get_active_timers()
        if start_date or end_date or project_id is not None:
            return await service.get_report_data(start_date, end_date, project_id)
        return await service.get_all_time_entries()
    except ServiceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch time entries",
        ) from e


@router.post("", response_model=TimeEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(
    entry_create: TimeEntryCreate,
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """
    Create a time entry.

    - Without end and duration the entry is a running timer
    - Duration is derived from start and end if not provided
    """
    try:
        return await service.create_time_entry(entry_create)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=validation_detail(e))
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.post("/start", response_model=TimeEntry, status_code=status.HTTP_201_CREATED)
async def start_timer(
    timer_start: TimerStart,
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """
    Start a new timer now.

    - Other running timers are left alone
    """
    try:
        return await service.start_timer(
            description=timer_start.description,
            project_id=timer_start.project_id,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=validation_detail(e))
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.post("/{entry_id}/stop", response_model=TimeEntry)
async def stop_timer(
    entry_id: str,
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """Stop a running timer now; duration is derived from its start."""
    try:
        return await service.stop_timer(entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=validation_detail(e))
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get("/{entry_id}", response_model=TimeEntry)
async def get_entry(
    entry_id: str,
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """Get a specific time entry by ID."""
    try:
        return await service.get_time_entry(entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


@router.patch("/{entry_id}", response_model=TimeEntry)
async def update_entry(
    entry_id: str,
    entry_update: TimeEntryUpdate,
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """
    Update a time entry.

    - Only supplied fields change
    - Setting end without duration derives the duration
    """
    try:
        return await service.update_time_entry(entry_id, entry_update)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=validation_detail(e))
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.delete("/{entry_id}", response_model=TimeEntry)
async def delete_entry(
    entry_id: str,
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """
    Delete a time entry.

    - Hard delete (permanent)
    - Returns the deleted entry
    """
    try:
        return await service.delete_time_entry(entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
