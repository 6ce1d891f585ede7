"""Validation and derivation rules for time entry writes.

Every function here is pure: it receives the payload (and, for updates, the
stored entry) and returns a ValidationResult instead of raising. The service
layer decides what to do with a failed result.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Any, Generic, Optional, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from timetracker.models.time_entry import TimeEntry, TimeEntryCreate, TimeEntryUpdate
from timetracker.utils.calendar import localize

T = TypeVar("T")

DESCRIPTION_EMPTY = "Task name cannot be empty"
PROJECT_REQUIRED = "Project must be selected"
START_REQUIRED = "Start time is required"
START_INVALID = "Start time is invalid"
END_INVALID = "End time is invalid"
START_AFTER_END = "Start time cannot be after end time"
DURATION_NOT_POSITIVE = "Time duration must be > 0"
DURATION_TOO_LARGE = "Time duration is too large"

# BSON stores integers as signed 64-bit
MAX_DURATION = 2**63 - 1

_instant_adapter = TypeAdapter(datetime)


@dataclass
class ValidationResult(Generic[T]):
    """Either a normalized value or a field-error map."""

    value: Optional[T] = None
    field_errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.field_errors


def parse_instant(value: Any, tz: tzinfo) -> Optional[datetime]:
    """
    Parse a datetime, ISO-8601 string or epoch number into an aware instant.

    Naive values are read in the local time zone.

    Returns:
        The parsed instant, or None if the value cannot be parsed
    """
    if value is None or value == "":
        return None
    try:
        parsed = _instant_adapter.validate_python(value)
    except PydanticValidationError:
        return None
    return localize(parsed, tz)


def derive_duration(start: datetime, end: datetime) -> int:
    """Whole seconds between start and end, rounded down."""
    return math.floor((end - start).total_seconds())


def _check_duration(duration: Optional[float]) -> tuple[Optional[int], Optional[str]]:
    """
    Normalize a duration to whole seconds and check it is positive and storable.

    Returns:
        Tuple of (seconds, error message or None)
    """
    if duration is None:
        return None, None
    if not math.isfinite(duration):
        return None, DURATION_NOT_POSITIVE
    seconds = math.floor(duration)
    if seconds <= 0:
        return seconds, DURATION_NOT_POSITIVE
    if seconds > MAX_DURATION:
        return None, DURATION_TOO_LARGE
    return seconds, None


def validate_create(payload: TimeEntryCreate, tz: tzinfo) -> ValidationResult[dict]:
    """
    Validate a creation payload and derive missing fields.

    Args:
        payload: Raw creation payload
        tz: Local time zone for naive instants

    Returns:
        Result holding the document to persist, or the field errors
    """
    errors: dict[str, str] = {}

    description = (payload.description or "").strip()
    if not description:
        errors["description"] = DESCRIPTION_EMPTY

    if payload.project_id is None:
        errors["projectId"] = PROJECT_REQUIRED

    start = parse_instant(payload.start, tz)
    if start is None:
        errors["start"] = START_REQUIRED

    end_supplied = payload.end is not None and payload.end != ""
    end = parse_instant(payload.end, tz) if end_supplied else None
    if end_supplied and end is None:
        errors["end"] = END_INVALID

    if start is not None and end is not None and start > end:
        errors["end"] = START_AFTER_END

    # A manual entry keeps its explicit duration; otherwise derive it from the span
    duration: Optional[float] = payload.duration
    if duration is None and start is not None and end is not None:
        duration = derive_duration(start, end)

    seconds, duration_error = _check_duration(duration)
    if duration_error:
        errors["duration"] = duration_error
    elif seconds is None and end_supplied:
        errors["duration"] = DURATION_NOT_POSITIVE

    if errors:
        return ValidationResult(field_errors=errors)

    return ValidationResult(value={
        "description": description,
        "start": start,
        "end": end,
        "duration": seconds,
        "project_id": payload.project_id,
    })


def validate_update(
    payload: TimeEntryUpdate,
    existing: Optional[TimeEntry],
    tz: tzinfo,
) -> ValidationResult[dict]:
    """
    Validate a partial update payload.

    Only supplied fields are checked and returned. When an end is supplied
    without a duration, the duration is derived from the supplied start or,
    failing that, the stored start.

    Args:
        payload: Partial update payload
        existing: Currently stored entry, if known
        tz: Local time zone for naive instants

    Returns:
        Result holding the fields to set, or the field errors
    """
    errors: dict[str, str] = {}
    update: dict[str, Any] = {}

    if payload.description is not None:
        description = payload.description.strip()
        if not description:
            errors["description"] = DESCRIPTION_EMPTY
        update["description"] = description

    if payload.clears_project:
        errors["projectId"] = PROJECT_REQUIRED
    elif payload.project_id is not None:
        update["project_id"] = payload.project_id

    # Empty strings count as not supplied, as on create
    start = None
    if payload.start is not None and payload.start != "":
        start = parse_instant(payload.start, tz)
        if start is None:
            errors["start"] = START_INVALID
        else:
            update["start"] = start

    end = None
    if payload.end is not None and payload.end != "":
        end = parse_instant(payload.end, tz)
        if end is None:
            errors["end"] = END_INVALID
        else:
            update["end"] = end

    effective_start = start if start is not None else (existing.start if existing else None)
    if effective_start is not None:
        effective_start = localize(effective_start, tz)

    duration: Optional[float] = payload.duration
    if end is not None and duration is None and effective_start is not None:
        duration = derive_duration(effective_start, end)

    effective_end = end if end is not None else (existing.end if existing else None)
    if effective_end is not None:
        effective_end = localize(effective_end, tz)
    if (
        effective_start is not None
        and effective_end is not None
        and effective_start > effective_end
        and "end" not in errors
        and "start" not in errors
    ):
        errors["end"] = START_AFTER_END

    seconds, duration_error = _check_duration(duration)
    if duration_error:
        errors["duration"] = duration_error
    elif seconds is not None:
        update["duration"] = seconds

    if errors:
        return ValidationResult(field_errors=errors)

    return ValidationResult(value=update)
