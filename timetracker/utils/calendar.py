"""Calendar-aligned summary windows in the local time zone."""
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum


class SummaryPeriod(str, Enum):
    """Logical summary periods."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def _midnight(day: date, tz: tzinfo) -> datetime:
    """
    Local midnight at the start of a calendar day.

    pytz zones must go through localize() to pick the right UTC offset on
    DST transition days.
    """
    naive = datetime.combine(day, time.min)
    if hasattr(tz, "localize"):
        return tz.localize(naive)
    return naive.replace(tzinfo=tz)


def localize(value: datetime, tz: tzinfo) -> datetime:
    """
    Attach the local time zone to a naive datetime.

    Aware datetimes are returned unchanged.
    """
    if value.tzinfo is not None:
        return value
    if hasattr(tz, "localize"):
        return tz.localize(value)
    return value.replace(tzinfo=tz)


def get_date_range(
    period: SummaryPeriod,
    now: datetime,
    tz: tzinfo,
) -> tuple[datetime, datetime]:
    """
    Map a summary period to a half-open window [start, end) around now.

    Args:
        period: day, week or month
        now: Current instant
        tz: Time zone defining the local calendar

    Returns:
        Tuple of (start, end), both at local midnight

    Examples:
        On Wednesday 2025-11-12 the week window is
        [Monday 2025-11-10 00:00, Monday 2025-11-17 00:00).
    """
    period = SummaryPeriod(period)
    today = localize(now, tz).astimezone(tz).date()

    if period == SummaryPeriod.DAY:
        return _midnight(today, tz), _midnight(today + timedelta(days=1), tz)

    if period == SummaryPeriod.WEEK:
        # Weeks start on Monday; date.weekday() is 0 for Monday
        monday = today - timedelta(days=today.weekday())
        return _midnight(monday, tz), _midnight(monday + timedelta(days=7), tz)

    first = today.replace(day=1)
    if first.month == 12:
        next_first = first.replace(year=first.year + 1, month=1)
    else:
        next_first = first.replace(month=first.month + 1)
    return _midnight(first, tz), _midnight(next_first, tz)


def today_range(now: datetime, tz: tzinfo) -> tuple[datetime, datetime]:
    """Window from local midnight today to local midnight tomorrow."""
    return get_date_range(SummaryPeriod.DAY, now, tz)
