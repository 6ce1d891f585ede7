"""Clock abstraction so "now" can be injected."""
import logging
from datetime import datetime, tzinfo
from typing import Protocol

import pytz

from timetracker.config import settings
from timetracker.utils.calendar import localize

logger = logging.getLogger(__name__)


class Clock(Protocol):
    """Source of the current instant in the local calendar."""

    tz: tzinfo

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in a fixed time zone."""

    def __init__(self, tz: tzinfo):
        self.tz = tz

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock:
    """Clock frozen at a given instant."""

    def __init__(self, instant: datetime, tz: tzinfo = pytz.UTC):
        self.tz = tz
        self._instant = localize(instant, tz).astimezone(tz)

    def now(self) -> datetime:
        return self._instant


def local_timezone(name: str) -> tzinfo:
    """Time zone for name, falling back to UTC if it is unknown."""
    try:
        return pytz.timezone(name)
    except pytz.exceptions.UnknownTimeZoneError:
        logger.warning("Unknown time zone %r, using UTC", name)
        return pytz.UTC


def get_clock() -> Clock:
    """Dependency providing the wall clock for the configured time zone."""
    return SystemClock(local_timezone(settings.timezone))
