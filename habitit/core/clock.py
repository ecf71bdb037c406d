"""Single source of "now" and "today" for the engine."""

from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo


class Clock:
    """
    Wall clock bound to one timezone.

    Day boundaries everywhere in the engine are the local midnight of this
    zone. With no timezone the system's local time is used.
    """

    def __init__(self, timezone: Optional[str] = None):
        self.tz = ZoneInfo(timezone) if timezone else None

    def now(self) -> datetime:
        if self.tz is None:
            return datetime.now().astimezone()
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


class FixedClock(Clock):
    """Clock frozen at a given moment."""

    def __init__(self, moment: datetime):
        super().__init__()
        self.tz = moment.tzinfo
        self.moment = moment

    def now(self) -> datetime:
        return self.moment

    def advance(self, **kwargs) -> None:
        """Move the clock forward by a timedelta's keyword arguments."""
        self.moment = self.moment + timedelta(**kwargs)
