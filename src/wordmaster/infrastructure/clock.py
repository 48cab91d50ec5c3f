"""Clock adapters."""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from wordmaster.domain.ports import Clock


class SystemClock(Clock):
    """
    Wall-clock time in a fixed zone, or the system local zone when none is given.
    """

    def __init__(self, tz: str | None = None):
        self.tz = ZoneInfo(tz) if tz else None

    def now(self) -> datetime:
        if self.tz is None:
            return datetime.now().astimezone()
        return datetime.now(self.tz)


class FixedClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, now: datetime):
        if now.tzinfo is None:
            raise ValueError("FixedClock needs a timezone-aware datetime")
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, **delta: float) -> datetime:
        self._now = self._now + timedelta(**delta)
        return self._now
