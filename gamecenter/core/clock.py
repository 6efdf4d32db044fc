from datetime import datetime, timedelta
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Local wall-clock time. Timestamps are stored timezone-naive, in venue-local time."""

    def now(self) -> datetime:
        return datetime.now().replace(microsecond=0)


class FixedClock:
    """A clock that only moves when told to. Used by tests and by replay scripts."""

    def __init__(self, current: Optional[datetime] = None):
        self.current = current or datetime(2025, 1, 1, 12, 0)

    def now(self) -> datetime:
        return self.current

    def set(self, current: datetime) -> None:
        self.current = current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


def to_local_naive(value: datetime) -> datetime:
    """Offset-aware input is converted to local wall-clock time; naive input is already local."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
