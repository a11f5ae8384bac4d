"""Clock sources and day-granular date helpers."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta


class SystemClock:
    """Local wall-clock time."""

    def now(self) -> datetime:
        return datetime.now()

    def today(self) -> datetime:
        return start_of_day(self.now())


class FixedClock(SystemClock):
    """A clock frozen at a given instant, for tests and dry runs."""

    def __init__(self, instant: datetime | date) -> None:
        if not isinstance(instant, datetime):
            instant = datetime.combine(instant, time.min)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, **kwargs) -> None:
        """Move the clock forward by ``timedelta(**kwargs)``."""
        self._instant += timedelta(**kwargs)

    def set(self, instant: datetime) -> None:
        self._instant = instant


def start_of_day(value: datetime | date) -> datetime:
    if isinstance(value, datetime):
        return value.replace(hour=0, minute=0, second=0, microsecond=0)
    return datetime.combine(value, time.min)


def parse_date(value: str | date | None) -> datetime | None:
    """Parse an expiration date to start-of-day, or ``None`` if invalid.

    Accepts ``YYYY-MM-DD`` strings, ISO datetime strings (the date part is
    used) and ``date``/``datetime`` objects.
    """
    if isinstance(value, (date, datetime)):
        return start_of_day(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        return start_of_day(date.fromisoformat(text))
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    # Aware datetimes are reduced to their calendar date in their own zone
    return start_of_day(parsed.replace(tzinfo=None))


def days_between(later: datetime, earlier: datetime) -> int:
    """Whole calendar days from ``earlier`` to ``later`` (negative if before)."""
    return (start_of_day(later).date() - start_of_day(earlier).date()).days


def seconds_between(later: datetime, earlier: datetime) -> int:
    """Whole seconds from ``earlier`` to ``later``, truncated toward zero."""
    return int((later - earlier).total_seconds())
