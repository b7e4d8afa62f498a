"""
Local Calendar Time Adapter.

Implements the presence TimePort for a single fixed reference timezone.
The local day (calendar date in that timezone) is the unit of residency
counting.

Key behaviors:
- now_utc: Returns current UTC time
- today_local: Calendar date in the reference timezone
- to_local / local_date: Naive datetimes are taken as UTC
- DST transitions handled by zoneinfo
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/Toronto"


class LocalTimeAdapter:
    """
    Time adapter for one IANA timezone.

    Storage stays in UTC; only day boundaries use the local calendar.
    """

    def __init__(self, tz_name: str = DEFAULT_TIMEZONE) -> None:
        """
        Initialize with specified timezone.

        Args:
            tz_name: IANA timezone name (default: America/Toronto)
        """
        self._tz = ZoneInfo(tz_name)

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        return datetime.now(UTC)

    def now_local(self) -> datetime:
        """Get current time in the reference timezone."""
        return datetime.now(self._tz)

    def today_local(self) -> date:
        """Get today's calendar date in the reference timezone."""
        return self.now_local().date()

    def to_local(self, utc_dt: datetime) -> datetime:
        """
        Convert UTC to local time.

        If utc_dt is naive, it's assumed to be UTC.
        """
        if utc_dt.tzinfo is None:
            utc_dt = utc_dt.replace(tzinfo=UTC)
        return utc_dt.astimezone(self._tz)

    def local_date(self, utc_dt: datetime) -> date:
        """Calendar date of an instant in the reference timezone."""
        return self.to_local(utc_dt).date()

    @property
    def timezone(self) -> ZoneInfo:
        """Reference timezone."""
        return self._tz


class FrozenTimeAdapter(LocalTimeAdapter):
    """
    Time adapter that returns a fixed time.

    Useful for deterministic testing.
    """

    def __init__(
        self,
        frozen_utc: datetime,
        tz_name: str = DEFAULT_TIMEZONE,
    ) -> None:
        """
        Initialize with frozen time.

        Args:
            frozen_utc: The UTC time to return from now_utc()
            tz_name: IANA timezone name for local conversions
        """
        super().__init__(tz_name)
        if frozen_utc.tzinfo is None:
            frozen_utc = frozen_utc.replace(tzinfo=UTC)
        self._frozen_utc = frozen_utc.astimezone(UTC)

    def now_utc(self) -> datetime:
        """Get frozen UTC time."""
        return self._frozen_utc

    def now_local(self) -> datetime:
        """Get frozen time in local timezone."""
        return self._frozen_utc.astimezone(self._tz)

    def advance(self, delta: timedelta) -> None:
        """Advance frozen time by delta (for testing)."""
        self._frozen_utc = self._frozen_utc + delta


def is_valid_timezone(tz_name: str) -> bool:
    """Check whether an IANA timezone name can be loaded."""
    try:
        ZoneInfo(tz_name)
    except (ValueError, KeyError, OSError):
        return False
    return True
