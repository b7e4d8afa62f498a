"""
Presence component port definitions.
"""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Protocol


class TimePort(Protocol):
    """Clock and local calendar used for the open-entry rule."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...

    def today_local(self) -> date:
        """Get today's date in the reference timezone."""
        ...

    @property
    def timezone(self) -> tzinfo:
        """Reference timezone that defines the local day."""
        ...


class PresenceRulesPort(Protocol):
    """Residency threshold configuration."""

    @property
    def target_days(self) -> int:
        """Residency-day target (e.g. 730)."""
        ...
