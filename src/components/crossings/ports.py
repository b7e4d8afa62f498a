"""
Crossings component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import CrossingEvent


class CrossingRepoPort(Protocol):
    """Repository interface for crossing events."""

    def save(self, crossing: CrossingEvent) -> CrossingEvent:
        """Save or update crossing."""
        ...

    def get_by_id(self, crossing_id: UUID) -> CrossingEvent | None:
        """Get crossing by ID."""
        ...

    def list_for_subject(self, subject: str) -> list[CrossingEvent]:
        """List all crossings owned by a subject."""
        ...

    def delete(self, crossing_id: UUID) -> None:
        """Delete crossing."""
        ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...
