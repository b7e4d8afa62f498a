"""
Presence component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from src.domain.entities import CrossingEvent

# --- Open Entry Decision ---


OpenEntryDecision = Literal[
    "counted",
    "completed_pairs_exist",
    "not_most_recent",
    "future_dated",
]


# --- Trace Models ---


@dataclass(frozen=True)
class Stay:
    """A closed Entry -> Exit pair and the calendar days it covers."""

    entry: CrossingEvent
    exit: CrossingEvent
    start_day: date
    end_day: date
    days: int


@dataclass(frozen=True)
class PresenceTrace:
    """Annotated result of a day-accounting run."""

    reference_day: date
    stays: tuple[Stay, ...] = ()
    ignored_exits: tuple[CrossingEvent, ...] = ()
    overwritten_entries: tuple[CrossingEvent, ...] = ()
    open_entry: CrossingEvent | None = None
    open_entry_decision: OpenEntryDecision | None = None
    open_entry_days: int = 0

    @property
    def closed_days(self) -> int:
        return sum(stay.days for stay in self.stays)

    @property
    def total_days(self) -> int:
        return self.closed_days + self.open_entry_days


@dataclass(frozen=True)
class PresenceStats:
    """Progress towards the residency-day target."""

    total_days: int
    target_days: int
    remaining_days: int
    percent_complete: float


# --- Input Models ---


@dataclass(frozen=True)
class ComputePresenceInput:
    """Input for a day-accounting run.

    ``reference_today`` pins the local day used for an open entry; when it is
    None the time port supplies it.
    """

    events: tuple[CrossingEvent, ...]
    reference_today: date | None = None


# --- Output Models ---


@dataclass(frozen=True)
class PresenceOutput:
    """Output of a day-accounting run."""

    total_days: int
    stats: PresenceStats
    trace: PresenceTrace
    errors: list[str] = field(default_factory=list)
    success: bool = True
