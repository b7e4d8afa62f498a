"""
Day accounting - calendar days physically present from border crossings.

Pure functions only: no I/O, no clock reads, no state kept between calls.
The caller supplies the event snapshot, the reference day and the local
timezone.

Key behaviors:
- Events are stable-sorted by timestamp; simultaneous crossings keep input order
- Entry -> Exit pairs count every local calendar day from entry to exit, inclusive
- A second Entry while one is pending replaces it (the later entry wins)
- An Exit with nothing pending contributes nothing
- A trailing open Entry counts through today only when it is the latest event
  and the set holds no completed pairs at all
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, date, datetime, tzinfo

from src.domain.entities import CrossingEvent

from .models import OpenEntryDecision, PresenceStats, PresenceTrace, Stay

DEFAULT_TARGET_DAYS = 730


def _aware(instant: datetime) -> datetime:
    # Naive timestamps are taken as UTC
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant


def local_day(instant: datetime, tz: tzinfo) -> date:
    """Calendar date of an instant in the reference timezone."""
    return _aware(instant).astimezone(tz).date()


def inclusive_day_span(start_day: date, end_day: date) -> int:
    """
    Number of calendar days from start_day through end_day, both counted.

    Returns 0 when end_day precedes start_day.
    """
    if end_day < start_day:
        return 0
    return (end_day - start_day).days + 1


def sort_events(events: Iterable[CrossingEvent]) -> list[CrossingEvent]:
    """Sort ascending by timestamp; ties keep their input order."""
    return sorted(events, key=lambda event: _aware(event.timestamp))


def _reference_day(reference_today: date | datetime, tz: tzinfo) -> date:
    # datetime is a date subclass, so check it first
    if isinstance(reference_today, datetime):
        return local_day(reference_today, tz)
    return reference_today


def trace_days_present(
    events: Sequence[CrossingEvent],
    reference_today: date | datetime,
    tz: tzinfo,
) -> PresenceTrace:
    """
    Run the day-accounting scan and return the annotated result.

    Args:
        events: Crossing events for one subject, in any order.
        reference_today: Today's date (or an instant converted to the local day).
        tz: Fixed reference timezone that defines the local day.

    Returns:
        PresenceTrace with every closed stay and the open-entry decision.
    """
    ordered = sort_events(events)
    today = _reference_day(reference_today, tz)

    stays: list[Stay] = []
    ignored_exits: list[CrossingEvent] = []
    overwritten: list[CrossingEvent] = []
    pending: CrossingEvent | None = None

    for event in ordered:
        if event.kind == "ENTRY":
            if pending is not None:
                overwritten.append(pending)
            pending = event
        elif pending is None:
            ignored_exits.append(event)
        else:
            start = local_day(pending.timestamp, tz)
            end = local_day(event.timestamp, tz)
            stays.append(
                Stay(
                    entry=pending,
                    exit=event,
                    start_day=start,
                    end_day=end,
                    days=inclusive_day_span(start, end),
                )
            )
            pending = None

    if pending is None:
        return PresenceTrace(
            reference_day=today,
            stays=tuple(stays),
            ignored_exits=tuple(ignored_exits),
            overwritten_entries=tuple(overwritten),
        )

    decision: OpenEntryDecision
    open_days = 0
    pending_at = _aware(pending.timestamp)
    entry_day = local_day(pending.timestamp, tz)

    if stays:
        decision = "completed_pairs_exist"
    elif any(_aware(event.timestamp) > pending_at for event in ordered):
        decision = "not_most_recent"
    elif today < entry_day:
        decision = "future_dated"
    else:
        decision = "counted"
        open_days = inclusive_day_span(entry_day, today)

    return PresenceTrace(
        reference_day=today,
        stays=tuple(stays),
        ignored_exits=tuple(ignored_exits),
        overwritten_entries=tuple(overwritten),
        open_entry=pending,
        open_entry_decision=decision,
        open_entry_days=open_days,
    )


def compute_days_present(
    events: Sequence[CrossingEvent],
    reference_today: date | datetime,
    tz: tzinfo,
) -> int:
    """Total calendar days present for the given crossings."""
    return trace_days_present(events, reference_today, tz).total_days


def compute_stats(total_days: int, target_days: int = DEFAULT_TARGET_DAYS) -> PresenceStats:
    """
    Derive remaining days and percent complete from a day total.

    Raises:
        ValueError: If target_days is not positive.
    """
    if target_days <= 0:
        raise ValueError(f"target_days must be positive, got {target_days}")

    percent = total_days / target_days * 100
    return PresenceStats(
        total_days=total_days,
        target_days=target_days,
        remaining_days=max(0, target_days - total_days),
        percent_complete=min(100.0, max(0.0, percent)),
    )
