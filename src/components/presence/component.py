"""
Presence component - Residency day accounting.

Shell layer over the pure calculation in ``_impl``: resolves today's date and
the reference timezone from the time port, the target from rules, and logs
the per-stay trace at DEBUG.

Invariants:
- I1: Same events and same reference day always give the same total
- I2: Input order never changes the result
- I3: Malformed sequences are handled by policy, never by raising
"""

from __future__ import annotations

import logging

from ._impl import DEFAULT_TARGET_DAYS, compute_stats, trace_days_present
from .models import ComputePresenceInput, PresenceOutput, PresenceTrace
from .ports import PresenceRulesPort, TimePort

logger = logging.getLogger(__name__)


def _log_trace(trace: PresenceTrace) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    for stay in trace.stays:
        logger.debug(
            "Stay %s -> %s: +%d day(s)", stay.start_day, stay.end_day, stay.days
        )
    for exit_event in trace.ignored_exits:
        logger.debug("Exit %s ignored: no pending entry", exit_event.timestamp.isoformat())
    for entry in trace.overwritten_entries:
        logger.debug("Entry %s replaced by a later entry", entry.timestamp.isoformat())
    if trace.open_entry is not None:
        logger.debug(
            "Open entry %s: %s (+%d day(s) through %s)",
            trace.open_entry.timestamp.isoformat(),
            trace.open_entry_decision,
            trace.open_entry_days,
            trace.reference_day,
        )
    logger.debug("Total days present: %d", trace.total_days)


def run_compute(
    inp: ComputePresenceInput,
    *,
    time_port: TimePort,
    rules: PresenceRulesPort | None = None,
) -> PresenceOutput:
    """
    Compute days present and progress statistics for one subject.

    Args:
        inp: Event snapshot and optional pinned reference day.
        time_port: Supplies today's local date and the reference timezone.
        rules: Optional rules port for the target threshold.

    Returns:
        PresenceOutput with total, stats and trace.
    """
    reference_today = inp.reference_today
    if reference_today is None:
        reference_today = time_port.today_local()
    target_days = rules.target_days if rules is not None else DEFAULT_TARGET_DAYS

    trace = trace_days_present(inp.events, reference_today, time_port.timezone)
    _log_trace(trace)

    return PresenceOutput(
        total_days=trace.total_days,
        stats=compute_stats(trace.total_days, target_days),
        trace=trace,
    )


def run(
    inp: ComputePresenceInput,
    *,
    time_port: TimePort,
    rules: PresenceRulesPort | None = None,
) -> PresenceOutput:
    """Main entry point for the presence component."""
    if isinstance(inp, ComputePresenceInput):
        return run_compute(inp, time_port=time_port, rules=rules)
    raise ValueError(f"Unknown input type: {type(inp)}")
