"""
Presence component - Residency day accounting from border crossings.
"""

from ._impl import (
    DEFAULT_TARGET_DAYS,
    compute_days_present,
    compute_stats,
    inclusive_day_span,
    local_day,
    sort_events,
    trace_days_present,
)
from .component import run, run_compute
from .models import (
    ComputePresenceInput,
    OpenEntryDecision,
    PresenceOutput,
    PresenceStats,
    PresenceTrace,
    Stay,
)
from .ports import PresenceRulesPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_compute",
    # Pure calculation
    "DEFAULT_TARGET_DAYS",
    "compute_days_present",
    "compute_stats",
    "inclusive_day_span",
    "local_day",
    "sort_events",
    "trace_days_present",
    # Models
    "ComputePresenceInput",
    "OpenEntryDecision",
    "PresenceOutput",
    "PresenceStats",
    "PresenceTrace",
    "Stay",
    # Ports
    "PresenceRulesPort",
    "TimePort",
]
