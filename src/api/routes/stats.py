"""Residency progress for the authenticated user."""

from fastapi import APIRouter, Depends, Query

from src.adapters.time_local import LocalTimeAdapter
from src.api.deps import get_crossing_service, get_current_user, get_rules, get_time_port
from src.api.schemas import StatsResponse
from src.components.crossings import CrossingService, ListCrossingsInput, run_list
from src.components.presence import ComputePresenceInput, run_compute
from src.domain.entities import User
from src.rules.models import Rules

router = APIRouter()


@router.get("", response_model=StatsResponse, response_model_exclude_none=True)
def get_stats(
    include_trace: bool = Query(default=False),
    current_user: User = Depends(get_current_user),
    service: CrossingService = Depends(get_crossing_service),
    time_port: LocalTimeAdapter = Depends(get_time_port),
    rules: Rules = Depends(get_rules),
) -> StatsResponse:
    """Days present, days remaining and percent of the target reached."""
    crossings = run_list(ListCrossingsInput(subject=current_user.email), service).crossings
    result = run_compute(
        ComputePresenceInput(events=crossings),
        time_port=time_port,
        rules=rules.presence,
    )
    return StatsResponse.from_output(result, include_trace=include_trace)
