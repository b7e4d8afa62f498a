"""
Crossings component - Border crossing record management.
"""

from ._impl import CrossingService, parse_timestamp, validate_crossing_data
from .component import (
    run_create,
    run_delete,
    run_get,
    run_list,
)
from .models import (
    CreateCrossingInput,
    CrossingListOutput,
    CrossingOperationOutput,
    CrossingValidationError,
    DeleteCrossingInput,
    GetCrossingInput,
    ListCrossingsInput,
)
from .ports import ClockPort, CrossingRepoPort

__all__ = [
    # Entry points
    "run_create",
    "run_delete",
    "run_get",
    "run_list",
    # Input models
    "CreateCrossingInput",
    "DeleteCrossingInput",
    "GetCrossingInput",
    "ListCrossingsInput",
    # Output models
    "CrossingListOutput",
    "CrossingOperationOutput",
    "CrossingValidationError",
    # Ports
    "ClockPort",
    "CrossingRepoPort",
    # Service
    "CrossingService",
    "parse_timestamp",
    "validate_crossing_data",
]
