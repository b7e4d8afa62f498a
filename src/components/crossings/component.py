"""
Crossings component - Border crossing record management.

Shell Layer - handles I/O and error conversion.
"""

from __future__ import annotations

from ._impl import CrossingService
from .models import (
    CreateCrossingInput,
    CrossingListOutput,
    CrossingOperationOutput,
    CrossingValidationError,
    DeleteCrossingInput,
    GetCrossingInput,
    ListCrossingsInput,
)

# --- Shell Layer Functions ---


def run_create(
    input_data: CreateCrossingInput,
    service: CrossingService,
) -> CrossingOperationOutput:
    """Record a new crossing."""
    crossing, errors = service.create(
        subject=input_data.subject,
        kind=input_data.kind,
        timestamp=input_data.timestamp,
        location=input_data.location,
        notes=input_data.notes,
        proof_link=input_data.proof_link,
        i94_proof=input_data.i94_proof,
    )

    return CrossingOperationOutput(
        crossing=crossing,
        errors=tuple(errors),
        success=crossing is not None,
    )


def run_delete(
    input_data: DeleteCrossingInput,
    service: CrossingService,
) -> CrossingOperationOutput:
    """Delete a crossing."""
    success, errors = service.delete(input_data.subject, input_data.crossing_id)

    return CrossingOperationOutput(
        crossing=None,
        errors=tuple(errors),
        success=success,
    )


def run_get(
    input_data: GetCrossingInput,
    service: CrossingService,
) -> CrossingOperationOutput:
    """Get a crossing by ID."""
    crossing = service.get(input_data.subject, input_data.crossing_id)

    if crossing is None:
        return CrossingOperationOutput(
            crossing=None,
            errors=(
                CrossingValidationError(
                    code="crossing_not_found",
                    message=f"Crossing with ID {input_data.crossing_id} not found",
                ),
            ),
            success=False,
        )

    return CrossingOperationOutput(
        crossing=crossing,
        errors=(),
        success=True,
    )


def run_list(
    input_data: ListCrossingsInput,
    service: CrossingService,
) -> CrossingListOutput:
    """List a subject's crossings."""
    crossings = service.list_for_subject(input_data.subject)
    return CrossingListOutput(
        crossings=tuple(crossings),
        total=len(crossings),
    )
