"""
Crossings component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.domain.entities import CrossingEvent

# --- Validation Errors ---


@dataclass(frozen=True)
class CrossingValidationError:
    """Crossing validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class CreateCrossingInput:
    """Input for recording a border crossing."""

    subject: str
    kind: str
    timestamp: datetime | str
    location: str
    notes: str | None = None
    proof_link: str | None = None
    i94_proof: str | None = None


@dataclass(frozen=True)
class ListCrossingsInput:
    """Input for listing a subject's crossings."""

    subject: str


@dataclass(frozen=True)
class GetCrossingInput:
    """Input for getting one crossing."""

    subject: str
    crossing_id: UUID


@dataclass(frozen=True)
class DeleteCrossingInput:
    """Input for deleting a crossing."""

    subject: str
    crossing_id: UUID


# --- Output Models ---


@dataclass(frozen=True)
class CrossingOperationOutput:
    """Output from a crossing operation."""

    crossing: CrossingEvent | None
    errors: tuple[CrossingValidationError, ...]
    success: bool


@dataclass(frozen=True)
class CrossingListOutput:
    """Output from list operation."""

    crossings: tuple[CrossingEvent, ...]
    total: int
