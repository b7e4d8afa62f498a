"""
CrossingService - Border crossing records for one subject.

Boundary validation lives here: malformed timestamps, unknown kinds and
missing ports are rejected before events ever reach day accounting.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from urllib.parse import urlparse
from uuid import UUID, uuid4

from src.domain.entities import CROSSING_KINDS, CrossingEvent

from .models import CrossingValidationError
from .ports import ClockPort, CrossingRepoPort

logger = logging.getLogger(__name__)

MAX_LOCATION_LENGTH = 200
MAX_NOTES_LENGTH = 2000

# --- Validation Functions ---


def parse_timestamp(value: datetime | str) -> datetime | None:
    """
    Parse an ISO-8601 timestamp and normalise it to UTC.

    Naive values are taken as UTC. Returns None when unparseable.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_crossing_data(
    subject: str,
    kind: str,
    location: str,
    notes: str | None = None,
    proof_link: str | None = None,
    i94_proof: str | None = None,
) -> list[CrossingValidationError]:
    """Validate crossing fields other than the timestamp."""
    errors: list[CrossingValidationError] = []

    if not subject or not subject.strip():
        errors.append(
            CrossingValidationError(
                code="subject_required",
                message="Subject is required",
                field="subject",
            )
        )

    if kind not in CROSSING_KINDS:
        errors.append(
            CrossingValidationError(
                code="invalid_kind",
                message=f"Type must be one of {', '.join(CROSSING_KINDS)}",
                field="kind",
            )
        )

    if not location or not location.strip():
        errors.append(
            CrossingValidationError(
                code="location_required",
                message="Port of entry is required",
                field="location",
            )
        )
    elif len(location) > MAX_LOCATION_LENGTH:
        errors.append(
            CrossingValidationError(
                code="location_too_long",
                message=f"Port of entry must be {MAX_LOCATION_LENGTH} characters or less",
                field="location",
            )
        )

    if notes is not None and len(notes) > MAX_NOTES_LENGTH:
        errors.append(
            CrossingValidationError(
                code="notes_too_long",
                message=f"Notes must be {MAX_NOTES_LENGTH} characters or less",
                field="notes",
            )
        )

    # Empty string means "no proof"
    for field_name, link in (("proof_link", proof_link), ("i94_proof", i94_proof)):
        if link and not _is_http_url(link.strip()):
            errors.append(
                CrossingValidationError(
                    code="invalid_proof_link",
                    message="Proof links must be http:// or https:// URLs",
                    field=field_name,
                )
            )

    return errors


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


# --- Crossing Service ---


class CrossingService:
    """
    Crossing service.

    Every operation is scoped to a subject; one subject never sees or
    deletes another's crossings.
    """

    def __init__(self, repo: CrossingRepoPort, clock: ClockPort | None = None) -> None:
        """Initialize service."""
        self._repo = repo
        self._clock = clock

    def _now(self) -> datetime:
        if self._clock is None:
            return datetime.now(UTC)
        return self._clock.now_utc()

    def list_for_subject(self, subject: str) -> list[CrossingEvent]:
        """List a subject's crossings, oldest first (ties by creation)."""
        crossings = self._repo.list_for_subject(subject)
        return sorted(crossings, key=lambda c: (c.timestamp, c.created_at))

    def get(self, subject: str, crossing_id: UUID) -> CrossingEvent | None:
        """Get a crossing owned by subject."""
        crossing = self._repo.get_by_id(crossing_id)
        if crossing is None or crossing.subject != subject:
            return None
        return crossing

    def create(
        self,
        subject: str,
        kind: str,
        timestamp: datetime | str,
        location: str,
        notes: str | None = None,
        proof_link: str | None = None,
        i94_proof: str | None = None,
    ) -> tuple[CrossingEvent | None, list[CrossingValidationError]]:
        """
        Record a new crossing.

        Returns:
            Tuple of (crossing, errors). Crossing is None if validation fails.
        """
        errors = validate_crossing_data(
            subject=subject,
            kind=kind,
            location=location,
            notes=notes,
            proof_link=proof_link,
            i94_proof=i94_proof,
        )

        parsed = parse_timestamp(timestamp)
        if parsed is None:
            errors.append(
                CrossingValidationError(
                    code="invalid_timestamp",
                    message=f"Invalid ISO-8601 timestamp: {timestamp!r}",
                    field="timestamp",
                )
            )

        if errors or parsed is None:
            logger.warning(
                "Rejected crossing for %s: %s", subject, ", ".join(e.code for e in errors)
            )
            return None, errors

        now = self._now()
        crossing = CrossingEvent(
            id=uuid4(),
            subject=subject.strip(),
            kind=kind,  # type: ignore[arg-type]  # checked by validate_crossing_data
            timestamp=parsed,
            location=location.strip(),
            notes=_blank_to_none(notes),
            proof_link=_blank_to_none(proof_link),
            i94_proof=_blank_to_none(i94_proof),
            created_at=now,
            updated_at=now,
        )

        saved = self._repo.save(crossing)
        logger.info("Created %s crossing %s for %s", saved.kind, saved.id, saved.subject)
        return saved, []

    def delete(
        self, subject: str, crossing_id: UUID
    ) -> tuple[bool, list[CrossingValidationError]]:
        """
        Delete a crossing owned by subject.

        Returns:
            Tuple of (success, errors).
        """
        if self.get(subject, crossing_id) is None:
            return False, [
                CrossingValidationError(
                    code="crossing_not_found",
                    message=f"Crossing with ID {crossing_id} not found",
                )
            ]

        self._repo.delete(crossing_id)
        logger.info("Deleted crossing %s for %s", crossing_id, subject)
        return True, []
