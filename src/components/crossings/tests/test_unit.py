"""
Crossings component unit tests.

Tests for boundary validation and subject-scoped CRUD.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from src.adapters.time_local import FrozenTimeAdapter
from src.components.crossings import (
    CreateCrossingInput,
    CrossingService,
    DeleteCrossingInput,
    GetCrossingInput,
    ListCrossingsInput,
    parse_timestamp,
    run_create,
    run_delete,
    run_get,
    run_list,
    validate_crossing_data,
)
from src.domain.entities import CrossingEvent

SUBJECT = "traveller@example.com"

# --- Mock Repository ---


class MockCrossingRepo:
    """In-memory crossing repository for testing."""

    def __init__(self) -> None:
        self._crossings: dict[UUID, CrossingEvent] = {}

    def save(self, crossing: CrossingEvent) -> CrossingEvent:
        self._crossings[crossing.id] = crossing
        return crossing

    def get_by_id(self, crossing_id: UUID) -> CrossingEvent | None:
        return self._crossings.get(crossing_id)

    def list_for_subject(self, subject: str) -> list[CrossingEvent]:
        return [c for c in self._crossings.values() if c.subject == subject]

    def delete(self, crossing_id: UUID) -> None:
        self._crossings.pop(crossing_id, None)


@pytest.fixture
def repo() -> MockCrossingRepo:
    return MockCrossingRepo()


@pytest.fixture
def clock() -> FrozenTimeAdapter:
    return FrozenTimeAdapter(datetime(2024, 6, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def service(repo: MockCrossingRepo, clock: FrozenTimeAdapter) -> CrossingService:
    return CrossingService(repo=repo, clock=clock)


def _create(**overrides: object) -> CreateCrossingInput:
    fields: dict[str, object] = {
        "subject": SUBJECT,
        "kind": "ENTRY",
        "timestamp": "2024-01-05T08:00:00Z",
        "location": "Toronto Pearson",
    }
    fields.update(overrides)
    return CreateCrossingInput(**fields)  # type: ignore[arg-type]


# --- Timestamp Parsing ---


class TestParseTimestamp:
    def test_zulu_suffix(self) -> None:
        assert parse_timestamp("2024-01-05T08:00:00Z") == datetime(2024, 1, 5, 8, 0, tzinfo=UTC)

    def test_offset_normalised_to_utc(self) -> None:
        parsed = parse_timestamp("2024-01-05T08:00:00-05:00")
        assert parsed == datetime(2024, 1, 5, 13, 0, tzinfo=UTC)
        assert parsed is not None and parsed.tzinfo == UTC

    def test_naive_taken_as_utc(self) -> None:
        assert parse_timestamp(datetime(2024, 1, 5, 8, 0)) == datetime(
            2024, 1, 5, 8, 0, tzinfo=UTC
        )

    def test_aware_datetime(self) -> None:
        est = timezone(timedelta(hours=-5))
        assert parse_timestamp(datetime(2024, 1, 5, 8, 0, tzinfo=est)) == datetime(
            2024, 1, 5, 13, 0, tzinfo=UTC
        )

    def test_garbage(self) -> None:
        assert parse_timestamp("next tuesday") is None


# --- Validation ---


class TestValidation:
    def test_valid(self) -> None:
        assert validate_crossing_data(SUBJECT, "EXIT", "Peace Bridge") == []

    def test_unknown_kind(self) -> None:
        errors = validate_crossing_data(SUBJECT, "TRANSIT", "Peace Bridge")
        assert [e.code for e in errors] == ["invalid_kind"]

    def test_blank_location(self) -> None:
        errors = validate_crossing_data(SUBJECT, "ENTRY", "   ")
        assert [e.code for e in errors] == ["location_required"]

    def test_location_too_long(self) -> None:
        errors = validate_crossing_data(SUBJECT, "ENTRY", "x" * 201)
        assert [e.code for e in errors] == ["location_too_long"]

    def test_empty_proof_link_allowed(self) -> None:
        assert validate_crossing_data(SUBJECT, "ENTRY", "YVR", proof_link="") == []

    def test_bad_proof_links(self) -> None:
        errors = validate_crossing_data(
            SUBJECT, "ENTRY", "YVR", proof_link="not a url", i94_proof="ftp://x.org/a"
        )
        assert [(e.code, e.field) for e in errors] == [
            ("invalid_proof_link", "proof_link"),
            ("invalid_proof_link", "i94_proof"),
        ]

    def test_subject_required(self) -> None:
        errors = validate_crossing_data("", "ENTRY", "YVR")
        assert [e.code for e in errors] == ["subject_required"]


# --- Creation ---


class TestCreate:
    def test_create_success(self, service: CrossingService, clock: FrozenTimeAdapter) -> None:
        result = run_create(
            _create(notes="  ", proof_link="https://example.com/stamp.jpg"),
            service,
        )
        assert result.success
        assert result.errors == ()
        crossing = result.crossing
        assert crossing is not None
        assert crossing.kind == "ENTRY"
        assert crossing.timestamp == datetime(2024, 1, 5, 8, 0, tzinfo=UTC)
        assert crossing.notes is None
        assert crossing.proof_link == "https://example.com/stamp.jpg"
        assert crossing.created_at == clock.now_utc()

    def test_create_persists(self, service: CrossingService, repo: MockCrossingRepo) -> None:
        result = run_create(_create(), service)
        assert result.crossing is not None
        assert repo.get_by_id(result.crossing.id) == result.crossing

    def test_invalid_timestamp_rejected(self, service: CrossingService) -> None:
        result = run_create(_create(timestamp="2024-13-45"), service)
        assert not result.success
        assert result.crossing is None
        assert [e.code for e in result.errors] == ["invalid_timestamp"]

    def test_collects_all_errors(self, service: CrossingService) -> None:
        result = run_create(
            _create(kind="BOTH", location="", timestamp="bad"), service
        )
        assert {e.code for e in result.errors} == {
            "invalid_kind",
            "location_required",
            "invalid_timestamp",
        }


# --- Listing / Retrieval / Deletion ---


class TestListGetDelete:
    def test_list_sorted_and_scoped(self, service: CrossingService) -> None:
        run_create(_create(kind="EXIT", timestamp="2024-02-01T10:00:00Z"), service)
        run_create(_create(timestamp="2024-01-01T10:00:00Z"), service)
        run_create(_create(subject="other@example.com"), service)

        result = run_list(ListCrossingsInput(subject=SUBJECT), service)
        assert result.total == 2
        assert [c.kind for c in result.crossings] == ["ENTRY", "EXIT"]

    def test_get_other_subject_not_found(self, service: CrossingService) -> None:
        created = run_create(_create(), service).crossing
        assert created is not None

        found = run_get(GetCrossingInput(subject=SUBJECT, crossing_id=created.id), service)
        assert found.success

        hidden = run_get(
            GetCrossingInput(subject="other@example.com", crossing_id=created.id), service
        )
        assert not hidden.success
        assert hidden.errors[0].code == "crossing_not_found"

    def test_delete(self, service: CrossingService, repo: MockCrossingRepo) -> None:
        created = run_create(_create(), service).crossing
        assert created is not None

        result = run_delete(DeleteCrossingInput(subject=SUBJECT, crossing_id=created.id), service)
        assert result.success
        assert repo.get_by_id(created.id) is None

    def test_delete_unknown(self, service: CrossingService) -> None:
        result = run_delete(DeleteCrossingInput(subject=SUBJECT, crossing_id=uuid4()), service)
        assert not result.success
        assert result.errors[0].code == "crossing_not_found"

    def test_delete_other_subject_refused(
        self, service: CrossingService, repo: MockCrossingRepo
    ) -> None:
        created = run_create(_create(), service).crossing
        assert created is not None

        result = run_delete(
            DeleteCrossingInput(subject="other@example.com", crossing_id=created.id), service
        )
        assert not result.success
        assert repo.get_by_id(created.id) is not None
