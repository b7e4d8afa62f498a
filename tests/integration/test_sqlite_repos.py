import sqlite3
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteCrossingRepo
from src.domain.entities import CrossingEvent


@pytest.fixture
def repo(test_db_path):
    return SQLiteCrossingRepo(test_db_path)


def _crossing(subject: str = "a@example.com", **overrides) -> CrossingEvent:
    fields = {
        "subject": subject,
        "kind": "ENTRY",
        "timestamp": datetime(2024, 1, 5, 13, 0, tzinfo=UTC),
        "location": "Rainbow Bridge",
    }
    fields.update(overrides)
    return CrossingEvent(**fields)


class TestMigrator:
    def test_applies_once(self, tmp_path):
        db_path = str(tmp_path / "fresh.db")
        migrator = SQLiteMigrator(db_path)

        assert migrator.run_migrations() == ["0001_crossing_events.sql"]
        assert migrator.run_migrations() == []
        assert "0001_crossing_events.sql" in migrator.applied_migrations()

    def test_schema_rejects_unknown_kind(self, test_db_path):
        conn = sqlite3.connect(test_db_path)
        try:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(
                    "INSERT INTO crossing_events VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (str(uuid4()), "a@example.com", "TRANSIT", "2024-01-01T00:00:00+00:00",
                     "X", None, None, None, "2024-01-01", "2024-01-01"),
                )
        finally:
            conn.close()

    def test_failed_migration_raises(self, tmp_path):
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        (migrations / "0001_broken.sql").write_text("CREATE TABLE (;")
        migrator = SQLiteMigrator(str(tmp_path / "x.db"), migrations)
        with pytest.raises(RuntimeError, match="0001_broken.sql"):
            migrator.run_migrations()


class TestSQLiteCrossingRepo:
    def test_save_and_get_roundtrip(self, repo):
        crossing = _crossing(notes="Visitor record", proof_link="https://example.com/p.pdf")
        repo.save(crossing)

        loaded = repo.get_by_id(crossing.id)
        assert loaded == crossing
        assert loaded.timestamp.tzinfo is not None

    def test_get_missing(self, repo):
        assert repo.get_by_id(uuid4()) is None

    def test_upsert(self, repo):
        crossing = _crossing()
        repo.save(crossing)
        repo.save(crossing.model_copy(update={"location": "Ambassador Bridge"}))

        assert repo.get_by_id(crossing.id).location == "Ambassador Bridge"
        assert len(repo.list_for_subject("a@example.com")) == 1

    def test_list_scoped_and_ordered(self, repo):
        later = _crossing(kind="EXIT", timestamp=datetime(2024, 2, 1, tzinfo=UTC))
        earlier = _crossing(timestamp=datetime(2024, 1, 1, tzinfo=UTC))
        repo.save(later)
        repo.save(earlier)
        repo.save(_crossing(subject="b@example.com"))

        assert [c.id for c in repo.list_for_subject("a@example.com")] == [earlier.id, later.id]

    def test_delete(self, repo):
        crossing = _crossing()
        repo.save(crossing)
        repo.delete(crossing.id)
        assert repo.get_by_id(crossing.id) is None

    def test_ping(self, repo, tmp_path):
        repo.ping()
        with pytest.raises(sqlite3.OperationalError):
            SQLiteCrossingRepo(str(tmp_path / "empty.db")).ping()
