import sqlite3
from datetime import UTC, datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.time_local import FrozenTimeAdapter
from src.api.auth_utils import create_access_token
from src.api.deps import Settings, get_crossing_repo, get_settings, get_time_port
from src.api.main import app

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# 2024-03-15 12:00 in Toronto
FROZEN_NOW = datetime(2024, 3, 15, 16, 0, tzinfo=UTC)


@pytest.fixture
def test_db_path(tmp_path):
    """Temporary SQLite database with the schema applied."""
    db_path = str(tmp_path / "tracker.db")
    SQLiteMigrator(db_path).run_migrations()
    return db_path


@pytest.fixture
def frozen_time():
    return FrozenTimeAdapter(FROZEN_NOW)


@pytest.fixture
def client(test_db_path, tmp_path, frozen_time):
    def _settings():
        s = Settings()
        s.data_dir = tmp_path
        s.db_path = test_db_path
        s.rules_path = PROJECT_ROOT / "rules.yaml"
        return s

    app.dependency_overrides[get_settings] = _settings
    app.dependency_overrides[get_time_port] = lambda: frozen_time
    yield TestClient(app)
    app.dependency_overrides.clear()


class LockedCrossingRepo:
    """Repository whose database is unavailable."""

    def _fail(self, *args, **kwargs):
        raise sqlite3.OperationalError("database is locked")

    save = get_by_id = list_for_subject = delete = _fail


@pytest.fixture
def locked_client(client):
    """Client whose crossing storage raises on every call."""
    app.dependency_overrides[get_crossing_repo] = LockedCrossingRepo
    return TestClient(app, raise_server_exceptions=False)


def _auth_headers(email: str) -> dict[str, str]:
    token = create_access_token(
        {"sub": f"user-{email}", "email": email, "name": email.split("@")[0]},
        Settings().secret_key,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return _auth_headers("traveller@example.com")


@pytest.fixture
def other_auth_headers():
    return _auth_headers("someone-else@example.com")
