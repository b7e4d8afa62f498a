import sqlite3
from datetime import datetime
from typing import Any
from uuid import UUID

from src.domain.entities import CrossingEvent


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


class SQLiteCrossingRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        return conn

    def _map_row(self, row: dict[str, Any]) -> CrossingEvent:
        return CrossingEvent(
            id=UUID(row["id"]),
            subject=row["subject"],
            kind=row["kind"],
            timestamp=datetime.fromisoformat(row["timestamp"]),
            location=row["location"],
            notes=row["notes"],
            proof_link=row["proof_link"],
            i94_proof=row["i94_proof"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def save(self, crossing: CrossingEvent) -> CrossingEvent:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO crossing_events (
                    id, subject, kind, timestamp, location,
                    notes, proof_link, i94_proof, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    subject=excluded.subject,
                    kind=excluded.kind,
                    timestamp=excluded.timestamp,
                    location=excluded.location,
                    notes=excluded.notes,
                    proof_link=excluded.proof_link,
                    i94_proof=excluded.i94_proof,
                    updated_at=excluded.updated_at
            """,
                (
                    str(crossing.id),
                    crossing.subject,
                    crossing.kind,
                    crossing.timestamp.isoformat(),
                    crossing.location,
                    crossing.notes,
                    crossing.proof_link,
                    crossing.i94_proof,
                    crossing.created_at.isoformat(),
                    crossing.updated_at.isoformat(),
                ),
            )
            conn.commit()
            return crossing
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, crossing_id: UUID) -> CrossingEvent | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM crossing_events WHERE id = ?", (str(crossing_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_for_subject(self, subject: str) -> list[CrossingEvent]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM crossing_events WHERE subject = ? ORDER BY timestamp ASC",
                (subject,),
            ).fetchall()
            return [self._map_row(row) for row in rows]
        finally:
            conn.close()

    def delete(self, crossing_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM crossing_events WHERE id = ?", (str(crossing_id),))
            conn.commit()
        finally:
            conn.close()

    def ping(self) -> None:
        """Raise if the database is unreachable or the schema is missing."""
        conn = self._get_conn()
        try:
            conn.execute("SELECT 1 FROM crossing_events LIMIT 1").fetchall()
        finally:
            conn.close()
