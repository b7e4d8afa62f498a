from datetime import UTC, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

# --- Enums / Literals ---
CrossingKind = Literal["ENTRY", "EXIT"]

CROSSING_KINDS: tuple[CrossingKind, ...] = ("ENTRY", "EXIT")


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- Border Crossings ---

class CrossingEvent(BaseModel):
    """A timestamped entry into or exit from the tracked country."""

    id: UUID = Field(default_factory=uuid4)
    subject: str  # owner email
    kind: CrossingKind
    timestamp: datetime
    location: str  # port of entry, opaque to day accounting
    notes: str | None = None
    proof_link: str | None = None
    i94_proof: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(frozen=True)


# --- Users ---

class User(BaseModel):
    id: str
    email: str
    name: str
    picture: str | None = None
