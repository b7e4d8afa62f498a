from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from src.components.presence import PresenceOutput
from src.domain.entities import CrossingEvent

# --- Shared Enums/Types ---
CrossingType = Literal["ENTRY", "EXIT"]


# --- Auth ---
class SignInRequest(BaseModel):
    id_token: str | None = Field(default=None, alias="idToken")

    model_config = ConfigDict(populate_by_name=True)


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    picture: str | None = None


class SignInResponse(BaseModel):
    token: str
    user: UserResponse


# --- Entries ---
class EntryCreateRequest(BaseModel):
    type: CrossingType
    date: datetime
    port_of_entry: str = Field(alias="portOfEntry", min_length=1)
    notes: str | None = None
    proof_link: str | None = Field(default=None, alias="proofLink")
    i94_proof: str | None = Field(default=None, alias="i94Proof")

    model_config = ConfigDict(populate_by_name=True)


class EntryResponse(BaseModel):
    id: str
    type: CrossingType
    date: datetime
    port_of_entry: str = Field(alias="portOfEntry")
    notes: str | None = None
    proof_link: str | None = Field(default=None, alias="proofLink")
    i94_proof: str | None = Field(default=None, alias="i94Proof")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_crossing(cls, crossing: CrossingEvent) -> "EntryResponse":
        return cls(
            id=str(crossing.id),
            type=crossing.kind,
            date=crossing.timestamp,
            port_of_entry=crossing.location,
            notes=crossing.notes,
            proof_link=crossing.proof_link,
            i94_proof=crossing.i94_proof,
            created_at=crossing.created_at,
            updated_at=crossing.updated_at,
        )


# --- Stats ---
class StayResponse(BaseModel):
    entry_id: str = Field(alias="entryId")
    exit_id: str = Field(alias="exitId")
    start_day: date = Field(alias="startDay")
    end_day: date = Field(alias="endDay")
    days: int

    model_config = ConfigDict(populate_by_name=True)


class TraceResponse(BaseModel):
    reference_day: date = Field(alias="referenceDay")
    stays: list[StayResponse]
    ignored_exit_ids: list[str] = Field(alias="ignoredExitIds")
    overwritten_entry_ids: list[str] = Field(alias="overwrittenEntryIds")
    open_entry_id: str | None = Field(default=None, alias="openEntryId")
    open_entry_decision: str | None = Field(default=None, alias="openEntryDecision")
    open_entry_days: int = Field(alias="openEntryDays")

    model_config = ConfigDict(populate_by_name=True)


class StatsResponse(BaseModel):
    total_days: int = Field(alias="totalDaysInCanada")
    remaining_days: int = Field(alias="remainingDays")
    target_days: int = Field(alias="targetDays")
    percentage_complete: float = Field(alias="percentageComplete")
    trace: TraceResponse | None = None

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_output(cls, result: PresenceOutput, include_trace: bool = False) -> "StatsResponse":
        trace = None
        if include_trace:
            t = result.trace
            trace = TraceResponse(
                reference_day=t.reference_day,
                stays=[
                    StayResponse(
                        entry_id=str(stay.entry.id),
                        exit_id=str(stay.exit.id),
                        start_day=stay.start_day,
                        end_day=stay.end_day,
                        days=stay.days,
                    )
                    for stay in t.stays
                ],
                ignored_exit_ids=[str(e.id) for e in t.ignored_exits],
                overwritten_entry_ids=[str(e.id) for e in t.overwritten_entries],
                open_entry_id=str(t.open_entry.id) if t.open_entry else None,
                open_entry_decision=t.open_entry_decision,
                open_entry_days=t.open_entry_days,
            )

        return cls(
            total_days=result.stats.total_days,
            remaining_days=result.stats.remaining_days,
            target_days=result.stats.target_days,
            percentage_complete=result.stats.percent_complete,
            trace=trace,
        )
