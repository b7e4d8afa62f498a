"""Routes for a user's border crossing log."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse

from src.api.deps import get_crossing_service, get_current_user
from src.api.schemas import EntryCreateRequest, EntryResponse
from src.components.crossings import (
    CreateCrossingInput,
    CrossingService,
    DeleteCrossingInput,
    ListCrossingsInput,
    run_create,
    run_delete,
    run_list,
)
from src.domain.entities import User

router = APIRouter()


@router.get("", response_model=list[EntryResponse])
def list_entries(
    current_user: User = Depends(get_current_user),
    service: CrossingService = Depends(get_crossing_service),
) -> list[EntryResponse]:
    """List the user's crossings, oldest first."""
    result = run_list(ListCrossingsInput(subject=current_user.email), service)
    return [EntryResponse.from_crossing(c) for c in result.crossings]


@router.post("", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
def create_entry(
    data: EntryCreateRequest,
    current_user: User = Depends(get_current_user),
    service: CrossingService = Depends(get_crossing_service),
) -> EntryResponse | JSONResponse:
    """Record an entry or exit."""
    result = run_create(
        CreateCrossingInput(
            subject=current_user.email,
            kind=data.type,
            timestamp=data.date,
            location=data.port_of_entry,
            notes=data.notes,
            proof_link=data.proof_link,
            i94_proof=data.i94_proof,
        ),
        service,
    )

    if not result.success or result.crossing is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Validation error",
                "details": [
                    {"code": e.code, "message": e.message, "field": e.field}
                    for e in result.errors
                ],
            },
        )

    return EntryResponse.from_crossing(result.crossing)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    entry_id: UUID,
    current_user: User = Depends(get_current_user),
    service: CrossingService = Depends(get_crossing_service),
) -> Response:
    """Delete one of the user's crossings."""
    result = run_delete(
        DeleteCrossingInput(subject=current_user.email, crossing_id=entry_id),
        service,
    )

    if not result.success:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
