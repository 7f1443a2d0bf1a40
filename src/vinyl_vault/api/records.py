"""Record catalog endpoints."""

from fastapi import APIRouter, Depends, status

from vinyl_vault.api.dependencies import get_container, require_user
from vinyl_vault.api.models import RecordPayload, RecordResponse
from vinyl_vault.containers import AppContainer
from vinyl_vault.domain.models import UserRecord

router = APIRouter(prefix="/api/records", tags=["records"])


@router.get("", response_model=list[RecordResponse])
async def list_records(
    user: UserRecord = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> list[RecordResponse]:
    """Return the caller's records."""
    records = container.record_service.list_records(user.id)
    return [RecordResponse.from_domain(record) for record in records]


@router.get("/search/{query}", response_model=list[RecordResponse])
async def search_records(
    query: str,
    user: UserRecord = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> list[RecordResponse]:
    """Return the caller's records matching a search term."""
    records = container.record_service.search_records(user.id, query)
    return [RecordResponse.from_domain(record) for record in records]


@router.get("/{record_id}", response_model=RecordResponse)
async def get_record(
    record_id: int,
    user: UserRecord = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> RecordResponse:
    """Return one of the caller's records."""
    record = container.record_service.get_record(user.id, record_id)
    return RecordResponse.from_domain(record)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=RecordResponse)
async def create_record(
    payload: RecordPayload,
    user: UserRecord = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> RecordResponse:
    """Add a record to the caller's catalog."""
    record = container.record_service.create_record(
        user.id, payload.model_dump(exclude_unset=True)
    )
    return RecordResponse.from_domain(record)


@router.put("/{record_id}", response_model=RecordResponse)
async def update_record(
    record_id: int,
    payload: RecordPayload,
    user: UserRecord = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> RecordResponse:
    """Update the provided fields of one of the caller's records."""
    record = container.record_service.update_record(
        user.id, record_id, payload.model_dump(exclude_unset=True)
    )
    return RecordResponse.from_domain(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    record_id: int,
    user: UserRecord = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> None:
    """Delete one of the caller's records."""
    container.record_service.delete_record(user.id, record_id)
