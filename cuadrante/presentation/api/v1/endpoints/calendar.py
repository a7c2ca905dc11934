"""Calendar entry endpoints — month listing, upsert, delete and images."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from cuadrante.application.schemas import (
    CalendarEntryCreate,
    CalendarEntryResponse,
    CalendarEntryUpsert,
    ImageChange,
    MessageResponse,
)
from cuadrante.application.services import CalendarEntryService
from cuadrante.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidEntityError,
)
from cuadrante.infrastructure.dependencies import get_calendar_entry_service

router = APIRouter(prefix="/calendar", tags=["Calendar"])


def _to_response(entry) -> CalendarEntryResponse:
    return CalendarEntryResponse.model_validate(entry, from_attributes=True)


@router.get("/{year}/{month}", response_model=list[CalendarEntryResponse])
async def list_month(
    year: int,
    month: int,
    service: CalendarEntryService = Depends(get_calendar_entry_service),
) -> list[CalendarEntryResponse]:
    """All stored entries whose date falls within the given month."""
    try:
        entries = await service.list_month(year, month)
    except InvalidEntityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return [_to_response(e) for e in entries]


@router.get("/{date_key}", response_model=CalendarEntryResponse)
async def get_entry(
    date_key: str,
    service: CalendarEntryService = Depends(get_calendar_entry_service),
) -> CalendarEntryResponse:
    try:
        entry = await service.get_entry(date_key)
    except InvalidEntityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return _to_response(entry)


@router.post("", response_model=CalendarEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    data: CalendarEntryCreate,
    service: CalendarEntryService = Depends(get_calendar_entry_service),
) -> CalendarEntryResponse:
    """Create the entry for a date that has none yet."""
    try:
        entry = await service.create_entry(data)
    except (InvalidEntityError, DuplicateEntityError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _to_response(entry)


@router.put("/{date_key}", response_model=CalendarEntryResponse)
async def upsert_entry(
    date_key: str,
    data: CalendarEntryUpsert,
    service: CalendarEntryService = Depends(get_calendar_entry_service),
) -> CalendarEntryResponse:
    """Create or partially update the entry for a date."""
    try:
        entry = await service.upsert_entry(date_key, data)
    except InvalidEntityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _to_response(entry)


@router.delete("/{date_key}", response_model=MessageResponse)
async def delete_entry(
    date_key: str,
    service: CalendarEntryService = Depends(get_calendar_entry_service),
) -> MessageResponse:
    try:
        await service.delete_entry(date_key)
    except InvalidEntityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return MessageResponse(message="Entry deleted")


@router.post("/{date_key}/images", response_model=CalendarEntryResponse)
async def add_image(
    date_key: str,
    data: ImageChange,
    service: CalendarEntryService = Depends(get_calendar_entry_service),
) -> CalendarEntryResponse:
    """Append an uploaded image URL to the entry."""
    try:
        entry = await service.add_image(date_key, data.url, data.editor)
    except InvalidEntityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _to_response(entry)


@router.delete("/{date_key}/images", response_model=CalendarEntryResponse)
async def remove_image(
    date_key: str,
    url: str = Query(..., min_length=1, description="Image URL to remove"),
    editor: str = Query(..., min_length=1, description="Name of the acting user"),
    service: CalendarEntryService = Depends(get_calendar_entry_service),
) -> CalendarEntryResponse:
    try:
        entry = await service.remove_image(date_key, url, editor)
    except InvalidEntityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return _to_response(entry)
