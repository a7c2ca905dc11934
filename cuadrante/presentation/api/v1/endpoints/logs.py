"""Change log report endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status

from cuadrante.application.schemas import ChangeLogResponse
from cuadrante.application.services import ChangeLogService
from cuadrante.domain.exceptions import InvalidEntityError
from cuadrante.infrastructure.dependencies import get_change_log_service

router = APIRouter(prefix="/logs", tags=["Change Log"])


@router.get("/{year}/{month}", response_model=list[ChangeLogResponse])
async def monthly_report(
    year: int,
    month: int,
    service: ChangeLogService = Depends(get_change_log_service),
) -> list[ChangeLogResponse]:
    """Changes recorded during the month, newest first, with field diffs."""
    try:
        records = await service.report(year, month)
    except InvalidEntityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return [ChangeLogResponse.from_record(r) for r in records]
