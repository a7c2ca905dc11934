"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cuadrante.config import get_settings
from cuadrante.application.services import (
    CalendarEntryService,
    ChangeLogService,
    SyncBus,
    UserService,
)
from cuadrante.infrastructure.database.session import get_db_session
from cuadrante.infrastructure.database.unit_of_work import SQLAlchemyUnitOfWork
from cuadrante.infrastructure.database.repositories import (
    SQLAlchemyCalendarEntryRepository,
    SQLAlchemyChangeLogRepository,
    SQLAlchemyUserRepository,
)
from cuadrante.infrastructure.storage.local_file_storage import LocalFileStorage


@lru_cache
def get_sync_bus() -> SyncBus:
    """Process-wide sync bus shared by every request and SSE stream."""
    return SyncBus(queue_size=get_settings().sse_queue_size)


def get_file_storage() -> LocalFileStorage:
    settings = get_settings()
    return LocalFileStorage(
        upload_dir=settings.upload_dir,
        url_prefix=settings.uploads_url_prefix,
    )


async def get_change_log_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ChangeLogService, None]:
    """Provides a ChangeLogService instance with its repository wired up."""
    yield ChangeLogService(SQLAlchemyChangeLogRepository(session))


async def get_calendar_entry_service(
    session: AsyncSession = Depends(get_db_session),
    sync_bus: SyncBus = Depends(get_sync_bus),
) -> AsyncGenerator[CalendarEntryService, None]:
    """Provides a CalendarEntryService whose entry and log writes commit together."""
    yield CalendarEntryService(
        repository=SQLAlchemyCalendarEntryRepository(session),
        change_log=ChangeLogService(SQLAlchemyChangeLogRepository(session)),
        sync_bus=sync_bus,
        unit_of_work=SQLAlchemyUnitOfWork(session),
    )


async def get_user_service(
    session: AsyncSession = Depends(get_db_session),
    sync_bus: SyncBus = Depends(get_sync_bus),
) -> AsyncGenerator[UserService, None]:
    """Provides a UserService instance with its repository wired up."""
    yield UserService(SQLAlchemyUserRepository(session), sync_bus, SQLAlchemyUnitOfWork(session))
