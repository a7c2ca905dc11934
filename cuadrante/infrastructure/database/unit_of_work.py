"""SQLAlchemy-backed unit of work over the request's session."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cuadrante.application.interfaces import UnitOfWork
from cuadrante.domain.exceptions import StorageError


class SQLAlchemyUnitOfWork(UnitOfWork):
    """Implements the UnitOfWork port by committing the shared AsyncSession."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            raise StorageError("commit", exc) from exc

    async def rollback(self) -> None:
        await self._session.rollback()
