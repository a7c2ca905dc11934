"""Concrete repository for change log records backed by SQLAlchemy."""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cuadrante.application.interfaces import ChangeLogRepository
from cuadrante.domain.entities import ChangeAction, ChangeLogRecord
from cuadrante.infrastructure.database.models import ChangeLogModel


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SQLAlchemyChangeLogRepository(ChangeLogRepository):
    """Implements the ChangeLogRepository port using SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ChangeLogModel) -> ChangeLogRecord:
        """Map ORM model → domain entity."""
        return ChangeLogRecord(
            id=model.id,
            timestamp=_as_utc(model.timestamp),
            user=model.user,
            action=ChangeAction(model.action),
            entry_date_key=model.entry_date_key,
            previous_data=model.previous_data,
            new_data=model.new_data,
        )

    def _to_model(self, entity: ChangeLogRecord) -> ChangeLogModel:
        """Map domain entity → ORM model."""
        return ChangeLogModel(
            timestamp=entity.timestamp,
            user=entity.user,
            action=entity.action.value,
            entry_date_key=entity.entry_date_key,
            previous_data=entity.previous_data,
            new_data=entity.new_data,
        )

    async def append(self, record: ChangeLogRecord) -> ChangeLogRecord:
        model = self._to_model(record)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def list_between(self, start: datetime, end: datetime) -> list[ChangeLogRecord]:
        stmt = (
            select(ChangeLogModel)
            .where(ChangeLogModel.timestamp >= start)
            .where(ChangeLogModel.timestamp < end)
            .order_by(ChangeLogModel.timestamp.desc(), ChangeLogModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]
