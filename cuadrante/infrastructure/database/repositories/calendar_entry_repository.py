"""Concrete repository implementation for CalendarEntry backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from cuadrante.application.interfaces import CalendarEntryRepository
from cuadrante.domain.entities import CalendarEntry
from cuadrante.infrastructure.database.models import CalendarEntryModel

# Dialect inserts that support ON CONFLICT ... DO NOTHING.
_UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class SQLAlchemyCalendarEntryRepository(CalendarEntryRepository):
    """Implements the CalendarEntryRepository port using SQLAlchemy async sessions.

    On SQLite the claiming INSERT takes the database write lock; on
    PostgreSQL the conflicting INSERT waits for the other writer and the
    following ``SELECT ... FOR UPDATE`` locks the row.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: CalendarEntryModel) -> CalendarEntry:
        """Map ORM model → domain entity."""
        return CalendarEntry(
            date_key=model.date_key,
            name=model.name or "",
            address=model.address or "",
            phone=model.phone or "",
            editor=model.editor,
            image_urls=list(model.image_urls or []),
        )

    async def get_by_date_key(self, date_key: str) -> CalendarEntry | None:
        result = await self._session.get(CalendarEntryModel, date_key)
        return self._to_entity(result) if result else None

    async def list_between(self, start_key: str, end_key: str) -> list[CalendarEntry]:
        stmt = (
            select(CalendarEntryModel)
            .where(CalendarEntryModel.date_key >= start_key)
            .where(CalendarEntryModel.date_key <= end_key)
            .order_by(CalendarEntryModel.date_key)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def claim(self, date_key: str) -> bool:
        dialect = self._session.get_bind().dialect.name
        try:
            insert = _UPSERT_INSERTS[dialect]
        except KeyError:
            raise NotImplementedError(f"Unsupported database dialect: {dialect}") from None

        stmt = (
            insert(CalendarEntryModel)
            .values(date_key=date_key, name="", address="", phone="", image_urls=[])
            .on_conflict_do_nothing(index_elements=[CalendarEntryModel.date_key])
            .returning(CalendarEntryModel.date_key)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_for_update(self, date_key: str) -> CalendarEntry | None:
        stmt = (
            select(CalendarEntryModel)
            .where(CalendarEntryModel.date_key == date_key)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def save(self, entry: CalendarEntry) -> CalendarEntry:
        model = await self._session.get(CalendarEntryModel, entry.date_key)
        if model is None:
            model = CalendarEntryModel(date_key=entry.date_key)
            self._session.add(model)

        model.name = entry.name
        model.address = entry.address
        model.phone = entry.phone
        model.editor = entry.editor
        # Assign a fresh list so the JSON column is flagged as modified.
        model.image_urls = list(entry.image_urls)

        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def delete(self, date_key: str) -> bool:
        model = await self._session.get(CalendarEntryModel, date_key)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
