"""Application service (use case) for calendar entry mutations.

Each write runs the same sequence inside one unit of work: claim the date's
row, read its current state under that lock, persist the new state, append a
change log record holding the before/after snapshots, and commit. Only a
committed write is broadcast on the sync bus.
"""

import logging
from collections.abc import Callable
from typing import Any

from cuadrante.application.interfaces import CalendarEntryRepository, UnitOfWork
from cuadrante.application.schemas.calendar_entry import (
    CalendarEntryCreate,
    CalendarEntryUpsert,
)
from cuadrante.application.services.change_log_service import ChangeLogService
from cuadrante.application.services.sync_bus import SyncBus
from cuadrante.domain.date_keys import month_key_range, validate_date_key
from cuadrante.domain.entities import CalendarEntry, ChangeAction
from cuadrante.domain.exceptions import DuplicateEntityError, EntityNotFoundError

logger = logging.getLogger(__name__)

# Builds the fields to write from the entry's locked current state.
ChangeBuilder = Callable[[CalendarEntry | None], dict[str, Any]]


class CalendarEntryService:
    """Orchestrates entry reads and writes. Depends on ports and the bus (DI)."""

    def __init__(
        self,
        repository: CalendarEntryRepository,
        change_log: ChangeLogService,
        sync_bus: SyncBus,
        unit_of_work: UnitOfWork,
    ):
        self._repository = repository
        self._change_log = change_log
        self._sync_bus = sync_bus
        self._unit_of_work = unit_of_work

    async def get_entry(self, date_key: str) -> CalendarEntry:
        validate_date_key(date_key)
        entry = await self._repository.get_by_date_key(date_key)
        if entry is None:
            raise EntityNotFoundError("CalendarEntry", date_key)
        return entry

    async def list_month(self, year: int, month: int) -> list[CalendarEntry]:
        start_key, end_key = month_key_range(year, month)
        return await self._repository.list_between(start_key, end_key)

    async def upsert_entry(self, date_key: str, data: CalendarEntryUpsert) -> CalendarEntry:
        """Create the entry if absent, otherwise replace the supplied fields."""
        validate_date_key(date_key)
        changes = data.changes()
        return await self._write(date_key, data.editor, lambda _: changes)

    async def create_entry(self, data: CalendarEntryCreate) -> CalendarEntry:
        validate_date_key(data.date_key)
        changes = data.changes()
        return await self._write(data.date_key, data.editor, lambda _: changes, must_be_new=True)

    async def add_image(self, date_key: str, url: str, editor: str) -> CalendarEntry:
        validate_date_key(date_key)

        def append(current: CalendarEntry | None) -> dict[str, Any]:
            urls = list(current.image_urls) if current else []
            return {"image_urls": [*urls, url]}

        return await self._write(date_key, editor, append)

    async def remove_image(self, date_key: str, url: str, editor: str) -> CalendarEntry:
        """Remove every occurrence of *url* from the entry's images."""
        await self.get_entry(date_key)

        def remove(current: CalendarEntry | None) -> dict[str, Any]:
            if current is None:
                raise EntityNotFoundError("CalendarEntry", date_key)
            return {"image_urls": [u for u in current.image_urls if u != url]}

        return await self._write(date_key, editor, remove)

    async def delete_entry(self, date_key: str) -> CalendarEntry:
        """Remove the whole record and return its last state."""
        validate_date_key(date_key)
        try:
            # A fresh claim means there was nothing to delete; the rollback drops it.
            if await self._repository.claim(date_key):
                raise EntityNotFoundError("CalendarEntry", date_key)
            entry = await self._repository.get_for_update(date_key)
            if entry is None or not await self._repository.delete(date_key):
                raise EntityNotFoundError("CalendarEntry", date_key)

            # Delete requests carry no actor.
            await self._change_log.record(
                ChangeAction.DELETE, date_key, None, entry.snapshot(), None
            )
            await self._unit_of_work.commit()
        except Exception:
            await self._unit_of_work.rollback()
            raise

        await self._sync_bus.entry_deleted(date_key)
        logger.info("Deleted entry %s", date_key)
        return entry

    async def _write(
        self,
        date_key: str,
        editor: str,
        build_changes: ChangeBuilder,
        must_be_new: bool = False,
    ) -> CalendarEntry:
        try:
            created = await self._repository.claim(date_key)
            if must_be_new and not created:
                raise DuplicateEntityError("CalendarEntry", "date_key", date_key)
            previous = None if created else await self._repository.get_for_update(date_key)

            changes = build_changes(previous)
            entry = (
                CalendarEntry.from_snapshot(previous.snapshot())
                if previous
                else CalendarEntry.blank(date_key)
            )
            entry.apply(changes, editor)
            saved = await self._repository.save(entry)

            action = ChangeAction.CREATE if previous is None else ChangeAction.UPDATE
            await self._change_log.record(
                action,
                date_key,
                editor,
                previous.snapshot() if previous else None,
                saved.snapshot(),
            )
            await self._unit_of_work.commit()
        except Exception:
            await self._unit_of_work.rollback()
            raise

        await self._sync_bus.entry_upserted(saved)
        logger.info(
            "%s entry %s by %s (fields: %s)",
            "Created" if action == ChangeAction.CREATE else "Updated",
            date_key,
            editor,
            ", ".join(sorted(changes)) or "none",
        )
        return saved
