"""Application service (use case) for the calendar change log."""

import logging
from typing import Any

from cuadrante.application.interfaces import ChangeLogRepository
from cuadrante.domain.date_keys import month_time_range
from cuadrante.domain.entities import ChangeAction, ChangeLogRecord, UNKNOWN_ACTOR

logger = logging.getLogger(__name__)


class ChangeLogService:
    """Appends raw snapshots and reads them back for the monthly report."""

    def __init__(self, repository: ChangeLogRepository):
        self._repository = repository

    async def record(
        self,
        action: ChangeAction,
        date_key: str,
        actor: str | None,
        previous: dict[str, Any] | None,
        new: dict[str, Any] | None,
    ) -> ChangeLogRecord:
        """Store both snapshots verbatim. No diff is computed here."""
        record = ChangeLogRecord(
            action=action,
            entry_date_key=date_key,
            user=actor or UNKNOWN_ACTOR,
            previous_data=previous if action != ChangeAction.CREATE else None,
            new_data=new if action != ChangeAction.DELETE else None,
        )
        saved = await self._repository.append(record)
        logger.info(
            "Change log: %s %s by %s (record %s)",
            action.value,
            date_key,
            saved.user,
            saved.id,
        )
        return saved

    async def report(self, year: int, month: int) -> list[ChangeLogRecord]:
        """Records *written* during the given month, newest first.

        The month filters on each record's own timestamp, not on the entry
        date it describes.
        """
        start, end = month_time_range(year, month)
        return await self._repository.list_between(start, end)
