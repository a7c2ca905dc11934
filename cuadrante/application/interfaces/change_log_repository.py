"""Abstract repository interface (port) for the append-only change log."""

from abc import ABC, abstractmethod
from datetime import datetime

from cuadrante.domain.entities import ChangeLogRecord


class ChangeLogRepository(ABC):
    """Port for change log persistence. Records are never updated or deleted."""

    @abstractmethod
    async def append(self, record: ChangeLogRecord) -> ChangeLogRecord:
        """Persist a record and return it with its id assigned."""
        ...

    @abstractmethod
    async def list_between(self, start: datetime, end: datetime) -> list[ChangeLogRecord]:
        """Records written in ``[start, end)``, newest first."""
        ...
