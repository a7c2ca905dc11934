"""Abstract repository interface (port) for CalendarEntry persistence."""

from abc import ABC, abstractmethod

from cuadrante.domain.entities import CalendarEntry


class CalendarEntryRepository(ABC):
    """Port for entry persistence — implemented in the infrastructure layer.

    Writers call :meth:`claim` first. It makes sure a row exists for the
    date and holds that row's write lock until the unit of work ends, so
    concurrent writers to one date run one after the other.
    """

    @abstractmethod
    async def get_by_date_key(self, date_key: str) -> CalendarEntry | None:
        """Retrieve the entry stored for a date, if any."""
        ...

    @abstractmethod
    async def list_between(self, start_key: str, end_key: str) -> list[CalendarEntry]:
        """Entries whose key lies in the inclusive range, ordered by key."""
        ...

    @abstractmethod
    async def claim(self, date_key: str) -> bool:
        """Insert a blank row if none exists and lock it.

        Returns True when this call inserted the row.
        """
        ...

    @abstractmethod
    async def get_for_update(self, date_key: str) -> CalendarEntry | None:
        """Read the current row under the write lock."""
        ...

    @abstractmethod
    async def save(self, entry: CalendarEntry) -> CalendarEntry:
        """Overwrite the row for ``entry.date_key`` and return it as stored."""
        ...

    @abstractmethod
    async def delete(self, date_key: str) -> bool:
        """Delete a record. Returns True if deleted, False if not found."""
        ...
