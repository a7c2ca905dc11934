"""Abstract unit of work (port) — the transaction a service's writes share."""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """Commits or discards every repository write made since the last commit."""

    @abstractmethod
    async def commit(self) -> None:
        """Make the pending writes durable. Raises ``StorageError`` on failure."""
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...
