"""Abstract repository interface (port) for User persistence."""

from abc import ABC, abstractmethod

from cuadrante.domain.entities import User


class UserRepository(ABC):

    @abstractmethod
    async def get_by_identifier(self, identifier: str) -> User | None:
        ...

    @abstractmethod
    async def get_by_name(self, name: str) -> User | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[User]:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def create(self, user: User) -> User:
        ...

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        """Delete a user. Returns True if deleted, False if not found."""
        ...
