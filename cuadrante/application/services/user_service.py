"""Application service (use case) for team members and identifier login."""

import logging

from cuadrante.application.interfaces import UnitOfWork, UserRepository
from cuadrante.application.schemas.user import UserCreate
from cuadrante.application.services.sync_bus import SyncBus
from cuadrante.domain.entities import User, UserRole
from cuadrante.domain.exceptions import DuplicateEntityError, EntityNotFoundError

logger = logging.getLogger(__name__)


class UserService:
    """User directory. Role checks are left to the client."""

    def __init__(self, repository: UserRepository, sync_bus: SyncBus, unit_of_work: UnitOfWork):
        self._repository = repository
        self._sync_bus = sync_bus
        self._unit_of_work = unit_of_work

    async def login(self, identifier: str) -> User:
        user = await self._repository.get_by_identifier(identifier)
        if user is None:
            raise EntityNotFoundError("User", identifier)
        logger.info("User %s logged in", user.name)
        return user

    async def list_users(self) -> list[User]:
        return await self._repository.get_all()

    async def create_user(self, data: UserCreate) -> User:
        if await self._repository.get_by_name(data.name) is not None:
            raise DuplicateEntityError("User", "name", data.name)
        if await self._repository.get_by_identifier(data.identifier) is not None:
            raise DuplicateEntityError("User", "identifier", data.identifier)

        try:
            user = await self._repository.create(
                User(name=data.name, identifier=data.identifier, role=data.role)
            )
            await self._unit_of_work.commit()
        except Exception:
            await self._unit_of_work.rollback()
            raise

        await self._sync_bus.user_added(user)
        logger.info("Created user %s (%s)", user.name, user.role.value)
        return user

    async def delete_user(self, user_id: str) -> None:
        try:
            if not await self._repository.delete(user_id):
                raise EntityNotFoundError("User", user_id)
            await self._unit_of_work.commit()
        except Exception:
            await self._unit_of_work.rollback()
            raise

        await self._sync_bus.user_deleted(user_id)
        logger.info("Deleted user %s", user_id)

    async def ensure_default_admin(self, name: str, identifier: str) -> User | None:
        """Create an admin when the directory is empty. Idempotent."""
        if await self._repository.count() > 0:
            return None
        user = await self._repository.create(
            User(name=name, identifier=identifier, role=UserRole.ADMIN)
        )
        await self._unit_of_work.commit()
        logger.info("Created default admin user '%s'", name)
        return user
