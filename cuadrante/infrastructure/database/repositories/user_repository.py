"""Concrete repository implementation for User backed by SQLAlchemy."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cuadrante.application.interfaces import UserRepository
from cuadrante.domain.entities import User, UserRole
from cuadrante.infrastructure.database.models import UserModel


class SQLAlchemyUserRepository(UserRepository):
    """Implements the UserRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            identifier=model.identifier,
            role=UserRole(model.role),
            created_at=model.created_at,
        )

    async def _first_where(self, *criteria) -> User | None:
        result = await self._session.execute(select(UserModel).where(*criteria))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_identifier(self, identifier: str) -> User | None:
        return await self._first_where(UserModel.identifier == identifier)

    async def get_by_name(self, name: str) -> User | None:
        return await self._first_where(UserModel.name == name)

    async def get_all(self) -> list[User]:
        result = await self._session.execute(
            select(UserModel).order_by(UserModel.created_at, UserModel.name)
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(UserModel))
        return result.scalar_one()

    async def create(self, user: User) -> User:
        model = UserModel(
            id=user.id,
            name=user.name,
            identifier=user.identifier,
            role=user.role.value,
            created_at=user.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, user_id: str) -> bool:
        model = await self._session.get(UserModel, user_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
