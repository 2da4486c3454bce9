"""PostgreSQL implementation of UserRepository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from default_management.domain.entities import User, UserRole
from default_management.domain.exceptions import DuplicateRecordError, RecordNotFoundError
from default_management.domain.interfaces import UserRepository
from default_management.infrastructure.database.models import UserModel


class PostgresUserRepository(UserRepository):
    """PostgreSQL-backed identity store."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, user: User) -> User:
        model = UserModel(
            id=str(user.id),
            username=user.username,
            password_hash=user.password_hash,
            role=user.role.value,
            created_at=user.created_at,
        )

        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise DuplicateRecordError("user", user.username) from exc

        return user

    async def get_by_id(self, user_id: UUID) -> User:
        stmt = select(UserModel).where(UserModel.id == str(user_id))
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            raise RecordNotFoundError("user", user_id)

        return to_user_entity(model)

    async def get_by_username(self, username: str) -> User:
        stmt = select(UserModel).where(UserModel.username == username)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            raise RecordNotFoundError("user", username)

        return to_user_entity(model)


def to_user_entity(model: UserModel) -> User:
    """Convert database model to domain entity."""
    return User(
        id=UUID(model.id),
        username=model.username,
        password_hash=model.password_hash,
        role=UserRole(model.role),
        created_at=model.created_at,
    )
