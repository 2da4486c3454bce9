"""SQLAlchemy unit of work."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from default_management.domain.interfaces import UnitOfWork

from .application_repository import PostgresApplicationRepository
from .customer_repository import PostgresCustomerRepository
from .statistics_repository import PostgresStatisticsRepository
from .user_repository import PostgresUserRepository


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    Opens one session per ``async with`` block and binds fresh
    repositories to it.

    The session is closed on exit; anything not committed by then is
    rolled back.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    async def __aenter__(self) -> "SqlAlchemyUnitOfWork":
        self._session = self._session_factory()
        self.users = PostgresUserRepository(self._session)
        self.customers = PostgresCustomerRepository(self._session)
        self.applications = PostgresApplicationRepository(self._session)
        self.statistics = PostgresStatisticsRepository(self._session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            await self._session.close()
            self._session = None

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
