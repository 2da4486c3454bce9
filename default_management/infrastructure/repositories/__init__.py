"""Repository implementations."""

from .application_repository import PostgresApplicationRepository
from .customer_repository import PostgresCustomerRepository
from .statistics_repository import PostgresStatisticsRepository
from .unit_of_work import SqlAlchemyUnitOfWork
from .user_repository import PostgresUserRepository

__all__ = [
    "PostgresApplicationRepository",
    "PostgresCustomerRepository",
    "PostgresStatisticsRepository",
    "PostgresUserRepository",
    "SqlAlchemyUnitOfWork",
]
