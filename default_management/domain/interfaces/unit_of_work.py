"""Unit of work interface."""

from abc import ABC, abstractmethod
from typing import Callable

from .repositories import (
    ApplicationRepository,
    CustomerRepository,
    StatisticsRepository,
    UserRepository,
)


class UnitOfWork(ABC):
    """
    One database transaction and the repositories bound to it.

    Use as an async context manager. Writes become durable only after
    ``commit()``; leaving the block without committing, or with an
    exception, rolls everything back.
    """

    users: UserRepository
    customers: CustomerRepository
    applications: ApplicationRepository
    statistics: StatisticsRepository

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...


UnitOfWorkFactory = Callable[[], UnitOfWork]
