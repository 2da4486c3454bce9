"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from default_management.domain.entities import (
    ApplicationStatus,
    Customer,
    DefaultApplication,
    DimensionCount,
    StatisticsDimension,
    User,
)


@dataclass(frozen=True)
class ApplicationFilter:
    """Filter and pagination parameters for application searches."""

    customer_name: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    page: int = 1
    page_size: int = 10

    @property
    def offset(self) -> int:
        return (max(self.page, 1) - 1) * self.page_size


class UserRepository(ABC):
    """Abstract repository for User persistence."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Persist a new user.

        Raises:
            DuplicateRecordError: If the username is already taken
        """
        ...

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> User:
        """
        Retrieve a user by ID.

        Raises:
            RecordNotFoundError: If the user does not exist
        """
        ...

    @abstractmethod
    async def get_by_username(self, username: str) -> User:
        """
        Retrieve a user by username.

        Raises:
            RecordNotFoundError: If no user has this username
        """
        ...


class CustomerRepository(ABC):
    """
    Abstract repository for Customer persistence.

    Implementations may use PostgreSQL, in-memory storage, etc.
    """

    @abstractmethod
    async def create(self, customer: Customer) -> Customer:
        """Persist a new customer."""
        ...

    @abstractmethod
    async def get_by_id(self, customer_id: UUID) -> Customer:
        """
        Retrieve a customer by ID.

        Raises:
            RecordNotFoundError: If the customer does not exist
        """
        ...

    @abstractmethod
    async def get_by_name(self, name: str) -> Customer:
        """
        Retrieve a customer by its unique name.

        Raises:
            RecordNotFoundError: If the customer does not exist
        """
        ...

    @abstractmethod
    async def update(self, customer: Customer, fields: Sequence[str]) -> None:
        """
        Persist only the named fields of a customer.

        Args:
            customer: The customer carrying the new values
            fields: Attribute names to write
        """
        ...


class ApplicationRepository(ABC):
    """
    Abstract repository for DefaultApplication persistence.

    Lookups that return a single application populate its customer.
    """

    @abstractmethod
    async def create(self, application: DefaultApplication) -> DefaultApplication:
        """
        Persist a new application.

        Raises:
            DuplicateRecordError: If the customer already has a pending application
        """
        ...

    @abstractmethod
    async def get_by_id(self, application_id: UUID) -> DefaultApplication:
        """
        Retrieve an application with its customer.

        Raises:
            RecordNotFoundError: If the application does not exist
        """
        ...

    @abstractmethod
    async def find_pending_by_customer_id(
        self,
        customer_id: UUID,
    ) -> Optional[DefaultApplication]:
        """
        Find the pending application of a customer.

        Returns:
            The pending application, or None when there is none
        """
        ...

    @abstractmethod
    async def update(self, application: DefaultApplication, fields: Sequence[str]) -> None:
        """Persist only the named fields of an application."""
        ...

    @abstractmethod
    async def find_all_by_status(self, status: ApplicationStatus) -> List[DefaultApplication]:
        """Retrieve all applications in a status, with customer and applicant."""
        ...

    @abstractmethod
    async def find_all(
        self,
        params: ApplicationFilter,
    ) -> Tuple[List[DefaultApplication], int]:
        """
        Search applications.

        Returns:
            The requested page of applications and the total match count
        """
        ...


class StatisticsRepository(ABC):
    """Read-side aggregation over applications."""

    @abstractmethod
    async def get_counts_by_dimension(
        self,
        year: int,
        dimension: StatisticsDimension,
        status: ApplicationStatus,
    ) -> List[DimensionCount]:
        """
        Count applications per dimension value for a year.

        Approved rows are dated by approval time, Reborn rows by
        rebirth approval time. Other statuses yield an empty list.
        """
        ...
