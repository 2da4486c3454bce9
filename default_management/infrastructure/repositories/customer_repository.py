"""PostgreSQL implementation of CustomerRepository."""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from default_management.domain.entities import Customer
from default_management.domain.exceptions import DuplicateRecordError, RecordNotFoundError
from default_management.domain.interfaces import CustomerRepository
from default_management.infrastructure.database.models import CustomerModel

from .fields import column_values


class PostgresCustomerRepository(CustomerRepository):
    """
    PostgreSQL implementation of the Customer repository.

    Uses SQLAlchemy async session for database operations.
    """

    UPDATABLE_FIELDS = frozenset({"is_default", "latest_ext_grade"})

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, customer: Customer) -> Customer:
        """Persist a customer to the database."""
        model = CustomerModel(
            id=str(customer.id),
            name=customer.name,
            industry=customer.industry,
            region=customer.region,
            is_default=customer.is_default,
            latest_ext_grade=customer.latest_ext_grade,
            created_at=customer.created_at,
        )

        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise DuplicateRecordError("customer", customer.name) from exc

        return customer

    async def get_by_id(self, customer_id: UUID) -> Customer:
        """Retrieve a customer by ID."""
        stmt = select(CustomerModel).where(CustomerModel.id == str(customer_id))
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            raise RecordNotFoundError("customer", customer_id)

        return to_customer_entity(model)

    async def get_by_name(self, name: str) -> Customer:
        """Retrieve a customer by name."""
        stmt = select(CustomerModel).where(CustomerModel.name == name)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            raise RecordNotFoundError("customer", name)

        return to_customer_entity(model)

    async def update(self, customer: Customer, fields: Sequence[str]) -> None:
        """Write the named fields of a customer."""
        unknown = set(fields) - self.UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Customer fields cannot be updated: {sorted(unknown)}")

        stmt = (
            update(CustomerModel)
            .where(CustomerModel.id == str(customer.id))
            .values(column_values(customer, fields))
        )
        result = await self._session.execute(stmt)

        if result.rowcount == 0:
            raise RecordNotFoundError("customer", customer.id)


def to_customer_entity(model: CustomerModel) -> Customer:
    """Convert database model to domain entity."""
    return Customer(
        id=UUID(model.id),
        name=model.name,
        industry=model.industry,
        region=model.region,
        is_default=model.is_default,
        latest_ext_grade=model.latest_ext_grade,
        created_at=model.created_at,
    )
