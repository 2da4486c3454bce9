"""
Integration tests for the SQLAlchemy repositories.

These tests verify:
1. The partial unique index allows one Pending application per customer
2. Partial updates write only the named fields
3. Not-found lookups raise the storage-level error
4. Application search filters, orders and paginates
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from default_management.domain.entities import (
    ApplicationStatus,
    Customer,
    DefaultApplication,
    Severity,
)
from default_management.domain.exceptions import DuplicateRecordError, RecordNotFoundError
from default_management.domain.interfaces import ApplicationFilter


def make_application(customer: Customer, applicant_id, **overrides) -> DefaultApplication:
    values = dict(
        customer_id=customer.id,
        severity=Severity.MEDIUM,
        default_reason="Overdue",
        applicant_id=applicant_id,
    )
    values.update(overrides)
    return DefaultApplication(**values)


# =============================================================================
# Customers and Users
# =============================================================================

class TestCustomerRepository:

    @pytest.mark.asyncio
    async def test_get_by_name(self, customers, uow_factory):
        async with uow_factory() as uow:
            customer = await uow.customers.get_by_name("Globex")

        assert customer.id == customers["Globex"].id
        assert customer.industry == "Retail"
        assert customer.latest_ext_grade == "B"

    @pytest.mark.asyncio
    async def test_missing_customer_raises(self, customers, uow_factory):
        async with uow_factory() as uow:
            with pytest.raises(RecordNotFoundError):
                await uow.customers.get_by_name("acme")
            with pytest.raises(RecordNotFoundError):
                await uow.customers.get_by_id(uuid4())

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected(self, customers, uow_factory):
        async with uow_factory() as uow:
            with pytest.raises(DuplicateRecordError):
                await uow.customers.create(Customer(name="Acme", industry="X", region="Y"))

    @pytest.mark.asyncio
    async def test_update_writes_only_named_fields(self, customers, uow_factory):
        acme = customers["Acme"]
        changed = Customer(
            id=acme.id,
            name=acme.name,
            industry="Mining",
            region=acme.region,
            is_default=True,
        )
        async with uow_factory() as uow:
            await uow.customers.update(changed, ["is_default"])
            await uow.commit()

        async with uow_factory() as uow:
            stored = await uow.customers.get_by_id(acme.id)

        assert stored.is_default is True
        assert stored.industry == "Finance"

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_fields(self, customers, uow_factory):
        async with uow_factory() as uow:
            with pytest.raises(ValueError):
                await uow.customers.update(customers["Acme"], ["name"])

    @pytest.mark.asyncio
    async def test_uncommitted_work_is_discarded(self, customers, uow_factory):
        acme = customers["Acme"]
        acme.is_default = True
        async with uow_factory() as uow:
            await uow.customers.update(acme, ["is_default"])

        async with uow_factory() as uow:
            stored = await uow.customers.get_by_id(acme.id)

        assert stored.is_default is False


class TestUserRepository:

    @pytest.mark.asyncio
    async def test_lookup_by_username(self, applicant, uow_factory):
        async with uow_factory() as uow:
            user = await uow.users.get_by_username("alice")

        assert user.id == applicant.id
        assert user.password_hash != "secret123"

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, applicant, uow_factory):
        async with uow_factory() as uow:
            with pytest.raises(DuplicateRecordError):
                await uow.users.create(applicant)


# =============================================================================
# Applications
# =============================================================================

class TestPendingUniqueness:

    @pytest.mark.asyncio
    async def test_second_pending_row_rejected(self, customers, applicant, uow_factory):
        acme = customers["Acme"]

        async with uow_factory() as uow:
            await uow.applications.create(make_application(acme, applicant.id))
            await uow.commit()

        async with uow_factory() as uow:
            with pytest.raises(DuplicateRecordError):
                await uow.applications.create(make_application(acme, applicant.id))

    @pytest.mark.asyncio
    async def test_other_integrity_errors_propagate(self, customers, applicant, uow_factory):
        first = make_application(
            customers["Acme"], applicant.id, status=ApplicationStatus.REJECTED
        )

        async with uow_factory() as uow:
            await uow.applications.create(first)
            await uow.commit()

        # Same primary key, different customer: not a pending-index violation
        clash = make_application(customers["Globex"], applicant.id, id=first.id)

        async with uow_factory() as uow:
            with pytest.raises(IntegrityError):
                await uow.applications.create(clash)

    @pytest.mark.asyncio
    async def test_decided_rows_do_not_block(self, customers, applicant, uow_factory):
        acme = customers["Acme"]

        async with uow_factory() as uow:
            await uow.applications.create(
                make_application(acme, applicant.id, status=ApplicationStatus.REJECTED)
            )
            await uow.applications.create(
                make_application(acme, applicant.id, status=ApplicationStatus.REJECTED)
            )
            await uow.applications.create(make_application(acme, applicant.id))
            await uow.commit()

        async with uow_factory() as uow:
            pending = await uow.applications.find_pending_by_customer_id(acme.id)

        assert pending is not None
        assert pending.status == ApplicationStatus.PENDING

    @pytest.mark.asyncio
    async def test_no_pending_returns_none(self, customers, uow_factory):
        async with uow_factory() as uow:
            assert await uow.applications.find_pending_by_customer_id(customers["Acme"].id) is None

    @pytest.mark.asyncio
    async def test_update_of_missing_application_raises(self, customers, applicant, uow_factory):
        ghost = make_application(customers["Acme"], applicant.id)

        async with uow_factory() as uow:
            with pytest.raises(RecordNotFoundError):
                await uow.applications.update(ghost, ["status"])


class TestApplicationSearch:

    @pytest.fixture
    def base_time(self):
        return datetime(2024, 1, 1, tzinfo=timezone.utc)

    async def _seed(self, customers, applicant_id, uow_factory, base_time):
        rows = [
            ("Acme", ApplicationStatus.REJECTED, 0),
            ("Acme", ApplicationStatus.PENDING, 1),
            ("Globex", ApplicationStatus.APPROVED, 2),
            ("Initech", ApplicationStatus.PENDING, 3),
            ("Umbrella", ApplicationStatus.REJECTED, 4),
        ]
        async with uow_factory() as uow:
            for name, status, day in rows:
                await uow.applications.create(
                    make_application(
                        customers[name],
                        applicant_id,
                        status=status,
                        application_time=base_time + timedelta(days=day),
                    )
                )
            await uow.commit()

    @pytest.mark.asyncio
    async def test_newest_first_with_total(self, customers, applicant, uow_factory, base_time):
        await self._seed(customers, applicant.id, uow_factory, base_time)

        async with uow_factory() as uow:
            items, total = await uow.applications.find_all(ApplicationFilter())

        assert total == 5
        assert [a.customer.name for a in items] == [
            "Umbrella", "Initech", "Globex", "Acme", "Acme",
        ]
        assert all(a.applicant.username == "alice" for a in items)
        assert all(a.approver is None for a in items)

    @pytest.mark.asyncio
    async def test_name_filter_is_case_insensitive_substring(
        self, customers, applicant, uow_factory, base_time
    ):
        await self._seed(customers, applicant.id, uow_factory, base_time)

        async with uow_factory() as uow:
            items, total = await uow.applications.find_all(ApplicationFilter(customer_name="CM"))

        assert total == 2
        assert {a.customer.name for a in items} == {"Acme"}

    @pytest.mark.asyncio
    async def test_status_filter(self, customers, applicant, uow_factory, base_time):
        await self._seed(customers, applicant.id, uow_factory, base_time)

        async with uow_factory() as uow:
            items, total = await uow.applications.find_all(
                ApplicationFilter(status=ApplicationStatus.PENDING)
            )

        assert total == 2
        assert [a.customer.name for a in items] == ["Initech", "Acme"]

    @pytest.mark.asyncio
    async def test_pagination(self, customers, applicant, uow_factory, base_time):
        await self._seed(customers, applicant.id, uow_factory, base_time)

        async with uow_factory() as uow:
            items, total = await uow.applications.find_all(ApplicationFilter(page=2, page_size=2))

        assert total == 5
        assert [a.customer.name for a in items] == ["Globex", "Acme"]
