"""
Integration tests for the application lifecycle engine.

These tests verify, against a real database:
1. Creation checks run in order: customer exists, not default, no pending
2. Approve and rebirth-approve keep the customer default flag in step
3. Transitions from the wrong state are refused without side effects
4. A failed write inside a transition rolls back both entities
5. A lost creation race still surfaces as a duplicate-pending conflict
"""

from uuid import uuid4

import pytest

from default_management.domain.entities import ApplicationStatus, Severity
from default_management.domain.exceptions import (
    ApplicationConflictException,
    ApplicationNotFoundException,
    ConflictReason,
    CustomerNotFoundException,
)
from default_management.infrastructure.repositories import (
    PostgresApplicationRepository,
    PostgresCustomerRepository,
)


async def load_customer(uow_factory, name):
    async with uow_factory() as uow:
        return await uow.customers.get_by_name(name)


async def load_application(uow_factory, application_id):
    async with uow_factory() as uow:
        return await uow.applications.get_by_id(application_id)


@pytest.fixture
def submit(application_service, applicant):
    """Submit an application for a customer as the seeded applicant."""

    async def _submit(customer_name: str, severity: Severity = Severity.HIGH):
        return await application_service.create_application(
            customer_name=customer_name,
            severity=severity,
            reason="Payment overdue",
            remarks=None,
            applicant_id=applicant.id,
        )

    return _submit


# =============================================================================
# Creation
# =============================================================================

class TestCreateApplication:

    @pytest.mark.asyncio
    async def test_creates_pending_application(self, customers, submit, uow_factory, clock):
        application = await submit("Acme")

        assert application.status == ApplicationStatus.PENDING
        assert application.customer.name == "Acme"
        assert application.application_time == clock.now

        stored = await load_application(uow_factory, application.id)
        assert stored.status == ApplicationStatus.PENDING
        assert stored.customer_id == customers["Acme"].id
        assert stored.severity == Severity.HIGH

    @pytest.mark.asyncio
    async def test_creation_does_not_touch_customer(self, customers, submit, uow_factory):
        await submit("Acme")

        customer = await load_customer(uow_factory, "Acme")
        assert customer.is_default is False

    @pytest.mark.asyncio
    async def test_unknown_customer(self, customers, submit):
        with pytest.raises(CustomerNotFoundException) as exc_info:
            await submit("Nobody Inc")

        assert exc_info.value.code == "CUSTOMER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_second_pending_application_conflicts(self, customers, submit):
        await submit("Acme")

        with pytest.raises(ApplicationConflictException) as exc_info:
            await submit("Acme", Severity.LOW)

        assert exc_info.value.reason == ConflictReason.DUPLICATE_PENDING

    @pytest.mark.asyncio
    async def test_default_customer_conflicts(
        self, customers, submit, application_service, approver
    ):
        application = await submit("Acme")
        await application_service.approve_application(application.id, approver.id)

        with pytest.raises(ApplicationConflictException) as exc_info:
            await submit("Acme")

        assert exc_info.value.reason == ConflictReason.ALREADY_DEFAULT

    @pytest.mark.asyncio
    async def test_default_check_runs_before_duplicate_check(
        self, customers, submit, application_service, approver, uow_factory
    ):
        # Force a customer that is both default and has a pending application
        await submit("Acme")
        async with uow_factory() as uow:
            customer = await uow.customers.get_by_name("Acme")
            customer.is_default = True
            await uow.customers.update(customer, ["is_default"])
            await uow.commit()

        with pytest.raises(ApplicationConflictException) as exc_info:
            await submit("Acme")

        assert exc_info.value.reason == ConflictReason.ALREADY_DEFAULT

    @pytest.mark.asyncio
    async def test_rejected_customer_can_be_submitted_again(
        self, customers, submit, application_service, approver
    ):
        first = await submit("Acme")
        await application_service.reject_application(first.id, approver.id, "Not overdue")

        second = await submit("Acme")

        assert second.id != first.id
        assert second.status == ApplicationStatus.PENDING

    @pytest.mark.asyncio
    async def test_lost_race_is_reported_as_duplicate(
        self, customers, submit, monkeypatch
    ):
        await submit("Acme")

        # Simulate a concurrent submission that passed the pending check
        async def no_pending(self, customer_id):
            return None

        monkeypatch.setattr(
            PostgresApplicationRepository, "find_pending_by_customer_id", no_pending
        )

        with pytest.raises(ApplicationConflictException) as exc_info:
            await submit("Acme")

        assert exc_info.value.reason == ConflictReason.DUPLICATE_PENDING


# =============================================================================
# Review
# =============================================================================

class TestReview:

    @pytest.mark.asyncio
    async def test_approve_marks_customer_default(
        self, customers, submit, application_service, approver, uow_factory, clock
    ):
        application = await submit("Acme")
        clock.set(2024)

        await application_service.approve_application(application.id, approver.id)

        stored = await load_application(uow_factory, application.id)
        assert stored.status == ApplicationStatus.APPROVED
        assert stored.approver_id == approver.id
        assert stored.approval_time.year == 2024
        assert stored.customer.is_default is True

    @pytest.mark.asyncio
    async def test_reject_leaves_customer_alone(
        self, customers, submit, application_service, approver, uow_factory
    ):
        application = await submit("Acme")

        await application_service.reject_application(application.id, approver.id, "Paid")

        stored = await load_application(uow_factory, application.id)
        assert stored.status == ApplicationStatus.REJECTED
        assert stored.rejection_reason == "Paid"
        assert stored.approver_id == approver.id
        assert stored.customer.is_default is False

    @pytest.mark.asyncio
    async def test_approve_twice_conflicts(
        self, customers, submit, application_service, approver, uow_factory
    ):
        application = await submit("Acme")
        await application_service.approve_application(application.id, approver.id)
        first = await load_application(uow_factory, application.id)

        with pytest.raises(ApplicationConflictException) as exc_info:
            await application_service.approve_application(application.id, uuid4())

        assert exc_info.value.reason == ConflictReason.NOT_PENDING
        second = await load_application(uow_factory, application.id)
        assert second.approver_id == first.approver_id
        assert second.approval_time == first.approval_time

    @pytest.mark.asyncio
    async def test_reject_approved_conflicts(
        self, customers, submit, application_service, approver
    ):
        application = await submit("Acme")
        await application_service.approve_application(application.id, approver.id)

        with pytest.raises(ApplicationConflictException) as exc_info:
            await application_service.reject_application(application.id, approver.id, "x")

        assert exc_info.value.reason == ConflictReason.NOT_PENDING

    @pytest.mark.asyncio
    async def test_unknown_application(self, customers, application_service, approver):
        with pytest.raises(ApplicationNotFoundException) as exc_info:
            await application_service.approve_application(uuid4(), approver.id)

        assert exc_info.value.code == "APPLICATION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_failed_application_write_rolls_back_customer(
        self, customers, submit, application_service, approver, uow_factory, monkeypatch
    ):
        application = await submit("Acme")

        async def failing_update(self, application, fields):
            raise RuntimeError("write failed")

        monkeypatch.setattr(PostgresApplicationRepository, "update", failing_update)

        with pytest.raises(RuntimeError):
            await application_service.approve_application(application.id, approver.id)

        monkeypatch.undo()
        customer = await load_customer(uow_factory, "Acme")
        stored = await load_application(uow_factory, application.id)
        assert customer.is_default is False
        assert stored.status == ApplicationStatus.PENDING

    @pytest.mark.asyncio
    async def test_pending_queue(
        self, customers, submit, application_service, approver
    ):
        acme = await submit("Acme")
        globex = await submit("Globex")
        initech = await submit("Initech")
        await application_service.reject_application(initech.id, approver.id, "No")

        pending = await application_service.get_pending_applications()

        assert {app.id for app in pending} == {acme.id, globex.id}
        for app in pending:
            assert app.customer is not None
            assert app.applicant.username == "alice"


# =============================================================================
# Rebirth
# =============================================================================

class TestRebirth:

    @pytest.mark.asyncio
    async def test_full_rebirth_clears_default(
        self, customers, submit, application_service, applicant, approver, uow_factory
    ):
        application = await submit("Acme")
        await application_service.approve_application(application.id, approver.id)

        await application_service.apply_for_rebirth(application.id, applicant.id, "Restructured")
        requested = await load_application(uow_factory, application.id)
        assert requested.status == ApplicationStatus.REBIRTH_PENDING
        assert requested.rebirth_applicant_id == applicant.id
        assert requested.customer.is_default is True

        await application_service.approve_rebirth(application.id, approver.id)
        reborn = await load_application(uow_factory, application.id)
        assert reborn.status == ApplicationStatus.REBORN
        assert reborn.rebirth_reason == "Restructured"
        assert reborn.rebirth_approver_id == approver.id
        assert reborn.rebirth_approval_time is not None
        assert reborn.customer.is_default is False

    @pytest.mark.asyncio
    async def test_reborn_customer_can_default_again(
        self, customers, submit, application_service, applicant, approver
    ):
        application = await submit("Acme")
        await application_service.approve_application(application.id, approver.id)
        await application_service.apply_for_rebirth(application.id, applicant.id, "Recovered")
        await application_service.approve_rebirth(application.id, approver.id)

        again = await submit("Acme")

        assert again.status == ApplicationStatus.PENDING

    @pytest.mark.asyncio
    async def test_rebirth_of_pending_conflicts(
        self, customers, submit, application_service, applicant
    ):
        application = await submit("Acme")

        with pytest.raises(ApplicationConflictException) as exc_info:
            await application_service.apply_for_rebirth(application.id, applicant.id, "x")

        assert exc_info.value.reason == ConflictReason.NOT_APPROVED

    @pytest.mark.asyncio
    async def test_approve_rebirth_without_request_conflicts(
        self, customers, submit, application_service, approver, uow_factory
    ):
        application = await submit("Acme")
        await application_service.approve_application(application.id, approver.id)

        with pytest.raises(ApplicationConflictException) as exc_info:
            await application_service.approve_rebirth(application.id, approver.id)

        assert exc_info.value.reason == ConflictReason.NOT_REBIRTH_PENDING
        customer = await load_customer(uow_factory, "Acme")
        assert customer.is_default is True

    @pytest.mark.asyncio
    async def test_failed_customer_write_rolls_back_rebirth(
        self, customers, submit, application_service, applicant, approver, uow_factory,
        monkeypatch,
    ):
        application = await submit("Acme")
        await application_service.approve_application(application.id, approver.id)
        await application_service.apply_for_rebirth(application.id, applicant.id, "Recovered")

        async def failing_update(self, customer, fields):
            raise RuntimeError("write failed")

        monkeypatch.setattr(PostgresCustomerRepository, "update", failing_update)

        with pytest.raises(RuntimeError):
            await application_service.approve_rebirth(application.id, approver.id)

        monkeypatch.undo()
        customer = await load_customer(uow_factory, "Acme")
        stored = await load_application(uow_factory, application.id)
        assert customer.is_default is True
        assert stored.status == ApplicationStatus.REBIRTH_PENDING
        assert stored.rebirth_approver_id is None
        assert stored.rebirth_approval_time is None
