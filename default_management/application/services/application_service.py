"""Application service - the default application lifecycle engine."""

from datetime import datetime, timezone
from typing import Callable, List, Optional
from uuid import UUID

import structlog

from default_management.core.metrics import record_transition, track_lifecycle_latency
from default_management.domain.entities import (
    ApplicationStatus,
    Customer,
    DefaultApplication,
    Severity,
)
from default_management.domain.exceptions import (
    ApplicationConflictException,
    ApplicationNotFoundException,
    ConflictReason,
    CustomerNotFoundException,
    DuplicateRecordError,
    RecordNotFoundError,
)
from default_management.domain.interfaces import UnitOfWork, UnitOfWorkFactory

logger = structlog.get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ApplicationService:
    """
    Application service for default application use cases.

    Sole writer of application status and of the customer default flag.
    Every operation runs in its own unit of work; transitions that touch
    both the customer and the application commit them together.
    """

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def create_application(
        self,
        customer_name: str,
        severity: Severity,
        reason: str,
        remarks: Optional[str],
        applicant_id: UUID,
    ) -> DefaultApplication:
        """
        Submit a new default application for a customer.

        Checks run in order and the first failure wins.

        Returns:
            The stored application with its customer populated

        Raises:
            CustomerNotFoundException: If no customer has this name
            ApplicationConflictException: ALREADY_DEFAULT if the customer is
                already in default, DUPLICATE_PENDING if it already has a
                pending application
        """
        log = logger.bind(customer_name=customer_name, applicant_id=str(applicant_id))

        with track_lifecycle_latency("create"):
            async with self._uow_factory() as uow:
                try:
                    customer = await uow.customers.get_by_name(customer_name)
                except RecordNotFoundError as exc:
                    raise CustomerNotFoundException(customer_name) from exc

                if customer.is_default:
                    raise ApplicationConflictException(ConflictReason.ALREADY_DEFAULT)

                existing = await uow.applications.find_pending_by_customer_id(customer.id)
                if existing is not None:
                    raise ApplicationConflictException(ConflictReason.DUPLICATE_PENDING)

                application = DefaultApplication(
                    customer_id=customer.id,
                    severity=severity,
                    default_reason=reason,
                    remarks=remarks,
                    applicant_id=applicant_id,
                    application_time=self._clock(),
                )

                try:
                    await uow.applications.create(application)
                except DuplicateRecordError as exc:
                    # Lost a race with a concurrent submission for this customer
                    raise ApplicationConflictException(ConflictReason.DUPLICATE_PENDING) from exc

                await uow.commit()

        application.customer = customer
        record_transition("create")
        log.info(
            "application_created",
            application_id=str(application.id),
            severity=severity.value,
        )

        return application

    async def approve_application(self, application_id: UUID, approver_id: UUID) -> None:
        """
        Approve a pending application and mark its customer as in default.

        The customer flag and the application status are written in one
        transaction; a failure in either write leaves both unchanged.

        Raises:
            ApplicationNotFoundException: If the application does not exist
            ApplicationConflictException: NOT_PENDING if it is not pending
        """
        with track_lifecycle_latency("approve"):
            async with self._uow_factory() as uow:
                application = await self._load(uow, application_id)
                fields = application.approve(approver_id, self._clock())

                customer = self._customer_of(application)
                customer.is_default = True
                await uow.customers.update(customer, ["is_default"])
                await uow.applications.update(application, fields)

                await uow.commit()

        record_transition("approve")
        logger.info(
            "application_approved",
            application_id=str(application_id),
            approver_id=str(approver_id),
            customer_id=str(application.customer_id),
        )

    async def reject_application(
        self,
        application_id: UUID,
        approver_id: UUID,
        reason: str,
    ) -> None:
        """
        Reject a pending application. The customer is not touched.

        Raises:
            ApplicationNotFoundException: If the application does not exist
            ApplicationConflictException: NOT_PENDING if it is not pending
        """
        with track_lifecycle_latency("reject"):
            async with self._uow_factory() as uow:
                application = await self._load(uow, application_id)
                fields = application.reject(approver_id, reason, self._clock())
                await uow.applications.update(application, fields)

                await uow.commit()

        record_transition("reject")
        logger.info(
            "application_rejected",
            application_id=str(application_id),
            approver_id=str(approver_id),
        )

    async def apply_for_rebirth(
        self,
        application_id: UUID,
        applicant_id: UUID,
        rebirth_reason: str,
    ) -> None:
        """
        Request reversal of an approved default determination.

        Raises:
            ApplicationNotFoundException: If the application does not exist
            ApplicationConflictException: NOT_APPROVED if it is not approved
        """
        with track_lifecycle_latency("apply_rebirth"):
            async with self._uow_factory() as uow:
                application = await self._load(uow, application_id)
                fields = application.apply_for_rebirth(applicant_id, rebirth_reason)
                await uow.applications.update(application, fields)

                await uow.commit()

        record_transition("apply_rebirth")
        logger.info(
            "rebirth_requested",
            application_id=str(application_id),
            applicant_id=str(applicant_id),
        )

    async def approve_rebirth(self, application_id: UUID, approver_id: UUID) -> None:
        """
        Approve a rebirth request and clear the customer's default flag.

        Both writes commit together or not at all.

        Raises:
            ApplicationNotFoundException: If the application does not exist
            ApplicationConflictException: NOT_REBIRTH_PENDING if no rebirth
                is awaiting approval
        """
        with track_lifecycle_latency("approve_rebirth"):
            async with self._uow_factory() as uow:
                application = await self._load(uow, application_id)
                fields = application.approve_rebirth(approver_id, self._clock())
                await uow.applications.update(application, fields)

                customer = self._customer_of(application)
                customer.is_default = False
                await uow.customers.update(customer, ["is_default"])

                await uow.commit()

        record_transition("approve_rebirth")
        logger.info(
            "rebirth_approved",
            application_id=str(application_id),
            approver_id=str(approver_id),
            customer_id=str(application.customer_id),
        )

    async def get_pending_applications(self) -> List[DefaultApplication]:
        """Return all pending applications with customer and applicant resolved."""
        async with self._uow_factory() as uow:
            return await uow.applications.find_all_by_status(ApplicationStatus.PENDING)

    async def _load(self, uow: UnitOfWork, application_id: UUID) -> DefaultApplication:
        try:
            return await uow.applications.get_by_id(application_id)
        except RecordNotFoundError as exc:
            raise ApplicationNotFoundException(str(application_id)) from exc

    def _customer_of(self, application: DefaultApplication) -> Customer:
        if application.customer is None:
            raise CustomerNotFoundException(str(application.customer_id))
        return application.customer
