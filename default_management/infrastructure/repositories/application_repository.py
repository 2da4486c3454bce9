"""PostgreSQL implementation of ApplicationRepository."""

from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func, inspect, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from default_management.domain.entities import (
    ApplicationStatus,
    DefaultApplication,
    Severity,
)
from default_management.domain.exceptions import DuplicateRecordError, RecordNotFoundError
from default_management.domain.interfaces import ApplicationFilter, ApplicationRepository
from default_management.infrastructure.database.models import (
    CustomerModel,
    DefaultApplicationModel,
)

from .customer_repository import to_customer_entity
from .fields import column_values
from .user_repository import to_user_entity

# PostgreSQL names the index; SQLite reports the indexed column
PENDING_INDEX_MARKERS = (
    "uq_default_applications_pending_customer",
    "default_applications.customer_id",
)


def _violates_pending_index(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return any(marker in message for marker in PENDING_INDEX_MARKERS)


class PostgresApplicationRepository(ApplicationRepository):
    """
    PostgreSQL implementation of the DefaultApplication repository.

    Uses SQLAlchemy async session for database operations.
    """

    UPDATABLE_FIELDS = frozenset({
        "status",
        "approver_id",
        "approval_time",
        "rejection_reason",
        "rebirth_reason",
        "rebirth_applicant_id",
        "rebirth_approver_id",
        "rebirth_approval_time",
    })

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, application: DefaultApplication) -> DefaultApplication:
        """Persist an application to the database."""
        model = DefaultApplicationModel(
            id=str(application.id),
            customer_id=str(application.customer_id),
            status=application.status.value,
            severity=application.severity.value,
            default_reason=application.default_reason,
            remarks=application.remarks,
            applicant_id=str(application.applicant_id),
            application_time=application.application_time,
        )

        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            if not _violates_pending_index(exc):
                raise
            raise DuplicateRecordError(
                "default_application",
                f"pending application for customer {application.customer_id}",
            ) from exc

        return application

    async def get_by_id(self, application_id: UUID) -> DefaultApplication:
        """Retrieve an application with its customer."""
        stmt = (
            select(DefaultApplicationModel)
            .options(selectinload(DefaultApplicationModel.customer))
            .where(DefaultApplicationModel.id == str(application_id))
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            raise RecordNotFoundError("default_application", application_id)

        return self._to_entity(model)

    async def find_pending_by_customer_id(
        self,
        customer_id: UUID,
    ) -> Optional[DefaultApplication]:
        """Find the pending application of a customer, if any."""
        stmt = (
            select(DefaultApplicationModel)
            .where(
                DefaultApplicationModel.customer_id == str(customer_id),
                DefaultApplicationModel.status == ApplicationStatus.PENDING.value,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def update(self, application: DefaultApplication, fields: Sequence[str]) -> None:
        """Write the named fields of an application."""
        unknown = set(fields) - self.UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Application fields cannot be updated: {sorted(unknown)}")

        stmt = (
            update(DefaultApplicationModel)
            .where(DefaultApplicationModel.id == str(application.id))
            .values(column_values(application, fields))
        )
        result = await self._session.execute(stmt)

        if result.rowcount == 0:
            raise RecordNotFoundError("default_application", application.id)

    async def find_all_by_status(self, status: ApplicationStatus) -> List[DefaultApplication]:
        """Retrieve applications in a status, oldest submission first."""
        stmt = (
            select(DefaultApplicationModel)
            .options(
                selectinload(DefaultApplicationModel.customer),
                selectinload(DefaultApplicationModel.applicant),
            )
            .where(DefaultApplicationModel.status == status.value)
            .order_by(DefaultApplicationModel.application_time.asc())
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._to_entity(model) for model in models]

    async def find_all(
        self,
        params: ApplicationFilter,
    ) -> Tuple[List[DefaultApplication], int]:
        """Search applications, newest submission first."""
        conditions = []
        if params.customer_name:
            conditions.append(CustomerModel.name.ilike(f"%{params.customer_name}%"))
        if params.status is not None:
            conditions.append(DefaultApplicationModel.status == params.status.value)

        count_stmt = (
            select(func.count(DefaultApplicationModel.id))
            .join(DefaultApplicationModel.customer)
            .where(*conditions)
        )
        total = (await self._session.execute(count_stmt)).scalar_one()

        stmt = (
            select(DefaultApplicationModel)
            .join(DefaultApplicationModel.customer)
            .options(
                selectinload(DefaultApplicationModel.customer),
                selectinload(DefaultApplicationModel.applicant),
                selectinload(DefaultApplicationModel.approver),
            )
            .where(*conditions)
            .order_by(DefaultApplicationModel.application_time.desc())
            .limit(params.page_size)
            .offset(params.offset)
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._to_entity(model) for model in models], total

    def _to_entity(self, model: DefaultApplicationModel) -> DefaultApplication:
        """Convert database model to domain entity, with any loaded relations."""
        unloaded = inspect(model).unloaded

        customer = model.customer if "customer" not in unloaded else None
        applicant = model.applicant if "applicant" not in unloaded else None
        approver = model.approver if "approver" not in unloaded else None

        return DefaultApplication(
            id=UUID(model.id),
            customer_id=UUID(model.customer_id),
            status=ApplicationStatus(model.status),
            severity=Severity(model.severity),
            default_reason=model.default_reason,
            remarks=model.remarks,
            applicant_id=UUID(model.applicant_id),
            application_time=model.application_time,
            approver_id=_to_uuid(model.approver_id),
            approval_time=model.approval_time,
            rejection_reason=model.rejection_reason,
            rebirth_reason=model.rebirth_reason,
            rebirth_applicant_id=_to_uuid(model.rebirth_applicant_id),
            rebirth_approver_id=_to_uuid(model.rebirth_approver_id),
            rebirth_approval_time=model.rebirth_approval_time,
            customer=to_customer_entity(customer) if customer is not None else None,
            applicant=to_user_entity(applicant) if applicant is not None else None,
            approver=to_user_entity(approver) if approver is not None else None,
        )


def _to_uuid(value: Optional[str]) -> Optional[UUID]:
    return UUID(value) if value else None
