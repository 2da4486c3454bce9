"""Data transfer objects for default application operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from default_management.domain.entities import DefaultApplication


def _username(user) -> Optional[str]:
    return user.username if user is not None else None


@dataclass(frozen=True)
class ApplicationSummary:
    """Brief view of an application for creation and review listings."""

    id: str
    customer_name: str
    status: str
    severity: str
    applicant_name: Optional[str]
    application_time: datetime

    @classmethod
    def from_entity(cls, application: DefaultApplication) -> "ApplicationSummary":
        return cls(
            id=str(application.id),
            customer_name=application.customer.name if application.customer else "",
            status=application.status.value,
            severity=application.severity.value,
            applicant_name=_username(application.applicant),
            application_time=application.application_time,
        )


@dataclass(frozen=True)
class ApplicationDetail:
    """Full view of an application for search results."""

    id: str
    customer_name: str
    latest_ext_grade: Optional[str]
    status: str
    severity: str
    default_reason: str
    remarks: Optional[str]
    applicant_name: Optional[str]
    application_time: datetime
    approver_name: Optional[str]
    approval_time: Optional[datetime]
    rejection_reason: Optional[str]
    rebirth_reason: Optional[str]
    rebirth_approval_time: Optional[datetime]

    @classmethod
    def from_entity(cls, application: DefaultApplication) -> "ApplicationDetail":
        customer = application.customer
        return cls(
            id=str(application.id),
            customer_name=customer.name if customer else "",
            latest_ext_grade=customer.latest_ext_grade if customer else None,
            status=application.status.value,
            severity=application.severity.value,
            default_reason=application.default_reason,
            remarks=application.remarks,
            applicant_name=_username(application.applicant),
            application_time=application.application_time,
            approver_name=_username(application.approver),
            approval_time=application.approval_time,
            rejection_reason=application.rejection_reason,
            rebirth_reason=application.rebirth_reason,
            rebirth_approval_time=application.rebirth_approval_time,
        )


@dataclass(frozen=True)
class PaginatedApplications:
    """One page of search results plus the total match count."""

    total: int
    page: int
    page_size: int
    data: List[ApplicationDetail]

    @classmethod
    def from_entities(
        cls,
        applications: List[DefaultApplication],
        total: int,
        page: int,
        page_size: int,
    ) -> "PaginatedApplications":
        return cls(
            total=total,
            page=page,
            page_size=page_size,
            data=[ApplicationDetail.from_entity(app) for app in applications],
        )
