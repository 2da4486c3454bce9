"""Default application entity and its lifecycle state machine."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from default_management.domain.exceptions import (
    ApplicationConflictException,
    ConflictReason,
)

from .customer import Customer
from .user import User


class ApplicationStatus(str, Enum):
    """Lifecycle state of a default application."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    REBIRTH_PENDING = "RebirthPending"
    REBORN = "Reborn"

    @property
    def is_terminal(self) -> bool:
        return self in (ApplicationStatus.REJECTED, ApplicationStatus.REBORN)


class Severity(str, Enum):
    """Severity of a default determination."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass
class DefaultApplication:
    """
    A request to record a customer as being in default.

    Transitions:
        Pending -> Approved | Rejected
        Approved -> RebirthPending -> Reborn

    Each transition method checks the source state before touching any
    field, so a refused transition leaves the entity unchanged.
    """

    customer_id: UUID
    severity: Severity
    default_reason: str
    applicant_id: UUID
    remarks: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.PENDING
    id: UUID = field(default_factory=uuid4)
    application_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    approver_id: Optional[UUID] = None
    approval_time: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    rebirth_reason: Optional[str] = None
    rebirth_applicant_id: Optional[UUID] = None
    rebirth_approver_id: Optional[UUID] = None
    rebirth_approval_time: Optional[datetime] = None

    # Resolved relations for display, not persisted through this entity
    customer: Optional[Customer] = None
    applicant: Optional[User] = None
    approver: Optional[User] = None

    def _require(self, expected: ApplicationStatus, reason: ConflictReason) -> None:
        if self.status != expected:
            raise ApplicationConflictException(reason)

    def approve(self, approver_id: UUID, at: datetime) -> list[str]:
        """
        Move Pending -> Approved.

        Returns:
            Names of the fields that changed
        """
        self._require(ApplicationStatus.PENDING, ConflictReason.NOT_PENDING)
        self.status = ApplicationStatus.APPROVED
        self.approver_id = approver_id
        self.approval_time = at
        return ["status", "approver_id", "approval_time"]

    def reject(self, approver_id: UUID, reason: str, at: datetime) -> list[str]:
        """Move Pending -> Rejected, recording the rejection reason."""
        self._require(ApplicationStatus.PENDING, ConflictReason.NOT_PENDING)
        self.status = ApplicationStatus.REJECTED
        self.approver_id = approver_id
        self.approval_time = at
        self.rejection_reason = reason
        return ["status", "approver_id", "approval_time", "rejection_reason"]

    def apply_for_rebirth(self, applicant_id: UUID, reason: str) -> list[str]:
        """Move Approved -> RebirthPending."""
        self._require(ApplicationStatus.APPROVED, ConflictReason.NOT_APPROVED)
        self.status = ApplicationStatus.REBIRTH_PENDING
        self.rebirth_reason = reason
        self.rebirth_applicant_id = applicant_id
        return ["status", "rebirth_reason", "rebirth_applicant_id"]

    def approve_rebirth(self, approver_id: UUID, at: datetime) -> list[str]:
        """Move RebirthPending -> Reborn."""
        self._require(ApplicationStatus.REBIRTH_PENDING, ConflictReason.NOT_REBIRTH_PENDING)
        self.status = ApplicationStatus.REBORN
        self.rebirth_approver_id = approver_id
        self.rebirth_approval_time = at
        return ["status", "rebirth_approver_id", "rebirth_approval_time"]

