"""Application lifecycle domain exceptions."""

from enum import Enum

from .base import ConflictException, NotFoundException


class ConflictReason(str, Enum):
    """Why a lifecycle request conflicts with the current state."""

    ALREADY_DEFAULT = "ALREADY_DEFAULT"
    DUPLICATE_PENDING = "DUPLICATE_PENDING"
    NOT_PENDING = "NOT_PENDING"
    NOT_APPROVED = "NOT_APPROVED"
    NOT_REBIRTH_PENDING = "NOT_REBIRTH_PENDING"


class CustomerNotFoundException(NotFoundException):
    """Raised when a customer cannot be found."""

    def __init__(self, customer_ref: str):
        super().__init__(
            message=f"Customer not found: {customer_ref}",
            code="CUSTOMER_NOT_FOUND",
        )
        self.customer_ref = customer_ref


class ApplicationNotFoundException(NotFoundException):
    """Raised when a default application cannot be found."""

    def __init__(self, application_id: str):
        super().__init__(
            message=f"Application not found: {application_id}",
            code="APPLICATION_NOT_FOUND",
        )
        self.application_id = application_id


class ApplicationConflictException(ConflictException):
    """Raised when a lifecycle precondition is violated."""

    _MESSAGES = {
        ConflictReason.ALREADY_DEFAULT: "Customer is already in default status",
        ConflictReason.DUPLICATE_PENDING: "There is already a pending application for this customer",
        ConflictReason.NOT_PENDING: "Application is not in pending state",
        ConflictReason.NOT_APPROVED: "Only approved applications can apply for rebirth",
        ConflictReason.NOT_REBIRTH_PENDING: "Application is not pending for rebirth approval",
    }

    def __init__(self, reason: ConflictReason):
        super().__init__(
            message=self._MESSAGES[reason],
            code=reason.value,
        )
        self.reason = reason
