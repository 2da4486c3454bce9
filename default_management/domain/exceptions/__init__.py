"""Domain Exceptions - Business rule violations and domain errors."""

from .base import (
    ConflictException,
    DomainException,
    DuplicateRecordError,
    ErrorKind,
    NotFoundException,
    RecordNotFoundError,
    RepositoryError,
    ValidationException,
)
from .application import (
    ApplicationConflictException,
    ApplicationNotFoundException,
    ConflictReason,
    CustomerNotFoundException,
)
from .auth import (
    AuthenticationException,
    InvalidCredentialsException,
    PermissionDeniedException,
    UserNotFoundException,
    UsernameTakenException,
)

__all__ = [
    "ErrorKind",
    "DomainException",
    "NotFoundException",
    "ConflictException",
    "ValidationException",
    "RepositoryError",
    "RecordNotFoundError",
    "DuplicateRecordError",
    "ConflictReason",
    "CustomerNotFoundException",
    "ApplicationNotFoundException",
    "ApplicationConflictException",
    "UsernameTakenException",
    "AuthenticationException",
    "InvalidCredentialsException",
    "PermissionDeniedException",
    "UserNotFoundException",
]
