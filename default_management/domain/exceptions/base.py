"""Base domain and repository exceptions."""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a domain error, mapped to a transport status at the boundary."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Domain exceptions represent business rule violations or
    domain-specific error conditions. Callers inspect ``kind`` and
    ``code`` rather than the message.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictException(DomainException):
    """Raised when a request conflicts with the current state."""

    kind = ErrorKind.CONFLICT


class ValidationException(DomainException):
    """Raised when input is well-formed but not acceptable."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, code=code)


class RepositoryError(Exception):
    """Base class for storage-level errors raised by repositories."""


class RecordNotFoundError(RepositoryError):
    """Raised by a repository lookup that matched no row."""

    def __init__(self, entity: str, key: object):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class DuplicateRecordError(RepositoryError):
    """Raised when a write violates a uniqueness constraint."""

    def __init__(self, entity: str, detail: str = ""):
        self.entity = entity
        self.detail = detail
        super().__init__(f"Duplicate {entity}: {detail}" if detail else f"Duplicate {entity}")
