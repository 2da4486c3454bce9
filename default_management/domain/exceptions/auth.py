"""Identity and authorization domain exceptions."""

from .base import ConflictException, DomainException, ErrorKind, NotFoundException


class UsernameTakenException(ConflictException):
    """Raised when registering a username that already exists."""

    def __init__(self, username: str):
        super().__init__(
            message=f"Username already exists: {username}",
            code="USERNAME_TAKEN",
        )
        self.username = username


class AuthenticationException(DomainException):
    """Raised when the caller cannot be authenticated."""

    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str, code: str = "INVALID_TOKEN"):
        super().__init__(message=message, code=code)


class InvalidCredentialsException(AuthenticationException):
    """Raised when a login uses an unknown username or a wrong password."""

    def __init__(self):
        super().__init__(
            message="Invalid username or password",
            code="INVALID_CREDENTIALS",
        )


class PermissionDeniedException(DomainException):
    """Raised when the caller's role does not grant access."""

    kind = ErrorKind.FORBIDDEN

    def __init__(self, required_role: str):
        super().__init__(
            message=f"Permission denied: requires role {required_role}",
            code="PERMISSION_DENIED",
        )
        self.required_role = required_role


class UserNotFoundException(NotFoundException):
    """Raised when the user behind a valid token no longer exists."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User not found: {user_id}",
            code="USER_NOT_FOUND",
        )
        self.user_id = user_id
