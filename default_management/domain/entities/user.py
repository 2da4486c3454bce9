"""User entity and roles."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4


class UserRole(str, Enum):
    """Role carried in the access token and checked per endpoint."""

    APPLICANT = "Applicant"
    APPROVER = "Approver"


@dataclass
class User:
    """A system user. Username and role never change after registration."""

    username: str
    password_hash: str
    role: UserRole
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
