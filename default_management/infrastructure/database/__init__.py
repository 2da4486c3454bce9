"""Database infrastructure."""

from .connection import get_session_factory, DatabaseSessionManager, db_manager
from .models import Base, UserModel, CustomerModel, DefaultApplicationModel

__all__ = [
    "get_session_factory",
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "UserModel",
    "CustomerModel",
    "DefaultApplicationModel",
]
