"""Application services (use cases)."""

from .application_service import ApplicationService
from .query_service import QueryService
from .statistics_service import StatisticsService
from .user_service import UserService

__all__ = [
    "ApplicationService",
    "QueryService",
    "StatisticsService",
    "UserService",
]
