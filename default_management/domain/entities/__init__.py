"""Domain Entities - Core business objects."""

from .application import ApplicationStatus, DefaultApplication, Severity
from .customer import Customer
from .statistics import DimensionCount, DimensionStatistic, StatisticsDimension
from .user import User, UserRole

__all__ = [
    "ApplicationStatus",
    "DefaultApplication",
    "Severity",
    "Customer",
    "DimensionCount",
    "DimensionStatistic",
    "StatisticsDimension",
    "User",
    "UserRole",
]
