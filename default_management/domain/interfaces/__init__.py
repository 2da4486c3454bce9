"""
Domain Interfaces (Ports)
"""

from .repositories import (
    ApplicationFilter,
    ApplicationRepository,
    CustomerRepository,
    StatisticsRepository,
    UserRepository,
)
from .unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "ApplicationFilter",
    "ApplicationRepository",
    "CustomerRepository",
    "StatisticsRepository",
    "UserRepository",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
