"""Pydantic schemas for API request/response validation."""

from .application import (
    ApplicationDetailResponseSchema,
    ApplicationResponseSchema,
    ApproveRequestSchema,
    CreateApplicationRequestSchema,
    MessageResponseSchema,
    PaginatedApplicationsResponseSchema,
    RebirthRequestSchema,
    RejectRequestSchema,
)
from .auth import (
    LoginRequestSchema,
    LoginResponseSchema,
    RegisterRequestSchema,
    UserResponseSchema,
)
from .error import ErrorResponseSchema
from .statistics import StatisticResponseSchema

__all__ = [
    "ApplicationDetailResponseSchema",
    "ApplicationResponseSchema",
    "ApproveRequestSchema",
    "CreateApplicationRequestSchema",
    "MessageResponseSchema",
    "PaginatedApplicationsResponseSchema",
    "RebirthRequestSchema",
    "RejectRequestSchema",
    "LoginRequestSchema",
    "LoginResponseSchema",
    "RegisterRequestSchema",
    "UserResponseSchema",
    "ErrorResponseSchema",
    "StatisticResponseSchema",
]
