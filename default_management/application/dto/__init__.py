"""Data Transfer Objects for application layer."""

from .application import ApplicationDetail, ApplicationSummary, PaginatedApplications

__all__ = [
    "ApplicationDetail",
    "ApplicationSummary",
    "PaginatedApplications",
]
