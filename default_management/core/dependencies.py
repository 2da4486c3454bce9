"""Dependency injection for FastAPI."""

from functools import partial
from typing import Annotated, Callable

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from default_management.application.services import (
    ApplicationService,
    QueryService,
    StatisticsService,
    UserService,
)
from default_management.core.security import PasswordHasher, TokenClaims, TokenService
from default_management.domain.entities import UserRole
from default_management.domain.exceptions import (
    AuthenticationException,
    PermissionDeniedException,
)
from default_management.domain.interfaces import UnitOfWorkFactory
from default_management.infrastructure.database import get_session_factory
from default_management.infrastructure.repositories import SqlAlchemyUnitOfWork

logger = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# Unit of work
async def get_unit_of_work_factory(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> UnitOfWorkFactory:
    """Get a factory producing one unit of work per transaction."""
    return partial(SqlAlchemyUnitOfWork, session_factory)


# Auth gate
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


def get_token_service() -> TokenService:
    return TokenService()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> TokenClaims:
    """
    Authenticate the caller from the ``Authorization: Bearer`` header.

    Raises:
        AuthenticationException: If the header is missing or the token is invalid
    """
    if credentials is None:
        raise AuthenticationException("Authorization header is required", code="MISSING_TOKEN")

    claims = token_service.validate_token(credentials.credentials)
    structlog.contextvars.bind_contextvars(user_id=str(claims.user_id))
    return claims


def require_role(role: UserRole) -> Callable:
    """Build a dependency admitting only callers whose token carries ``role``."""

    async def check_role(
        claims: Annotated[TokenClaims, Depends(get_current_user)],
    ) -> TokenClaims:
        if claims.role != role:
            logger.warning(
                "permission_denied",
                required_role=role.value,
                actual_role=claims.role.value,
            )
            raise PermissionDeniedException(role.value)
        return claims

    return check_role


CurrentUser = Annotated[TokenClaims, Depends(get_current_user)]
ApplicantUser = Annotated[TokenClaims, Depends(require_role(UserRole.APPLICANT))]
ApproverUser = Annotated[TokenClaims, Depends(require_role(UserRole.APPROVER))]


# Service dependencies
async def get_application_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_unit_of_work_factory)],
) -> ApplicationService:
    """Get an ApplicationService instance."""
    return ApplicationService(unit_of_work_factory=uow_factory)


async def get_query_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_unit_of_work_factory)],
) -> QueryService:
    """Get a QueryService instance."""
    return QueryService(unit_of_work_factory=uow_factory)


async def get_statistics_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_unit_of_work_factory)],
) -> StatisticsService:
    """Get a StatisticsService instance."""
    return StatisticsService(unit_of_work_factory=uow_factory)


async def get_user_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_unit_of_work_factory)],
    password_hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> UserService:
    """Get a UserService instance with its auth collaborators."""
    return UserService(
        unit_of_work_factory=uow_factory,
        password_hasher=password_hasher,
        token_service=token_service,
    )
