"""User service - registration and login."""

from uuid import UUID

import structlog

from default_management.core.metrics import record_login
from default_management.core.security import PasswordHasher, TokenService
from default_management.domain.entities import User, UserRole
from default_management.domain.exceptions import (
    DuplicateRecordError,
    InvalidCredentialsException,
    RecordNotFoundError,
    UserNotFoundException,
    UsernameTakenException,
)
from default_management.domain.interfaces import UnitOfWorkFactory

logger = structlog.get_logger(__name__)


class UserService:
    """
    Application service for user accounts.
    """

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ):
        self._uow_factory = unit_of_work_factory
        self._hasher = password_hasher
        self._tokens = token_service

    async def register(self, username: str, password: str, role: UserRole) -> User:
        """
        Create a user with a hashed password.

        Raises:
            UsernameTakenException: If the username already exists
        """
        async with self._uow_factory() as uow:
            try:
                await uow.users.get_by_username(username)
            except RecordNotFoundError:
                pass
            else:
                raise UsernameTakenException(username)

            user = User(
                username=username,
                password_hash=self._hasher.hash(password),
                role=role,
            )
            try:
                await uow.users.create(user)
            except DuplicateRecordError as exc:
                raise UsernameTakenException(username) from exc

            await uow.commit()

        logger.info("user_registered", user_id=str(user.id), role=role.value)
        return user

    async def login(self, username: str, password: str) -> str:
        """
        Verify credentials and issue an access token.

        An unknown username and a wrong password fail the same way.

        Raises:
            InvalidCredentialsException: If the credentials do not match
        """
        async with self._uow_factory() as uow:
            try:
                user = await uow.users.get_by_username(username)
            except RecordNotFoundError:
                user = None

        if user is None or not self._hasher.verify(password, user.password_hash):
            record_login(success=False)
            logger.info("login_failed", username=username)
            raise InvalidCredentialsException()

        record_login(success=True)
        logger.info("login_succeeded", user_id=str(user.id))
        return self._tokens.generate_token(user.id, user.role)

    async def get_user(self, user_id: UUID) -> User:
        async with self._uow_factory() as uow:
            try:
                return await uow.users.get_by_id(user_id)
            except RecordNotFoundError as exc:
                raise UserNotFoundException(str(user_id)) from exc
