"""Password hashing and access token handling."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from passlib.context import CryptContext

from default_management.core.config import Settings, settings
from default_management.domain.entities import UserRole
from default_management.domain.exceptions import AuthenticationException


class PasswordHasher:
    """bcrypt password hashing."""

    def __init__(self, rounds: int | None = None):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds or settings.bcrypt_rounds,
        )

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        try:
            return self._context.verify(plaintext, hashed)
        except ValueError:
            # Unrecognized or corrupt stored hash
            return False


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a validated access token."""

    user_id: UUID
    role: UserRole


class TokenService:
    """
    Issues and validates signed access tokens.

    Tokens are HS256 JWTs carrying ``user_id`` and ``role`` and expire
    ``token_ttl_hours`` after issuance.
    """

    def __init__(self, config: Settings | None = None):
        config = config or settings
        self._secret = config.jwt_secret
        self._algorithm = config.jwt_algorithm
        self._issuer = config.jwt_issuer
        self._ttl = timedelta(hours=config.token_ttl_hours)

    def generate_token(self, user_id: UUID, role: UserRole) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "user_id": str(user_id),
            "role": role.value,
            "iss": self._issuer,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def validate_token(self, token: str) -> TokenClaims:
        """
        Verify a token's signature, issuer and expiry.

        Raises:
            AuthenticationException: If the token is not acceptable
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": ["exp", "iss", "user_id", "role"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationException("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthenticationException("Invalid token") from exc

        try:
            return TokenClaims(
                user_id=UUID(payload["user_id"]),
                role=UserRole(payload["role"]),
            )
        except (TypeError, ValueError) as exc:
            raise AuthenticationException("Invalid token claims") from exc
