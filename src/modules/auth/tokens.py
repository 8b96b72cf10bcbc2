"""JWT bearer token issuing and verification."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
import structlog

from src.config import Settings
from src.modules.auth.exceptions import (
    ConfigurationError,
    InvalidTokenError,
    TokenExpiredError,
)

logger = structlog.get_logger()

_REQUIRED_CLAIMS = ["userId", "email", "exp", "iat"]


@dataclass(frozen=True)
class TokenConfig:
    """Signing configuration, fixed for the lifetime of the process.

    Attributes:
        secret: Secret key for HMAC signing.
        algorithm: JWT signing algorithm.
        expires_in: Lifetime of an issued token.
    """

    secret: str
    algorithm: str = "HS256"
    expires_in: timedelta = timedelta(hours=24)

    def __post_init__(self) -> None:
        if not self.secret:
            raise ConfigurationError("JWT secret is not configured")

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenConfig":
        """Build the token configuration from application settings.

        Raises:
            ConfigurationError: If JWT_SECRET_KEY is not set.
        """
        if settings.jwt_secret_key is None:
            raise ConfigurationError(
                "JWT_SECRET_KEY is not configured. "
                "Generate one with: openssl rand -hex 32"
            )
        return cls(
            secret=settings.jwt_secret_key.get_secret_value(),
            algorithm=settings.jwt_algorithm,
            expires_in=timedelta(hours=settings.jwt_expire_hours),
        )


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed token and its expiry."""

    token: str
    expires_at: datetime

    @property
    def expires_in(self) -> int:
        """Seconds from now until expiry."""
        return max(0, int((self.expires_at - datetime.now(UTC)).total_seconds()))


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a bearer token."""

    user_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Signs and verifies stateless bearer tokens.

    There is no revocation store: a token is valid for as long as its
    signature checks out and its expiry has not passed.
    """

    def __init__(self, config: TokenConfig) -> None:
        self._config = config

    def issue(
        self, user_id: int, email: str, *, now: datetime | None = None
    ) -> IssuedToken:
        """Create a signed token for a user.

        Args:
            user_id: The user's ID.
            email: The user's email.
            now: Issue time; defaults to the current time.

        Returns:
            The encoded token with its expiry time.
        """
        issued_at = now or datetime.now(UTC)
        expires_at = issued_at + self._config.expires_in

        # JWT requires integer timestamps for exp and iat
        payload = {
            "userId": user_id,
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }

        token = jwt.encode(
            payload,
            self._config.secret,
            algorithm=self._config.algorithm,
        )
        return IssuedToken(token=token, expires_at=expires_at)

    def verify(self, token: str) -> TokenClaims:
        """Verify signature and expiry and return the token's claims.

        Args:
            token: Encoded JWT.

        Returns:
            Decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is malformed, badly signed or
                missing claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            logger.warning("token_expired")
            raise TokenExpiredError() from e
        except jwt.InvalidTokenError as e:
            logger.warning("token_invalid", error=str(e))
            raise InvalidTokenError() from e

        user_id = payload["userId"]
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            logger.warning("token_invalid", error="userId claim is not an integer")
            raise InvalidTokenError()

        return TokenClaims(
            user_id=user_id,
            email=str(payload["email"]),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        )
