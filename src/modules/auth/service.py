"""Authentication service for user management."""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass

import pydantic
import structlog

from src.infrastructure.observability import traced
from src.modules.auth.exceptions import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    ValidationError,
)
from src.modules.auth.models import User
from src.modules.auth.password import PasswordHasher
from src.modules.auth.repository import UserRepository
from src.modules.auth.schemas import ProfileUpdate, UserCreate
from src.modules.auth.tokens import IssuedToken, TokenService
from src.modules.auth.validation import field_errors

logger = structlog.get_logger()

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class AuthResult:
    """A user together with a freshly issued token."""

    user: User
    token: IssuedToken


class AuthService:
    """Service for authentication operations.

    Handles registration, login, bearer-token resolution and profile
    updates. Passwords are hashed here, before anything reaches the
    repository.
    """

    def __init__(
        self,
        repository: UserRepository,
        tokens: TokenService,
        hasher: PasswordHasher | None = None,
    ) -> None:
        """Initialize the auth service.

        Args:
            repository: User repository for database operations.
            tokens: Token issuer/verifier.
            hasher: Password hasher; defaults to bcrypt with 12 rounds.
        """
        self._repo = repository
        self._tokens = tokens
        self._hasher = hasher or PasswordHasher()

    async def _hash(self, password: str) -> str:
        # bcrypt is CPU-bound; keep it off the event loop
        return await asyncio.to_thread(self._hasher.hash, password)

    async def _verify(self, password: str, hashed: str) -> bool:
        return await asyncio.to_thread(self._hasher.verify, password, hashed)

    @traced("auth.register")
    async def register(self, data: UserCreate) -> AuthResult:
        """Register a new user and issue a token.

        Args:
            data: Validated registration data.

        Returns:
            The created user and a token for it.

        Raises:
            ConflictError: If email already exists.
            ValidationError: If the store rejects a field.
        """
        email = data.email.lower()

        if await self._repo.get_by_email(email) is not None:
            logger.warning("register_failed_email_taken", email=email)
            raise ConflictError(email)

        user = await self._repo.create(
            first_name=data.first_name,
            last_name=data.last_name,
            email=email,
            password_hash=await self._hash(data.password),
            phone=data.phone,
            date_of_birth=data.date_of_birth,
        )

        logger.info("user_registered", user_id=user.id, email=user.email)
        return AuthResult(user=user, token=self._tokens.issue(user.id, user.email))

    @traced("auth.authenticate")
    async def authenticate(self, email: str, password: str) -> User:
        """Check an email/password pair.

        Unknown email and wrong password fail with the same message.

        Raises:
            AuthenticationError: If authentication fails.
        """
        user = await self._repo.get_by_email(email)

        if user is None:
            logger.warning("auth_failed_user_not_found", email=email)
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not await self._verify(password, user.password_hash):
            logger.warning("auth_failed_invalid_password", email=email)
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("user_authenticated", user_id=user.id, email=user.email)
        return user

    async def login(self, email: str, password: str) -> AuthResult:
        """Authenticate user and issue a token.

        Raises:
            AuthenticationError: If authentication fails.
        """
        user = await self.authenticate(email, password)
        return AuthResult(user=user, token=self._tokens.issue(user.id, user.email))

    @traced("auth.resolve_token")
    async def resolve_token(self, token: str) -> User:
        """Verify a bearer token and load the user it names.

        Raises:
            InvalidTokenError: If the token is malformed or badly signed.
            TokenExpiredError: If the token has expired.
            AuthenticationError: If the user no longer exists.
        """
        claims = self._tokens.verify(token)
        user = await self._repo.get_by_id(claims.user_id)

        if user is None:
            logger.warning("token_user_not_found", user_id=claims.user_id)
            raise AuthenticationError("Invalid token - user not found")

        return user

    @traced("auth.update_profile")
    async def update_profile(
        self, user: User, fields: ProfileUpdate | Mapping[str, object]
    ) -> User:
        """Apply a partial profile update.

        Only first name, last name, phone and date of birth can change.
        Anything else, email and password included, is dropped, as are
        null values.

        Args:
            user: The authenticated user.
            fields: Validated update or raw camelCase/snake_case mapping.

        Returns:
            The updated user.

        Raises:
            BadRequestError: If nothing is left to update.
            ValidationError: If a supplied field is invalid.
            AuthenticationError: If the user was deleted meanwhile.
        """
        if not isinstance(fields, ProfileUpdate):
            try:
                fields = ProfileUpdate.model_validate(fields)
            except pydantic.ValidationError as e:
                raise ValidationError(field_errors(e.errors())) from e

        changes = fields.model_dump(exclude_none=True)
        if not changes:
            raise BadRequestError("No valid fields provided for update")

        updated = await self._repo.update(user.id, **changes)
        if updated is None:
            raise AuthenticationError("Invalid token - user not found")

        logger.info("profile_updated", user_id=user.id, fields=sorted(changes))
        return updated

    async def logout(self, user: User) -> None:
        """Log a user out.

        Tokens are stateless, so there is nothing to revoke server-side; the
        client discards its copy and the token stays valid until it expires.
        """
        logger.info("user_logged_out", user_id=user.id)
