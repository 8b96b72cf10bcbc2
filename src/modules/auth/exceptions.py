"""Authentication exceptions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A validation failure attached to a single input field."""

    field: str
    message: str


class AuthError(Exception):
    """Base exception for authentication operations."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AuthError):
    """Raised when user fields fail validation."""

    def __init__(
        self, errors: list[FieldError], message: str = "Validation failed"
    ) -> None:
        self.errors = errors
        super().__init__(message)


class ConflictError(AuthError):
    """Raised when a user with the same email already exists."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("User with this email already exists")


class AuthenticationError(AuthError):
    """Raised when credentials or a bearer token are not accepted."""

    pass


class InvalidTokenError(AuthenticationError):
    """Raised for a malformed token or one with a bad signature."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    """Raised when a token's expiry time has passed."""

    def __init__(self) -> None:
        super().__init__("Token expired")


class BadRequestError(AuthError):
    """Raised when a request carries nothing usable."""

    pass


class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing."""

    pass
