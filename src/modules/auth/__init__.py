"""Authentication module: registration, login, tokens and profiles."""

from src.modules.auth.exceptions import (
    AuthenticationError,
    AuthError,
    BadRequestError,
    ConfigurationError,
    ConflictError,
    FieldError,
    InvalidTokenError,
    TokenExpiredError,
    ValidationError,
)
from src.modules.auth.models import User
from src.modules.auth.password import PasswordHasher, hash_password, verify_password
from src.modules.auth.repository import UserRepository
from src.modules.auth.schemas import (
    LoginRequest,
    ProfileUpdate,
    UserCreate,
    UserResponse,
)
from src.modules.auth.service import AuthResult, AuthService
from src.modules.auth.tokens import TokenClaims, TokenConfig, TokenService

__all__ = [
    "AuthError",
    "AuthResult",
    "AuthService",
    "AuthenticationError",
    "BadRequestError",
    "ConfigurationError",
    "ConflictError",
    "FieldError",
    "InvalidTokenError",
    "LoginRequest",
    "PasswordHasher",
    "ProfileUpdate",
    "TokenClaims",
    "TokenConfig",
    "TokenExpiredError",
    "TokenService",
    "User",
    "UserCreate",
    "UserRepository",
    "UserResponse",
    "ValidationError",
    "hash_password",
    "verify_password",
]
