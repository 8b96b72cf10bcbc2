"""Pydantic schemas for authentication API.

Field names are snake_case in Python and camelCase on the wire.
"""

from collections.abc import Callable
from datetime import date, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from src.modules.auth.validation import (
    check_date_of_birth,
    check_name,
    check_password,
    check_phone,
)

DataT = TypeVar("DataT")


def _apply(check: Callable[..., str | None], value: Any, *args: Any) -> Any:
    """Run a field rule and turn its message into a pydantic error."""
    message = check(value, *args)
    if message:
        raise PydanticCustomError("invalid_field", message)
    return value


class CamelModel(BaseModel):
    """Base model that accepts and emits camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProfileFields(CamelModel):
    """Optional contact fields shared by registration and profile updates."""

    phone: str | None = None
    date_of_birth: date | None = None

    @field_validator("phone", "date_of_birth", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, value: str | None) -> str | None:
        return value if value is None else _apply(check_phone, value)

    @field_validator("date_of_birth")
    @classmethod
    def not_in_future(cls, value: date | None) -> date | None:
        return value if value is None else _apply(check_date_of_birth, value)


class UserCreate(ProfileFields):
    """Schema for registering a new user."""

    first_name: str
    last_name: str
    email: EmailStr
    password: str

    @field_validator("first_name")
    @classmethod
    def valid_first_name(cls, value: str) -> str:
        return _apply(check_name, value, "First name").strip()

    @field_validator("last_name")
    @classmethod
    def valid_last_name(cls, value: str) -> str:
        return _apply(check_name, value, "Last name").strip()

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return _apply(check_password, value)


class ProfileUpdate(ProfileFields):
    """Schema for a partial profile update.

    Unknown keys, including ``email`` and ``password``, are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    first_name: str | None = None
    last_name: str | None = None

    @field_validator("first_name")
    @classmethod
    def valid_first_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _apply(check_name, value, "First name").strip()

    @field_validator("last_name")
    @classmethod
    def valid_last_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _apply(check_name, value, "Last name").strip()


class LoginRequest(CamelModel):
    """Schema for login request."""

    email: EmailStr
    password: str


class UserResponse(CamelModel):
    """Schema for user response (excludes the password hash)."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    date_of_birth: date | None = None
    created_at: datetime
    updated_at: datetime


class UserData(CamelModel):
    """Payload carrying a single user."""

    user: UserResponse


class AuthData(CamelModel):
    """Payload returned by register and login."""

    user: UserResponse
    token: str
    expires_in: int  # Seconds until expiration


class ApiResponse(CamelModel, Generic[DataT]):
    """Envelope for every successful response."""

    success: bool = True
    message: str
    data: DataT | None = None


class FieldErrorResponse(CamelModel):
    """A single field-level validation failure."""

    field: str
    message: str


class ErrorResponse(CamelModel):
    """Envelope for every failed response."""

    success: bool = False
    message: str
    errors: list[FieldErrorResponse] | None = None
