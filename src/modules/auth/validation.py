"""Field rules shared by the API schemas and the user repository."""

import re
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from email_validator import EmailNotValidError, validate_email

from src.modules.auth.exceptions import FieldError, ValidationError

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = 72  # bcrypt ignores or rejects anything longer

PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")
_PASSWORD_CLASSES = (
    (re.compile(r"[a-z]"), "lowercase letter"),
    (re.compile(r"[A-Z]"), "uppercase letter"),
    (re.compile(r"\d"), "number"),
)
_LOCATION_PREFIXES = frozenset({"body", "query", "path", "header", "cookie"})


def check_name(value: str, label: str) -> str | None:
    """Return an error message for an invalid name, or None."""
    stripped = value.strip()
    if not stripped:
        return f"{label} is required"
    if not NAME_MIN_LENGTH <= len(stripped) <= NAME_MAX_LENGTH:
        return (
            f"{label} must be between {NAME_MIN_LENGTH} "
            f"and {NAME_MAX_LENGTH} characters"
        )
    return None


def check_email(value: str) -> str | None:
    """Return an error message for a syntactically invalid email, or None."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return "Please provide a valid email"
    return None


def check_password(value: str) -> str | None:
    """Return an error message for a password that is too weak, or None.

    Passwords need at least one lowercase letter, one uppercase letter and
    one digit.
    """
    if len(value) < PASSWORD_MIN_LENGTH:
        return f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return f"Password must be at most {PASSWORD_MAX_BYTES} bytes"
    missing = [
        name for pattern, name in _PASSWORD_CLASSES if not pattern.search(value)
    ]
    if missing:
        return "Password must contain at least one " + ", one ".join(missing)
    return None


def check_phone(value: str) -> str | None:
    """Return an error message for a malformed phone number, or None."""
    if not PHONE_PATTERN.match(value):
        return "Please provide a valid phone number"
    return None


def check_date_of_birth(value: date) -> str | None:
    """Return an error message for a birth date in the future, or None."""
    if value > date.today():
        return "Date of birth cannot be in the future"
    return None


def validate_user_fields(
    *,
    first_name: str | None = None,
    last_name: str | None = None,
    email: str | None = None,
    phone: str | None = None,
    date_of_birth: date | None = None,
) -> None:
    """Validate every supplied field and raise once with all failures.

    Fields passed as None are skipped.

    Raises:
        ValidationError: If one or more fields are invalid.
    """
    errors: list[FieldError] = []

    if first_name is not None and (msg := check_name(first_name, "First name")):
        errors.append(FieldError("firstName", msg))
    if last_name is not None and (msg := check_name(last_name, "Last name")):
        errors.append(FieldError("lastName", msg))
    if email is not None and (msg := check_email(email)):
        errors.append(FieldError("email", msg))
    if phone is not None and (msg := check_phone(phone)):
        errors.append(FieldError("phone", msg))
    if date_of_birth is not None and (msg := check_date_of_birth(date_of_birth)):
        errors.append(FieldError("dateOfBirth", msg))

    if errors:
        raise ValidationError(errors)


def field_errors(errors: Sequence[Mapping[str, Any]]) -> list[FieldError]:
    """Convert pydantic error dictionaries into field errors.

    The request-part prefix (``body``, ``query``...) is dropped from each
    location, so ``("body", "firstName")`` becomes ``firstName``.
    """
    result = []
    for error in errors:
        loc = error.get("loc", ())
        parts = [str(p) for p in loc if p not in _LOCATION_PREFIXES]
        message = str(error.get("msg", ""))
        result.append(FieldError(".".join(parts) or "body", message))
    return result
