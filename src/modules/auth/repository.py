"""User repository for database operations."""

import sqlite3
from datetime import date, datetime, timezone

import structlog

from src.infrastructure.database import Database
from src.modules.auth.exceptions import ConflictError, FieldError, ValidationError
from src.modules.auth.models import User
from src.modules.auth.validation import validate_user_fields

logger = structlog.get_logger()

# Columns a caller may change after creation
UPDATABLE_COLUMNS = frozenset(
    {"first_name", "last_name", "phone", "date_of_birth", "password_hash"}
)


class UserRepository:
    """Repository for User CRUD operations.

    Handles all database interactions for the User model. Field shapes are
    re-checked here and email uniqueness is backed by the table's UNIQUE
    constraint, so callers that skip the service layer still cannot store
    invalid rows.
    """

    def __init__(self, database: Database) -> None:
        """Initialize the repository.

        Args:
            database: Database connection.
        """
        self._db = database

    async def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        *,
        phone: str | None = None,
        date_of_birth: date | None = None,
    ) -> User:
        """Create a new user.

        Args:
            first_name: User's first name.
            last_name: User's last name.
            email: User's email address.
            password_hash: Bcrypt-hashed password.
            phone: Optional phone number.
            date_of_birth: Optional birth date.

        Returns:
            The created User.

        Raises:
            ValidationError: If a field is malformed.
            ConflictError: If email already exists.
        """
        email = email.strip().lower()
        validate_user_fields(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            date_of_birth=date_of_birth,
        )
        if not password_hash:
            raise ValidationError([FieldError("password", "Password is required")])

        now = datetime.now(timezone.utc).isoformat()

        try:
            cursor = await self._db.execute(
                """
                INSERT INTO users (first_name, last_name, email, password_hash,
                                   phone, date_of_birth, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    first_name.strip(),
                    last_name.strip(),
                    email,
                    password_hash,
                    phone,
                    date_of_birth.isoformat() if date_of_birth else None,
                    now,
                    now,
                ),
            )
        except sqlite3.IntegrityError as e:
            if "UNIQUE constraint failed" in str(e):
                raise ConflictError(email) from e
            raise

        user_id = cursor.lastrowid
        if user_id is None:
            raise RuntimeError("Insert did not return a row id")

        logger.info("user_created", user_id=user_id, email=email)

        return User(
            id=user_id,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email,
            password_hash=password_hash,
            phone=phone,
            date_of_birth=date_of_birth,
            created_at=datetime.fromisoformat(now),
            updated_at=datetime.fromisoformat(now),
        )

    async def get_by_id(self, user_id: int) -> User | None:
        """Get a user by ID.

        Args:
            user_id: The user's integer ID.

        Returns:
            User if found, None otherwise.
        """
        row = await self._db.fetch_one(
            "SELECT * FROM users WHERE id = ?",
            (user_id,),
        )

        if row is None:
            return None

        return User.from_row(dict(row))

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email.

        Args:
            email: The user's email address.

        Returns:
            User if found, None otherwise.
        """
        row = await self._db.fetch_one(
            "SELECT * FROM users WHERE email = ?",
            (email.strip().lower(),),
        )

        if row is None:
            return None

        return User.from_row(dict(row))

    async def update(self, user_id: int, **fields: object) -> User | None:
        """Update selected columns of a user.

        Only profile columns and ``password_hash`` may be changed; email
        and timestamps are never written through this path.

        Args:
            user_id: The user's integer ID.
            **fields: Column names mapped to their new values.

        Returns:
            The updated User, or None if no such user exists.

        Raises:
            ValueError: If an unknown or immutable column is given.
            ValidationError: If a new value is malformed.
        """
        unknown = set(fields) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")

        validate_user_fields(
            first_name=fields.get("first_name"),  # type: ignore[arg-type]
            last_name=fields.get("last_name"),  # type: ignore[arg-type]
            phone=fields.get("phone"),  # type: ignore[arg-type]
            date_of_birth=fields.get("date_of_birth"),  # type: ignore[arg-type]
        )
        if "password_hash" in fields and not fields["password_hash"]:
            raise ValidationError([FieldError("password", "Password is required")])

        values: dict[str, object] = {}
        for column, value in fields.items():
            if isinstance(value, date):
                value = value.isoformat()
            elif isinstance(value, str) and column in ("first_name", "last_name"):
                value = value.strip()
            values[column] = value
        values["updated_at"] = datetime.now(timezone.utc).isoformat()

        assignments = ", ".join(f"{column} = ?" for column in values)
        cursor = await self._db.execute(
            f"UPDATE users SET {assignments} WHERE id = ?",  # nosec B608 - columns are whitelisted
            (*values.values(), user_id),
        )

        if cursor.rowcount == 0:
            return None

        logger.info("user_updated", user_id=user_id, fields=sorted(fields))

        return await self.get_by_id(user_id)

    async def delete(self, user_id: int) -> bool:
        """Delete a user.

        Args:
            user_id: The user's integer ID.

        Returns:
            True if deleted, False if not found.
        """
        cursor = await self._db.execute(
            "DELETE FROM users WHERE id = ?",
            (user_id,),
        )

        deleted = cursor.rowcount > 0

        if deleted:
            logger.info("user_deleted", user_id=user_id)

        return deleted

    async def count(self) -> int:
        """Count total users.

        Returns:
            Number of users.
        """
        row = await self._db.fetch_one("SELECT COUNT(*) as count FROM users")
        return int(row["count"]) if row else 0
