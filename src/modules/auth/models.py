"""User domain model."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class User:
    """User domain model.

    Represents a registered account that can log in with email and password.

    Attributes:
        id: Auto-generated integer identifier.
        first_name: Given name (2-50 characters).
        last_name: Family name (2-50 characters).
        email: Login email, unique and immutable after registration.
        password_hash: Bcrypt hash of the current password.
        phone: Optional international phone number.
        date_of_birth: Optional birth date, never in the future.
        created_at: When the user was created.
        updated_at: When the user was last updated.
    """

    id: int
    first_name: str
    last_name: str
    email: str
    password_hash: str
    phone: str | None
    date_of_birth: date | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: dict[str, object]) -> "User":
        """Create a User from a database row.

        Args:
            row: Database row as a dictionary.

        Returns:
            User instance.
        """
        dob = row["date_of_birth"]
        return cls(
            id=int(str(row["id"])),
            first_name=str(row["first_name"]),
            last_name=str(row["last_name"]),
            email=str(row["email"]),
            password_hash=str(row["password_hash"]),
            phone=str(row["phone"]) if row["phone"] else None,
            date_of_birth=date.fromisoformat(str(dob)) if dob else None,
            created_at=datetime.fromisoformat(str(row["created_at"])),
            updated_at=datetime.fromisoformat(str(row["updated_at"])),
        )
