#!/usr/bin/env python3
"""CLI script to create users directly in the database.

Usage:
    uv run python scripts/create_user.py Ann Lee ann@example.com Abcdef1
    uv run python scripts/create_user.py Ann Lee ann@example.com Abcdef1 --phone +15551234
"""

import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path

# Add project root to path so we can import src
sys.path.insert(0, str(Path(__file__).parent.parent))

import pydantic

from src.config import Settings
from src.infrastructure.database import init_database
from src.modules.auth.exceptions import AuthError, ConfigurationError
from src.modules.auth.password import PasswordHasher
from src.modules.auth.repository import UserRepository
from src.modules.auth.schemas import UserCreate
from src.modules.auth.service import AuthService
from src.modules.auth.tokens import TokenConfig, TokenService


async def create_user(
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    *,
    phone: str | None = None,
    date_of_birth: date | None = None,
) -> int:
    """Create a user in the database.

    Returns:
        Process exit code.
    """
    settings = Settings()

    try:
        token_config = TokenConfig.from_settings(settings)
    except ConfigurationError as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        print("  Please add JWT_SECRET_KEY to your .env file", file=sys.stderr)
        return 1

    try:
        user_data = UserCreate(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password,
            phone=phone,
            date_of_birth=date_of_birth,
        )
    except pydantic.ValidationError as e:
        for error in e.errors():
            field = ".".join(str(p) for p in error["loc"])
            print(f"✗ {field}: {error['msg']}", file=sys.stderr)
        return 1

    db = await init_database(settings.database_path)

    try:
        auth_service = AuthService(
            UserRepository(db),
            TokenService(token_config),
            PasswordHasher(rounds=settings.bcrypt_rounds),
        )
        result = await auth_service.register(user_data)
    except AuthError as e:
        print(f"✗ Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        await db.disconnect()

    user = result.user
    print(f"✓ Created user: {user.first_name} {user.last_name} <{user.email}>")
    print(f"  User ID: {user.id}")
    print(f"  Created at: {user.created_at}")
    return 0


def main() -> None:
    """Parse arguments and create user."""
    parser = argparse.ArgumentParser(
        description="Create a user account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  uv run python scripts/create_user.py Ann Lee ann@example.com Abcdef1
  uv run python scripts/create_user.py Bob Ray bob@example.com Secret9 --dob 1990-05-01
        """,
    )

    parser.add_argument("first_name", help="First name (2-50 characters)")
    parser.add_argument("last_name", help="Last name (2-50 characters)")
    parser.add_argument("email", help="User's email address")
    parser.add_argument(
        "password",
        help="Password (6+ characters with lowercase, uppercase and a digit)",
    )
    parser.add_argument("--phone", help="Optional phone number, e.g. +15551234")
    parser.add_argument(
        "--dob",
        type=date.fromisoformat,
        help="Optional date of birth (YYYY-MM-DD)",
    )

    args = parser.parse_args()

    sys.exit(
        asyncio.run(
            create_user(
                args.first_name,
                args.last_name,
                args.email,
                args.password,
                phone=args.phone,
                date_of_birth=args.dob,
            )
        )
    )


if __name__ == "__main__":
    main()
