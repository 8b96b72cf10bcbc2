"""Password hashing with bcrypt."""

import bcrypt

DEFAULT_ROUNDS = 12


class PasswordHasher:
    """Salted, adaptive one-way hashing for user passwords.

    Each call to ``hash`` draws a fresh salt, so hashing the same password
    twice yields two different strings that both verify.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        """Initialize the hasher.

        Args:
            rounds: Bcrypt cost factor (log2 of the iteration count).
        """
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        """The configured cost factor."""
        return self._rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Args:
            password: Plaintext password.

        Returns:
            Bcrypt hash with the salt and cost embedded.
        """
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        """Check a plaintext password against a stored hash.

        Args:
            password: Plaintext password to check.
            hashed: Previously stored bcrypt hash.

        Returns:
            True if the password matches, False otherwise (including when the
            stored hash is malformed).
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False


def hash_password(password: str) -> str:
    """Hash a password with the default cost factor."""
    return PasswordHasher().hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    return PasswordHasher().verify(password, hashed)
