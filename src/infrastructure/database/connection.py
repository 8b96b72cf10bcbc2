"""SQLite database connection management."""

import sqlite3
from pathlib import Path

import aiosqlite
import structlog

logger = structlog.get_logger()

_CREATE_TABLES = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    email TEXT UNIQUE NOT NULL,
    password_hash TEXT NOT NULL,
    phone TEXT,
    date_of_birth TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_users_email ON users(email);
"""


class Database:
    """Async SQLite database wrapper.

    Provides connection management and query execution for SQLite.
    Uses aiosqlite for async operations.
    """

    def __init__(self, db_path: str | Path) -> None:
        """Initialize the database.

        Args:
            db_path: Path to the SQLite database file, or ":memory:".
        """
        self._db_path = db_path if db_path == ":memory:" else Path(db_path)
        self._connection: aiosqlite.Connection | None = None

    @property
    def is_connected(self) -> bool:
        """Whether a connection is currently open."""
        return self._connection is not None

    async def connect(self) -> None:
        """Connect to the database and create tables if needed."""
        if isinstance(self._db_path, Path):
            self._db_path.parent.mkdir(parents=True, exist_ok=True)

        self._connection = await aiosqlite.connect(self._db_path)
        self._connection.row_factory = aiosqlite.Row

        await self._connection.execute("PRAGMA foreign_keys = ON")

        await self._connection.executescript(_CREATE_TABLES)
        await self._connection.commit()

        logger.info("database_connected", path=str(self._db_path))

    async def disconnect(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
            logger.info("database_disconnected", path=str(self._db_path))

    async def execute(
        self,
        sql: str,
        parameters: tuple[object, ...] | dict[str, object] | None = None,
    ) -> aiosqlite.Cursor:
        """Execute a SQL statement and commit.

        Args:
            sql: SQL statement to execute.
            parameters: Optional parameters for the statement.

        Returns:
            Cursor with execution results.

        Raises:
            RuntimeError: If database is not connected.
            sqlite3.IntegrityError: If a constraint is violated.
        """
        if not self._connection:
            raise RuntimeError("Database not connected")

        try:
            if parameters:
                cursor = await self._connection.execute(sql, parameters)
            else:
                cursor = await self._connection.execute(sql)
        except sqlite3.Error:
            await self._connection.rollback()
            raise

        await self._connection.commit()
        return cursor

    async def fetch_one(
        self,
        sql: str,
        parameters: tuple[object, ...] | dict[str, object] | None = None,
    ) -> sqlite3.Row | None:
        """Fetch a single row.

        Args:
            sql: SQL query to execute.
            parameters: Optional parameters for the query.

        Returns:
            The first row or None.
        """
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()


async def init_database(db_path: str | Path) -> Database:
    """Create and connect a database.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        Connected database instance.
    """
    database = Database(db_path)
    await database.connect()
    return database
