"""Database connection management.

Minimal database class providing connection and transaction management only.
No business logic - models handle their own persistence.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

# Store reference to real sqlite3.Error for exception handling
# This ensures we can catch sqlite3.Error even when sqlite3 module is mocked in tests
SQLiteError = sqlite3.Error
SQLiteIntegrityError = sqlite3.IntegrityError

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Base exception for database errors."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when database connection fails."""

    pass


class Database:
    """Database connection manager.

    Provides connection management only - no business logic.
    Models use this connection for their own persistence operations.
    """

    def __init__(self, db_path: str):
        """Initialize database connection.

        Args:
            db_path: Path to database file

        Raises:
            DatabaseConnectionError: If directory creation fails
        """
        self.db_path = db_path

        # Ensure data directory exists
        try:
            if db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(
                f"Failed to create database directory for {db_path}: {e}",
                exc_info=True,
            )
            raise DatabaseConnectionError(
                f"Cannot create database directory: {e}"
            ) from e

    @contextmanager
    def connection(self):
        """Context manager for database connections.

        Usage:
            with db.connection() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT * FROM funds")

        Raises:
            DatabaseConnectionError: If connection fails
        """
        try:
            conn = self._connect()
        except SQLiteError as e:
            logger.error(f"Failed to connect to database: {e}", exc_info=True)
            raise DatabaseConnectionError(f"Database connection failed: {e}") from e
        except Exception as e:
            # Catch all other exceptions (including mocked sqlite3.Error in tests)
            logger.error(
                f"Unexpected error during database connection: {e}", exc_info=True
            )
            raise DatabaseConnectionError(f"Unexpected database error: {e}") from e

        try:
            yield conn
            # With isolation_level=None (autocommit), commit() only matters
            # when a caller left an explicit transaction open
            conn.commit()
        except SQLiteError as e:
            conn.rollback()
            logger.error(
                f"Database transaction rolled back due to SQLite error: {e}",
                exc_info=True,
            )
            raise
        except Exception as e:
            # Model-level errors (validation, integrity) are expected outcomes
            conn.rollback()
            logger.debug(f"Database transaction rolled back: {e}")
            raise
        finally:
            try:
                conn.close()
            except Exception as e:
                logger.warning(f"Error closing database connection: {e}", exc_info=True)

    @contextmanager
    def transaction(self):
        """Context manager for a single write transaction.

        Opens a connection and takes the write lock up front with
        BEGIN IMMEDIATE, so reads made inside the block cannot be
        invalidated by a concurrent writer before COMMIT.

        Usage:
            with db.transaction() as conn:
                conn.execute("SELECT COUNT(*) FROM portfolios WHERE fund_id = ?", (1,))
                conn.execute("DELETE FROM funds WHERE id = ?", (1,))
        """
        with self.connection() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                # SQLite may already have rolled back (SQLITE_FULL, BUSY)
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")

    def _connect(self):
        """Create and configure database connection.

        Returns:
            sqlite3.Connection with WAL mode and foreign keys enabled

        Raises:
            sqlite3.Error: If connection or PRAGMA commands fail
        """
        try:
            conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                isolation_level=None,  # Autocommit; multi-step writes use transaction()
            )
        except SQLiteError as e:
            logger.error(
                f"sqlite3.connect failed for {self.db_path}: {e}", exc_info=True
            )
            raise

        try:
            # Enable WAL mode for better concurrency
            conn.execute("PRAGMA journal_mode=WAL")

            # Enable foreign keys
            conn.execute("PRAGMA foreign_keys=ON")
        except SQLiteError as e:
            conn.close()
            logger.error(f"Failed to configure database PRAGMAs: {e}", exc_info=True)
            raise

        return conn
