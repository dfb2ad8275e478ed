"""Base class for SQLite repository adapters.

Provides lazy connection management, thread safety and the context manager
protocol for every repository backed by the panel store.
"""

import sqlite3
import threading
from pathlib import Path
from typing import Self

# Seconds to wait on a locked database before failing; the running panel and
# a one-shot `setting` command may touch the same file.
BUSY_TIMEOUT = 5.0


class SQLiteBaseRepository:
    """Base class providing SQLite connection management.

    Thread Safety:
        The connection is created lazily with double-checked locking so two
        threads cannot each open their own. It is opened with
        check_same_thread=False because the panel's HTTP worker threads and
        the supervising thread may share a repository.

    Example:
        class MyRepository(SQLiteBaseRepository):
            def count(self) -> int:
                conn = self._get_connection()
                return conn.execute("SELECT COUNT(*) FROM my_table").fetchone()[0]
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the repository.

        Args:
            db_path: Path to SQLite database file.
        """
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._conn_lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection, creating one if needed.

        Returns:
            SQLite connection object.
        """
        if self._conn is None:
            with self._conn_lock:
                if self._conn is None:
                    self._conn = sqlite3.connect(
                        self.db_path, timeout=BUSY_TIMEOUT, check_same_thread=False
                    )
        return self._conn

    def close(self) -> None:
        """Close the database connection if open.

        Safe to call multiple times.
        """
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> Self:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> bool:
        """Exit context manager, closing the database connection."""
        self.close()
        return False
