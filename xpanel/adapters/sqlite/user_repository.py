"""SQLite adapter implementing UserRepository."""

from pathlib import Path

from xpanel.adapters.sqlite.base_repository import SQLiteBaseRepository
from xpanel.domain.entities import User


class SQLiteUserRepository(SQLiteBaseRepository):
    """SQLite implementation of UserRepository."""

    def __init__(self, db_path: Path) -> None:
        super().__init__(db_path)

    def get_first(self) -> User | None:
        """Return the administrative user (lowest id), or None."""
        conn = self._get_connection()
        row = conn.execute(
            "SELECT id, username, password FROM users ORDER BY id LIMIT 1"
        ).fetchone()
        if row is None:
            return None
        return User(id=row[0], username=row[1], password=row[2])

    def update_first_user(self, username: str, password: str) -> None:
        """Update the administrative user's credentials.

        Args:
            username: New username, or "" to keep the current one.
            password: New password, or "" to keep the current one.

        Raises:
            LookupError: If the store holds no user.
        """
        user = self.get_first()
        if user is None:
            raise LookupError("no user found in the store")

        conn = self._get_connection()
        conn.execute(
            "UPDATE users SET username = ?, password = ? WHERE id = ?",
            (username or user.username, password or user.password, user.id),
        )
        conn.commit()
