"""SQLite adapter implementing SettingRepository."""

from pathlib import Path

from xpanel.adapters.sqlite.base_repository import SQLiteBaseRepository
from xpanel.domain.exceptions import SettingValidationError
from xpanel.domain.settings import DEFAULT_SETTINGS, MAX_PORT, MIN_PORT, WEB_PORT


class SQLiteSettingRepository(SQLiteBaseRepository):
    """SQLite implementation of SettingRepository."""

    def __init__(self, db_path: Path) -> None:
        super().__init__(db_path)

    def get_all(self) -> dict[str, str]:
        """Return every stored setting.

        Returns:
            Mapping of key to value. Keys that were never set (or were reset)
            are absent; callers apply DEFAULT_SETTINGS.
        """
        conn = self._get_connection()
        cursor = conn.execute("SELECT key, value FROM settings")
        return {key: value for key, value in cursor.fetchall()}

    def get(self, key: str) -> str | None:
        conn = self._get_connection()
        row = conn.execute(
            "SELECT value FROM settings WHERE key = ?",
            (key,),
        ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        """Insert or update a setting (UPSERT).

        Args:
            key: Setting key, one of DEFAULT_SETTINGS.
            value: New value.

        Raises:
            SettingValidationError: If key is not a known setting.
        """
        if key not in DEFAULT_SETTINGS:
            raise SettingValidationError(f"unknown setting: {key}")

        conn = self._get_connection()
        conn.execute(
            """
            INSERT INTO settings (key, value)
            VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value
            """,
            (key, value),
        )
        conn.commit()

    def reset_all(self) -> None:
        """Delete every stored setting so that all reads return defaults."""
        conn = self._get_connection()
        conn.execute("DELETE FROM settings")
        conn.commit()

    def set_port(self, port: int) -> None:
        """Set the panel listening port.

        Args:
            port: TCP port in 1..65535.

        Raises:
            SettingValidationError: If port is out of range.
        """
        if not MIN_PORT <= port <= MAX_PORT:
            raise SettingValidationError(
                f"port must be between {MIN_PORT} and {MAX_PORT}, got {port}"
            )
        self.set(WEB_PORT, str(port))

    def get_port(self) -> int:
        """Return the configured port, or the default if unset."""
        return int(self.get(WEB_PORT) or DEFAULT_SETTINGS[WEB_PORT])
