"""SQLite store initializer adapter.

Implements the StoreInitializer port: prepares the schema and hands back a
store handle bundling the repositories.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Self

from xpanel.adapters.sqlite.inbound_repository import SQLiteInboundRepository
from xpanel.adapters.sqlite.schema import init_database
from xpanel.adapters.sqlite.setting_repository import SQLiteSettingRepository
from xpanel.adapters.sqlite.user_repository import SQLiteUserRepository
from xpanel.domain.exceptions import StoreInitError

logger = logging.getLogger(__name__)


class SqlitePanelStore:
    """Open panel store: one repository per table over the same file."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._settings = SQLiteSettingRepository(db_path)
        self._users = SQLiteUserRepository(db_path)
        self._inbounds = SQLiteInboundRepository(db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def settings(self) -> SQLiteSettingRepository:
        return self._settings

    @property
    def users(self) -> SQLiteUserRepository:
        return self._users

    @property
    def inbounds(self) -> SQLiteInboundRepository:
        return self._inbounds

    def close(self) -> None:
        """Close every repository connection. Safe to call twice."""
        self._settings.close()
        self._users.close()
        self._inbounds.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> bool:
        self.close()
        return False


class SqliteStoreInitializer:
    """SQLite implementation of the StoreInitializer port."""

    def init_store(self, db_path: Path) -> SqlitePanelStore:
        """Create the schema if needed and open the store.

        Args:
            db_path: Path to the SQLite database file.

        Returns:
            Open SqlitePanelStore.

        Raises:
            StoreInitError: If the directory or database cannot be prepared.
        """
        try:
            init_database(db_path)
        except (OSError, sqlite3.Error) as e:
            raise StoreInitError(
                f"init database {db_path} failed: {e}",
                hint="Check XPANEL_DB_FOLDER and the directory permissions",
            ) from e

        logger.debug("Store ready at %s", db_path)
        return SqlitePanelStore(db_path)
