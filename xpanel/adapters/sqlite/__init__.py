"""SQLite adapters for the panel store."""

from .base_repository import SQLiteBaseRepository
from .inbound_repository import SQLiteInboundRepository
from .initializer import SqlitePanelStore, SqliteStoreInitializer
from .schema import init_database
from .setting_repository import SQLiteSettingRepository
from .user_repository import SQLiteUserRepository

__all__ = [
    "SQLiteBaseRepository",
    "SQLiteInboundRepository",
    "SQLiteSettingRepository",
    "SQLiteUserRepository",
    "SqlitePanelStore",
    "SqliteStoreInitializer",
    "init_database",
]
