"""SQLite database schema for the panel store.

Tables:
- settings: panel settings as key/value strings (missing key = default)
- users: panel login users; the lowest id is the administrative user
- inbounds: proxy inbound definitions, filled by the panel or by migration
"""

import sqlite3
from pathlib import Path

SCHEMA_VERSION = 1

DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "admin"


def init_database(db_path: Path) -> None:
    """Create the store file and schema if they don't exist yet.

    Idempotent: existing tables and users are left untouched. A default
    admin user is inserted only when the users table is empty.

    Args:
        db_path: Path to the SQLite database file (typically /etc/x-ui/x-ui.db)

    Raises:
        OSError: If the parent directory cannot be created
        sqlite3.Error: If database creation fails
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    try:
        _create_tables(conn)
        _insert_default_user(conn)
        conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
        conn.commit()
    finally:
        conn.close()


def _create_tables(conn: sqlite3.Connection) -> None:
    """Create all database tables.

    Args:
        conn: Open SQLite connection
    """
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS settings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            key TEXT NOT NULL UNIQUE,
            value TEXT NOT NULL
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL,
            password TEXT NOT NULL
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS inbounds (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            up INTEGER NOT NULL DEFAULT 0,
            down INTEGER NOT NULL DEFAULT 0,
            total INTEGER NOT NULL DEFAULT 0,
            remark TEXT NOT NULL DEFAULT '',
            enable INTEGER NOT NULL DEFAULT 1,
            expiry_time INTEGER NOT NULL DEFAULT 0,
            listen TEXT NOT NULL DEFAULT '',
            port INTEGER NOT NULL UNIQUE,
            protocol TEXT NOT NULL,
            settings TEXT NOT NULL DEFAULT '',
            stream_settings TEXT NOT NULL DEFAULT '',
            tag TEXT NOT NULL DEFAULT '',
            sniffing TEXT NOT NULL DEFAULT '',
            FOREIGN KEY (user_id) REFERENCES users(id)
        )
    """)


def _insert_default_user(conn: sqlite3.Connection) -> None:
    """Insert the default admin user when no user exists.

    Args:
        conn: Open SQLite connection
    """
    (count,) = conn.execute("SELECT COUNT(*) FROM users").fetchone()
    if count == 0:
        conn.execute(
            "INSERT INTO users (username, password) VALUES (?, ?)",
            (DEFAULT_USERNAME, DEFAULT_PASSWORD),
        )
