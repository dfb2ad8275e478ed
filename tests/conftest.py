"""Pytest configuration and shared fixtures."""

import logging
import queue
import shutil
import sqlite3
import subprocess
from collections.abc import Iterable
from pathlib import Path

import pytest
from click.testing import CliRunner

from xpanel.adapters.sqlite import SqlitePanelStore, SqliteStoreInitializer
from xpanel.domain.entities import SignalEvent

ENV_VARS = ("XPANEL_LOG_LEVEL", "XPANEL_DB_FOLDER", "XPANEL_DEBUG", "XPANEL_LOG_FILE")


# ============================================================================
# Isolation
# ============================================================================
# Tests must never read the developer's ~/.config/xpanel/config.toml or
# XPANEL_* variables, and must not leak logging setup into each other.


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch):
    """Point the global config at an empty directory and clear XPANEL_* vars."""
    config_home = tmp_path_factory.mktemp("config_home")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield config_home


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo configure_logging() side effects after each test."""
    root = logging.getLogger()
    panel_logger = logging.getLogger("xpanel")
    root_level = root.level
    panel_level = panel_logger.level
    handlers = list(root.handlers)
    yield
    for handler in list(root.handlers):
        if handler not in handlers and type(handler) in (
            logging.StreamHandler,
            logging.FileHandler,
        ):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(root_level)
    panel_logger.setLevel(panel_level)


# ============================================================================
# Store fixtures
# ============================================================================


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path of a not-yet-created panel store."""
    return tmp_path / "x-ui" / "x-ui.db"


@pytest.fixture
def store(db_path: Path) -> Iterable[SqlitePanelStore]:
    """Initialized SQLite panel store, closed after the test."""
    panel_store = SqliteStoreInitializer().init_store(db_path)
    yield panel_store
    panel_store.close()


def read_settings(db_path: Path) -> dict[str, str]:
    """Read the settings table directly, bypassing the repositories."""
    conn = sqlite3.connect(db_path)
    try:
        return dict(conn.execute("SELECT key, value FROM settings").fetchall())
    finally:
        conn.close()


def read_users(db_path: Path) -> list[tuple[int, str, str]]:
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute(
            "SELECT id, username, password FROM users ORDER BY id"
        ).fetchall()
    finally:
        conn.close()


# ============================================================================
# Legacy v2-ui database
# ============================================================================


def create_v2ui_db(path: Path, rows: list[dict]) -> Path:
    """Create a v2-ui style database with the given inbound rows.

    Each row needs at least port and protocol; other columns get v2-ui's
    defaults.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    try:
        conn.execute("""
            CREATE TABLE inbound (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                port INTEGER NOT NULL UNIQUE,
                listen VARCHAR(50) DEFAULT '0.0.0.0',
                protocol VARCHAR(50) NOT NULL,
                settings TEXT,
                stream_settings TEXT,
                tag VARCHAR(255) DEFAULT '',
                sniffing TEXT,
                remark VARCHAR(255) DEFAULT '',
                up INTEGER DEFAULT 0,
                down INTEGER DEFAULT 0,
                enable BOOLEAN DEFAULT 1
            )
        """)
        for row in rows:
            columns = ", ".join(row)
            placeholders = ", ".join("?" for _ in row)
            conn.execute(
                f"INSERT INTO inbound ({columns}) VALUES ({placeholders})",
                tuple(row.values()),
            )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def v2ui_db(tmp_path: Path) -> Path:
    """v2-ui database holding two inbounds."""
    return create_v2ui_db(
        tmp_path / "v2-ui" / "v2-ui.db",
        [
            {
                "port": 10086,
                "protocol": "vmess",
                "settings": '{"clients": []}',
                "stream_settings": '{"network": "tcp"}',
                "sniffing": '{"enabled": true}',
                "remark": "home",
                "up": 100,
                "down": 200,
            },
            {
                "port": 10087,
                "protocol": "shadowsocks",
                "listen": "127.0.0.1",
                "enable": 0,
            },
        ],
    )


# ============================================================================
# CLI and supervisor helpers
# ============================================================================


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CLI test runner."""
    return CliRunner()


def event_queue(*events: SignalEvent) -> queue.SimpleQueue:
    """SimpleQueue pre-filled with the given events, in order."""
    events_queue: queue.SimpleQueue = queue.SimpleQueue()
    for event in events:
        events_queue.put(event)
    return events_queue


# ============================================================================
# TLS material
# ============================================================================


@pytest.fixture
def tls_pair(tmp_path: Path) -> tuple[Path, Path]:
    """Self-signed certificate and key for localhost, as (cert, key)."""
    if shutil.which("openssl") is None:
        pytest.skip("openssl is required to create a test certificate")

    cert = tmp_path / "tls" / "cert.pem"
    key = tmp_path / "tls" / "key.pem"
    cert.parent.mkdir()
    subprocess.run(
        [
            "openssl",
            "req",
            "-x509",
            "-newkey",
            "rsa:2048",
            "-nodes",
            "-days",
            "1",
            "-subj",
            "/CN=localhost",
            "-keyout",
            str(key),
            "-out",
            str(cert),
        ],
        check=True,
        capture_output=True,
        timeout=30,
    )
    return cert, key
