"""Reader for v2-ui databases.

v2-ui keeps its inbounds in an `inbound` table of a SQLite file. The file
is opened read-only so a failed migration can never damage it.
"""

import logging
import sqlite3
from pathlib import Path

from xpanel.domain.entities import Inbound
from xpanel.domain.exceptions import MigrationError

logger = logging.getLogger(__name__)

DEFAULT_V2UI_DB_PATH = Path("/etc/v2-ui/v2-ui.db")

_INBOUND_COLUMNS = (
    "port",
    "listen",
    "protocol",
    "settings",
    "stream_settings",
    "sniffing",
    "remark",
    "up",
    "down",
    "enable",
)


class V2UiInboundSource:
    """LegacyInboundSource implementation for v2-ui."""

    def read_inbounds(self, db_path: Path) -> list[Inbound]:
        """Read every inbound from a v2-ui database.

        Args:
            db_path: v2-ui database file.

        Returns:
            Inbounds with user_id 0 and tag "inbound-<port>".

        Raises:
            MigrationError: If the file is missing or has no readable inbound table.
        """
        if not db_path.is_file():
            raise MigrationError(
                f"v2-ui database not found: {db_path}",
                hint="Pass the v2-ui database location with -db",
            )

        try:
            conn = sqlite3.connect(f"{db_path.resolve().as_uri()}?mode=ro", uri=True)
        except sqlite3.Error as e:
            raise MigrationError(f"init v2-ui database failed: {e}") from e

        try:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(
                f"SELECT {', '.join(_INBOUND_COLUMNS)} FROM inbound ORDER BY id"
            ).fetchall()
        except sqlite3.Error as e:
            raise MigrationError(f"get v2-ui inbounds failed: {e}") from e
        finally:
            conn.close()

        logger.debug("Read %d inbounds from %s", len(rows), db_path)
        return [_row_to_inbound(row) for row in rows]


def _row_to_inbound(row: sqlite3.Row) -> Inbound:
    port = int(row["port"])
    return Inbound(
        user_id=0,
        port=port,
        protocol=row["protocol"],
        listen=row["listen"] or "",
        settings=row["settings"] or "",
        stream_settings=row["stream_settings"] or "",
        tag=f"inbound-{port}",
        sniffing=row["sniffing"] or "",
        remark=row["remark"] or "",
        enable=bool(row["enable"]),
        up=int(row["up"] or 0),
        down=int(row["down"] or 0),
    )
