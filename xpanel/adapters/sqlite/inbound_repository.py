"""SQLite adapter implementing InboundRepository."""

from pathlib import Path

from xpanel.adapters.sqlite.base_repository import SQLiteBaseRepository
from xpanel.domain.entities import Inbound


class SQLiteInboundRepository(SQLiteBaseRepository):
    """SQLite implementation of InboundRepository."""

    def __init__(self, db_path: Path) -> None:
        super().__init__(db_path)

    def add_many(self, inbounds: list[Inbound]) -> int:
        """Insert inbounds atomically.

        Either every inbound is stored or none is (e.g. on a port clash).

        Args:
            inbounds: Inbounds to insert.

        Returns:
            Number of inserted rows.

        Raises:
            sqlite3.IntegrityError: If a port is already taken.
        """
        conn = self._get_connection()
        with conn:
            conn.executemany(
                """
                INSERT INTO inbounds (
                    user_id, up, down, total, remark, enable, expiry_time,
                    listen, port, protocol, settings, stream_settings, tag, sniffing
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        ib.user_id,
                        ib.up,
                        ib.down,
                        ib.total,
                        ib.remark,
                        int(ib.enable),
                        ib.expiry_time,
                        ib.listen,
                        ib.port,
                        ib.protocol,
                        ib.settings,
                        ib.stream_settings,
                        ib.tag,
                        ib.sniffing,
                    )
                    for ib in inbounds
                ],
            )
        return len(inbounds)

    def count(self) -> int:
        conn = self._get_connection()
        (count,) = conn.execute("SELECT COUNT(*) FROM inbounds").fetchone()
        return count
