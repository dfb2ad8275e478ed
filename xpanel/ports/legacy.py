"""Port interface for reading data from a previous panel installation."""

from pathlib import Path
from typing import Protocol

from xpanel.domain.entities import Inbound


class LegacyInboundSource(Protocol):
    """Reads inbounds out of a legacy store."""

    def read_inbounds(self, db_path: Path) -> list[Inbound]:
        """Return the legacy inbounds; user_id is left at 0 for the caller to set.

        Raises:
            MigrationError: If the legacy store is missing or unreadable.
        """
        ...
