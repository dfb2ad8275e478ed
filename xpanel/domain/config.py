"""Process configuration domain model for xpanel.

Process configuration decides where the store lives and how verbose logging
is. It is read from ~/.config/xpanel/config.toml and XPANEL_* environment
variables. Panel settings such as the listening port are persisted in the
store instead (see xpanel.domain.settings).
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

PANEL_NAME = "x-ui"
DB_FILE_NAME = "x-ui.db"


@dataclass(frozen=True)
class PanelConfig:
    """Complete process configuration.

    Attributes:
        log_level: Log level name (debug, info, warn, error). Validated when
            logging is configured, not here, so that one-shot commands still
            work with a bad value.
        db_folder: Directory holding the store file.
        debug: Debug mode; forces the effective log level to debug.
        log_file: Optional log file path. Empty means console only.
    """

    log_level: str = "info"
    db_folder: str = "/etc/x-ui"
    debug: bool = False
    log_file: str = ""

    @property
    def db_path(self) -> Path:
        """Path of the store file."""
        return Path(self.db_folder) / DB_FILE_NAME

    @property
    def effective_log_level(self) -> str:
        """Log level after applying debug mode."""
        if self.debug:
            return "debug"
        return self.log_level

    @staticmethod
    def default() -> "PanelConfig":
        """Create a config with all default values."""
        return PanelConfig()

    @staticmethod
    def from_partial(base: "PanelConfig", partial: dict[str, Any]) -> "PanelConfig":
        """Return a copy of base with known keys from partial applied.

        Unknown keys are ignored.

        Args:
            base: Config to start from.
            partial: Mapping of field name to value (e.g. a TOML [panel] table).

        Returns:
            New PanelConfig.

        Raises:
            ValueError: If a known key has a value of the wrong type.
        """
        known = {f.name for f in fields(PanelConfig)}
        updates: dict[str, Any] = {}
        for key, value in partial.items():
            if key not in known:
                continue
            expected = bool if key == "debug" else str
            if not isinstance(value, expected):
                raise ValueError(
                    f"{key} must be {expected.__name__}, got {type(value).__name__}"
                )
            updates[key] = value
        return replace(base, **updates)
