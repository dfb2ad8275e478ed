"""TOML-based process configuration provider.

Config loading priority (highest to lowest):
1. XPANEL_* environment variables
2. Global: ~/.config/xpanel/config.toml, [panel] table
3. Built-in defaults
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from xpanel.domain.config import PanelConfig
from xpanel.shared.config_io import get_global_config_path, load_config_data, parse_bool

logger = logging.getLogger(__name__)

ENV_LOG_LEVEL = "XPANEL_LOG_LEVEL"
ENV_DB_FOLDER = "XPANEL_DB_FOLDER"
ENV_DEBUG = "XPANEL_DEBUG"
ENV_LOG_FILE = "XPANEL_LOG_FILE"


class TomlConfigProvider:
    """Loads PanelConfig from the global TOML file and the environment.

    A missing file is fine; a malformed one is ignored with a warning.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = config_path
        self._environ = environ

    def load(self) -> PanelConfig:
        config_path = self._config_path or get_global_config_path()
        environ = os.environ if self._environ is None else self._environ

        config = PanelConfig.default()

        if config_path.exists():
            try:
                data = load_config_data(config_path)
                config = PanelConfig.from_partial(config, data.get("panel", {}))
                logger.debug("Loaded config from %s", config_path)
            except (FileNotFoundError, ValueError) as e:
                logger.warning(
                    "Failed to parse config at %s: %s. Using defaults.",
                    config_path,
                    e,
                )

        overrides: dict[str, object] = {}
        if environ.get(ENV_LOG_LEVEL):
            overrides["log_level"] = environ[ENV_LOG_LEVEL]
        if environ.get(ENV_DB_FOLDER):
            overrides["db_folder"] = environ[ENV_DB_FOLDER]
        if environ.get(ENV_LOG_FILE):
            overrides["log_file"] = environ[ENV_LOG_FILE]
        if environ.get(ENV_DEBUG):
            overrides["debug"] = parse_bool(environ[ENV_DEBUG])

        return PanelConfig.from_partial(config, overrides)
