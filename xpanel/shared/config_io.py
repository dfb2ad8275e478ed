"""Configuration I/O utilities for the process config file."""

import os
import platform
import tomllib
from pathlib import Path
from typing import Any


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/xpanel/config.toml or ~/.config/xpanel/config.toml
    - Windows: %APPDATA%/xpanel/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "xpanel" / "config.toml"
        return Path.home() / ".config" / "xpanel" / "config.toml"
    else:
        xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
        if xdg_config:
            return Path(xdg_config) / "xpanel" / "config.toml"
        return Path.home() / ".config" / "xpanel" / "config.toml"


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to config.toml file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def parse_bool(value: str) -> bool:
    """Parse an environment-style boolean ("true", "1", "yes", "on")."""
    return value.strip().lower() in {"1", "true", "yes", "on"}
