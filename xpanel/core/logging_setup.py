"""Process logging configuration.

Logging is configured once, when the process enters service mode. One-shot
commands report through click output instead.
"""

import logging
from pathlib import Path

from xpanel.domain.exceptions import UnknownLogLevelError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_log_level(name: str) -> int:
    """Map a configured level name to a logging level.

    Raises:
        UnknownLogLevelError: If the name is not one of LOG_LEVELS.
    """
    try:
        return LOG_LEVELS[name.strip().lower()]
    except KeyError:
        raise UnknownLogLevelError(
            f"unknown log level: {name}",
            hint=f"Use one of: {', '.join(sorted(LOG_LEVELS))}",
        ) from None


def configure_logging(level_name: str, log_file: str = "") -> int:
    """Configure root logging for service mode.

    Args:
        level_name: Configured level name.
        log_file: Optional file to log to in addition to stderr.

    Returns:
        The numeric level applied.

    Raises:
        UnknownLogLevelError: If level_name is not recognized.
        OSError: If the log file or its directory cannot be opened.
    """
    level = parse_log_level(level_name)

    # Root handlers already installed (e.g. by an embedding application) win
    if not logging.getLogger().handlers:
        handlers: list[logging.Handler] = [logging.StreamHandler()]
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file))
        logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)

    logging.getLogger("xpanel").setLevel(level)
    return level
