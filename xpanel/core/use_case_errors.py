"""Use case error handling utilities.

Use cases catch exceptions internally and return responses carrying
success/error fields, so the CLI reports every failure without having to
know which exception types each collaborator raises.

    try:
        ...
    except (KeyboardInterrupt, SystemExit):
        raise
    except Exception as e:
        log_use_case_error(e, "set port")
        return failure(format_error_message(e, "set port"))
"""

import logging
import sqlite3

from xpanel.domain.exceptions import XPanelDomainError

logger = logging.getLogger(__name__)


def format_error_message(exception: Exception, operation_name: str) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exception: The exception that was caught.
        operation_name: Name of the operation, e.g. "reset setting".

    Returns:
        User-friendly error message string.
    """
    if isinstance(exception, XPanelDomainError):
        return exception.message
    elif isinstance(exception, sqlite3.Error):
        return f"database error: {exception}"
    elif isinstance(exception, OSError):
        return f"I/O error: {exception}. Check file permissions and disk space."
    elif isinstance(exception, (ValueError, LookupError, RuntimeError)):
        return str(exception)
    else:
        return f"internal error during {operation_name}, check logs for details"


def log_use_case_error(exception: Exception, operation_name: str) -> None:
    """Log an exception from a use case with appropriate severity.

    Expected failures are logged without a traceback; anything else gets one.
    """
    if isinstance(
        exception,
        (XPanelDomainError, sqlite3.Error, OSError, ValueError, LookupError, RuntimeError),
    ):
        logger.error("%s failed: %s", operation_name, exception)
    else:
        logger.exception("Unexpected error during %s", operation_name)
