"""CLI error handling with actionable hints."""

import click


class XPanelCliError(click.ClickException):
    """CLI error with an optional hint for the user.

    Example:
        raise XPanelCliError(
            "init database /etc/x-ui/x-ui.db failed: permission denied",
            hint="Run as root or set XPANEL_DB_FOLDER",
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present."""
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg
