"""Domain exceptions for xpanel.

These exceptions represent failures of the collaborators the process
supervises or administers. They are caught at the application boundary
(CLI, supervisor) and turned into user-facing messages.
"""


class XPanelDomainError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class StoreInitError(XPanelDomainError):
    """Raised when the configuration store cannot be opened or prepared."""

    pass


class ServiceStartError(XPanelDomainError):
    """Raised when a managed service instance fails to start."""

    pass


class ServiceStopError(XPanelDomainError):
    """Raised when a managed service instance fails to stop cleanly."""

    pass


class UnknownLogLevelError(XPanelDomainError):
    """Raised when the configured log level is not recognized."""

    pass


class SettingValidationError(XPanelDomainError):
    """Raised when a persisted setting is given an invalid value."""

    pass


class MigrationError(XPanelDomainError):
    """Raised when legacy data cannot be read or imported."""

    pass
