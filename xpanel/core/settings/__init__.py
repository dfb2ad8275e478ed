"""Settings administration use case."""

from xpanel.core.settings.settings_usecase import (
    OperationResult,
    SettingsRequest,
    SettingsResponse,
    SettingsUseCase,
)

__all__ = ["OperationResult", "SettingsRequest", "SettingsResponse", "SettingsUseCase"]
