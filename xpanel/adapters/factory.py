"""Factory for adapter instantiation.

Keeps the CLI free from direct adapter imports. Adapters are imported
lazily so that e.g. `xpanel -v` loads nothing it doesn't need.
"""

from __future__ import annotations

import queue
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from xpanel.adapters.os_signals import SignalEventAdapter
    from xpanel.core.migration import MigrateUseCase
    from xpanel.core.settings import SettingsUseCase
    from xpanel.core.supervisor import SupervisorControl
    from xpanel.domain.config import PanelConfig
    from xpanel.domain.entities import SignalEvent
    from xpanel.ports.service import ServiceFactory
    from xpanel.ports.store import PanelStore, StoreInitializer


class PanelFactory:
    """Creates the collaborators each operating mode needs."""

    def create_config(self) -> PanelConfig:
        from xpanel.adapters.config.toml_config_provider import TomlConfigProvider

        return TomlConfigProvider().load()

    def create_store_initializer(self) -> StoreInitializer:
        from xpanel.adapters.sqlite import SqliteStoreInitializer

        return SqliteStoreInitializer()

    def create_service_factory(self, store: PanelStore) -> ServiceFactory:
        """Build a factory producing a fresh panel server per call.

        Settings are re-read from the store on every call, so a reload picks
        up changes made by `xpanel setting` while the panel was running.
        """
        from xpanel.adapters.web import PanelWebServer
        from xpanel.domain.exceptions import ServiceStartError
        from xpanel.domain.settings import PanelSettings
        from xpanel.version import __version__

        def build() -> PanelWebServer:
            try:
                settings = PanelSettings.from_mapping(store.settings.get_all())
            except ValueError as e:
                raise ServiceStartError(
                    f"invalid panel settings: {e}",
                    hint="Run 'xpanel setting -reset' to restore defaults",
                ) from e
            return PanelWebServer(settings, version=__version__)

        return build

    def create_event_queue(self) -> queue.SimpleQueue[SignalEvent]:
        return queue.SimpleQueue()

    def create_signal_adapter(self, control: SupervisorControl) -> SignalEventAdapter:
        from xpanel.adapters.os_signals import SignalEventAdapter

        return SignalEventAdapter(control)

    def create_settings_usecase(self) -> SettingsUseCase:
        from xpanel.core.settings import SettingsUseCase

        return SettingsUseCase(self.create_store_initializer())

    def create_migrate_usecase(self) -> MigrateUseCase:
        from xpanel.adapters.legacy.v2ui import V2UiInboundSource
        from xpanel.core.migration import MigrateUseCase

        return MigrateUseCase(self.create_store_initializer(), V2UiInboundSource())
