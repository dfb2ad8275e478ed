"""Port interfaces for the configuration store.

The store is opened once per process invocation by a StoreInitializer and
shared by whichever single component the operating mode activates.
"""

from pathlib import Path
from typing import Protocol

from xpanel.domain.entities import Inbound, User


class SettingRepository(Protocol):
    """Key/value panel settings."""

    def get_all(self) -> dict[str, str]:
        """Return every stored setting (defaults not included)."""
        ...

    def get(self, key: str) -> str | None:
        """Return a stored setting, or None if unset."""
        ...

    def set(self, key: str, value: str) -> None:
        """Insert or update a setting."""
        ...

    def reset_all(self) -> None:
        """Remove every stored setting so that defaults apply."""
        ...

    def set_port(self, port: int) -> None:
        """Set the listening port.

        Raises:
            SettingValidationError: If port is outside 1..65535.
        """
        ...


class UserRepository(Protocol):
    """Panel login users."""

    def get_first(self) -> User | None:
        """Return the administrative (lowest id) user, if any."""
        ...

    def update_first_user(self, username: str, password: str) -> None:
        """Update the administrative user's credentials.

        Empty arguments keep the stored value.

        Raises:
            LookupError: If no user exists.
        """
        ...


class InboundRepository(Protocol):
    """Proxy inbound definitions."""

    def add_many(self, inbounds: list[Inbound]) -> int:
        """Insert inbounds in one transaction and return how many were added."""
        ...

    def count(self) -> int:
        """Return the number of stored inbounds."""
        ...


class PanelStore(Protocol):
    """Handle returned by a successful store initialization."""

    @property
    def db_path(self) -> Path: ...

    @property
    def settings(self) -> SettingRepository: ...

    @property
    def users(self) -> UserRepository: ...

    @property
    def inbounds(self) -> InboundRepository: ...

    def close(self) -> None: ...


class StoreInitializer(Protocol):
    """Opens and prepares the store at a filesystem path."""

    def init_store(self, db_path: Path) -> PanelStore:
        """Create the schema if needed and return an open store.

        Raises:
            StoreInitError: If the store cannot be opened or prepared.
        """
        ...
