"""Settings use case: one-shot edits of the persisted panel settings.

Runs outside of the panel service. The store is initialized first; if that
fails nothing else is attempted. Otherwise either every setting is reset,
or the port and the administrative credentials are updated, each as an
independent operation whose failure does not stop the other.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from xpanel.core.use_case_errors import format_error_message, log_use_case_error
from xpanel.domain.exceptions import StoreInitError
from xpanel.ports.store import PanelStore, StoreInitializer

logger = logging.getLogger(__name__)


@dataclass
class SettingsRequest:
    """Request to change persisted settings.

    Attributes:
        db_path: Store file to operate on.
        reset: Reset every setting to its default; other fields are ignored.
        port: New panel port; 0 leaves it unchanged.
        username: New admin username; "" leaves it unchanged.
        password: New admin password; "" leaves it unchanged.
    """

    db_path: Path
    reset: bool = False
    port: int = 0
    username: str = ""
    password: str = ""


@dataclass
class OperationResult:
    """Outcome of one settings operation, with the message to show."""

    name: str
    success: bool
    message: str


@dataclass
class SettingsResponse:
    """Response from a settings run.

    Attributes:
        results: One entry per attempted operation, in order.
        init_error: Set when the store could not be initialized; results is
            then empty.
        init_hint: Optional hint accompanying init_error.
    """

    results: list[OperationResult] = field(default_factory=list)
    init_error: str | None = None
    init_hint: str | None = None

    @property
    def success(self) -> bool:
        return self.init_error is None and all(r.success for r in self.results)


class SettingsUseCase:
    """Use case behind the `setting` command."""

    def __init__(self, store_initializer: StoreInitializer) -> None:
        self._store_initializer = store_initializer

    def execute(self, request: SettingsRequest) -> SettingsResponse:
        """Apply the requested settings changes.

        Zero port and empty credentials are treated as "leave unchanged", so a
        request with nothing to do succeeds with no results.

        Args:
            request: What to change.

        Returns:
            SettingsResponse with per-operation results or the init error.
        """
        try:
            store = self._store_initializer.init_store(request.db_path)
        except StoreInitError as e:
            logger.error("%s", e.message)
            return SettingsResponse(init_error=e.message, init_hint=e.hint)

        try:
            if request.reset:
                return SettingsResponse(results=[self._reset(store)])

            results: list[OperationResult] = []
            if request.port > 0:
                results.append(self._set_port(store, request.port))
            if request.username or request.password:
                results.append(
                    self._update_credentials(store, request.username, request.password)
                )
            return SettingsResponse(results=results)
        finally:
            store.close()

    def _reset(self, store: PanelStore) -> OperationResult:
        try:
            store.settings.reset_all()
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            log_use_case_error(e, "reset setting")
            return OperationResult(
                "reset",
                False,
                f"reset setting failed: {format_error_message(e, 'reset setting')}",
            )
        return OperationResult("reset", True, "reset setting success")

    def _set_port(self, store: PanelStore, port: int) -> OperationResult:
        try:
            store.settings.set_port(port)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            log_use_case_error(e, "set port")
            return OperationResult(
                "port", False, f"set port failed: {format_error_message(e, 'set port')}"
            )
        return OperationResult("port", True, f"set port {port} success")

    def _update_credentials(
        self, store: PanelStore, username: str, password: str
    ) -> OperationResult:
        operation = "set username and password"
        try:
            store.users.update_first_user(username, password)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            log_use_case_error(e, operation)
            return OperationResult(
                "credentials",
                False,
                f"{operation} failed: {format_error_message(e, operation)}",
            )
        return OperationResult("credentials", True, f"{operation} success")
