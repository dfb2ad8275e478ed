"""OS signal to supervisor event adapter.

Signal classification:
- SIGHUP: reload (stop the panel and start it again with fresh settings)
- SIGTERM, SIGINT: terminate (stop the panel and exit)

SIGKILL also ends the process, but it cannot be caught, so no stop() runs
for it. Whether SIGHUP exists at all depends on the platform; where it is
missing only the terminate signals are installed.

Handlers only enqueue an event. queue.SimpleQueue.put is reentrant, so it
is safe even when the signal interrupts the supervisor inside get().
"""

import logging
import signal
from types import FrameType
from typing import Self

from xpanel.core.supervisor import SupervisorControl

logger = logging.getLogger(__name__)

RELOAD_SIGNALS: tuple[signal.Signals, ...] = tuple(
    s for s in (getattr(signal, "SIGHUP", None),) if s is not None
)
TERMINATE_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGTERM, signal.SIGINT)


class SignalEventAdapter:
    """Installs signal handlers that forward events to a SupervisorControl.

    Must be installed from the main thread. Previous handlers are restored on
    uninstall() or when leaving the context manager.
    """

    def __init__(
        self,
        control: SupervisorControl,
        reload_signals: tuple[signal.Signals, ...] = RELOAD_SIGNALS,
        terminate_signals: tuple[signal.Signals, ...] = TERMINATE_SIGNALS,
    ) -> None:
        self._control = control
        self._signals = reload_signals + terminate_signals
        self._reload_signals = reload_signals
        self._previous: dict[signal.Signals, object] = {}

    def _handle(self, signum: int, frame: FrameType | None) -> None:
        if signum in self._reload_signals:
            self._control.request_reload()
        else:
            self._control.request_terminate()

    def install(self) -> None:
        for sig in self._signals:
            self._previous[sig] = signal.signal(sig, self._handle)
        logger.debug(
            "Installed handlers for %s", ", ".join(s.name for s in self._signals)
        )

    def uninstall(self) -> None:
        """Restore the handlers that were active before install()."""
        for sig, previous in self._previous.items():
            signal.signal(sig, previous)
        self._previous.clear()

    def __enter__(self) -> Self:
        self.install()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> bool:
        self.uninstall()
        return False
