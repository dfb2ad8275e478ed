"""Domain entities for xpanel.

Entities describe the process's operating mode, the events that drive the
supervisor, and the records kept in the store.
"""

from dataclasses import dataclass
from enum import Enum


class OperatingMode(Enum):
    """The single top-level action a process invocation performs."""

    RUN_SERVICE = "run-service"
    MIGRATE = "migrate"
    CONFIGURE_SETTINGS = "configure-settings"


class SignalEvent(Enum):
    """Control event consumed by the supervisor, one per occurrence."""

    RELOAD = "reload"
    TERMINATE = "terminate"


class SupervisorState(Enum):
    """Supervisor state.

    STOPPED is transient: the supervisor either exits or re-enters RUNNING
    with a new instance.
    """

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class ServiceState(Enum):
    """Lifecycle of one managed service instance. Never leaves STOPPED."""

    CONSTRUCTED = "constructed"
    RUNNING = "running"
    STOPPED = "stopped"


class SupervisorExit(Enum):
    """Why the supervisor returned."""

    TERMINATED = "terminated"
    START_FAILED = "start_failed"
    RESTART_FAILED = "restart_failed"


@dataclass(frozen=True)
class User:
    """Panel login user."""

    id: int
    username: str
    password: str


@dataclass(frozen=True)
class Inbound:
    """Proxy inbound definition imported from or managed by the panel.

    settings, stream_settings and sniffing hold JSON documents verbatim.
    """

    user_id: int
    port: int
    protocol: str
    listen: str = ""
    settings: str = ""
    stream_settings: str = ""
    tag: str = ""
    sniffing: str = ""
    remark: str = ""
    enable: bool = True
    up: int = 0
    down: int = 0
    total: int = 0
    expiry_time: int = 0
