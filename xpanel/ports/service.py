"""Port interface for the managed service.

The supervisor only ever sees this narrow contract. What the service does
with its network listener is not its concern.
"""

from collections.abc import Callable
from typing import Protocol


class ManagedService(Protocol):
    """One single-use run of the supervised network service.

    An instance moves from constructed to running on start() and to stopped
    on stop(), whether stop succeeds or not. A stopped instance is never
    started again; a new one is built by the ServiceFactory.
    """

    def start(self) -> None:
        """Start serving.

        Raises:
            ServiceStartError: If the service could not start.
        """
        ...

    def stop(self) -> None:
        """Stop serving and release resources.

        Raises:
            ServiceStopError: If shutdown did not complete cleanly.
        """
        ...


ServiceFactory = Callable[[], ManagedService]
"""Builds a fresh instance from ambient configuration (store settings)."""
