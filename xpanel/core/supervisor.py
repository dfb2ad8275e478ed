"""Lifecycle supervisor for the managed panel service.

The supervisor owns at most one running service instance. It starts one,
then blocks on a control event source. A reload event stops the current
instance and starts a freshly built one; any other event stops it and
returns. Events are handled strictly one at a time.

OS signals never reach this module directly: an adapter at the process
boundary turns them into SignalEvent values and feeds them in through
SupervisorControl.
"""

import logging

from xpanel.domain.entities import SignalEvent, SupervisorExit, SupervisorState
from xpanel.domain.exceptions import ServiceStartError, ServiceStopError
from xpanel.ports.events import EventSink, EventSource
from xpanel.ports.service import ManagedService, ServiceFactory

logger = logging.getLogger(__name__)


class SupervisorControl:
    """Narrow facade for requesting reload or termination.

    This is the only handle other components get; none of them can reach
    the service instance itself.
    """

    def __init__(self, sink: EventSink) -> None:
        self._sink = sink

    def request_reload(self) -> None:
        """Ask the supervisor to stop the current instance and start a new one."""
        self._sink.put(SignalEvent.RELOAD)

    def request_terminate(self) -> None:
        """Ask the supervisor to stop the current instance and return."""
        self._sink.put(SignalEvent.TERMINATE)


class ServiceSupervisor:
    """Start/stop/restart state machine around a ManagedService.

    Args:
        service_factory: Builds a fresh service instance; called once per
            (re)start so that each run sees the current persisted settings.
        events: Blocking source of control events.
    """

    def __init__(self, service_factory: ServiceFactory, events: EventSource) -> None:
        self._service_factory = service_factory
        self._events = events
        self._service: ManagedService | None = None
        self._state = SupervisorState.IDLE
        self.last_error: str | None = None

    @property
    def state(self) -> SupervisorState:
        return self._state

    @property
    def has_instance(self) -> bool:
        """True while the supervisor holds a reference to a service instance."""
        return self._service is not None

    def run(self) -> SupervisorExit:
        """Run the service until a terminate event or a failed (re)start.

        Returns:
            SupervisorExit describing why the loop ended. On START_FAILED and
            RESTART_FAILED, last_error holds the reason.
        """
        if not self._start_new_instance():
            return SupervisorExit.START_FAILED

        while True:
            event = self._events.get()
            logger.info("Received %s event", event.value)

            if event is SignalEvent.RELOAD:
                self._stop_current_instance()
                if not self._start_new_instance():
                    return SupervisorExit.RESTART_FAILED
                logger.info("Service restarted")
            else:
                self._stop_current_instance()
                logger.info("Service stopped, exiting")
                return SupervisorExit.TERMINATED

    def _start_new_instance(self) -> bool:
        """Build and start a new instance into the (empty) slot.

        Returns:
            True if the instance is running, False if it failed. A failed
            instance is never kept.

        Raises:
            RuntimeError: If the slot still holds an instance.
        """
        if self._service is not None:
            raise RuntimeError("previous service instance is still referenced")

        try:
            service = self._service_factory()
            service.start()
        except ServiceStartError as e:
            self._record_start_failure(e.message)
            return False
        except Exception as e:
            logger.exception("Unexpected error starting service")
            self._record_start_failure(str(e))
            return False

        self._service = service
        self._state = SupervisorState.RUNNING
        self.last_error = None
        logger.info("Service started")
        return True

    def _record_start_failure(self, message: str) -> None:
        logger.error("start service failed: %s", message)
        self.last_error = message
        self._state = SupervisorState.IDLE

    def _stop_current_instance(self) -> None:
        """Release the current instance and stop it.

        Stop failures are logged as warnings and otherwise ignored: the
        instance is considered stopped either way.
        """
        service, self._service = self._service, None
        self._state = SupervisorState.STOPPED
        if service is None:
            return

        try:
            service.stop()
        except ServiceStopError as e:
            logger.warning("stop service err: %s", e.message)
        except Exception as e:
            logger.warning("stop service err: %s", e, exc_info=True)
