"""Panel web server: the managed service instance.

The server:
1. Binds to the persisted listen address and port on start()
2. Wraps the socket in TLS when a certificate and key are configured; the
   handshake happens on the connection's own thread, so a stalled client
   never holds up accept() or stop()
3. Serves requests from a background thread until stop()

Each PanelWebServer is single use. The supervisor builds a new one for
every (re)start, which is how changed settings take effect on reload.
Only a health endpoint is served at this layer.
"""

import json
import logging
import socket
import ssl
import threading
import time
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

from xpanel.domain.entities import ServiceState
from xpanel.domain.exceptions import ServiceStartError, ServiceStopError
from xpanel.domain.settings import PanelSettings

logger = logging.getLogger(__name__)

# Seconds to wait for the serving thread after shutdown()
STOP_JOIN_TIMEOUT = 10.0
# Seconds a client gets to complete the TLS handshake
HANDSHAKE_TIMEOUT = 10.0
# Seconds an idle connection is kept open
REQUEST_TIMEOUT = 30.0


class _PanelHTTPServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int], panel: "PanelWebServer") -> None:
        if ":" in address[0]:
            self.address_family = socket.AF_INET6
        self.panel = panel
        super().__init__(address, _PanelRequestHandler)

    def finish_request(self, request, client_address) -> None:
        # The TLS handshake runs in the per-connection thread, never in accept()
        if isinstance(request, ssl.SSLSocket):
            request.settimeout(HANDSHAKE_TIMEOUT)
            try:
                request.do_handshake()
            except OSError as e:
                logger.debug("TLS handshake with %s failed: %s", client_address[0], e)
                return
        super().finish_request(request, client_address)


class _PanelRequestHandler(BaseHTTPRequestHandler):
    server: _PanelHTTPServer
    timeout = REQUEST_TIMEOUT

    def do_GET(self) -> None:
        panel = self.server.panel
        if self.path.split("?", 1)[0] != panel.health_path:
            self.send_error(HTTPStatus.NOT_FOUND)
            return

        body = json.dumps(panel.health()).encode("utf-8")
        self.send_response(HTTPStatus.OK)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)


class PanelWebServer:
    """ManagedService implementation serving the panel over HTTP(S)."""

    def __init__(self, settings: PanelSettings, version: str = "") -> None:
        """Initialize the server. Nothing is bound until start().

        Args:
            settings: Settings snapshot taken from the store for this run.
            version: Version string reported by the health endpoint.
        """
        self.settings = settings
        self.version = version
        self.state = ServiceState.CONSTRUCTED
        self._httpd: _PanelHTTPServer | None = None
        self._thread: threading.Thread | None = None
        self._started_at: float | None = None

    @property
    def health_path(self) -> str:
        return f"{self.settings.base_path}health"

    @property
    def address(self) -> tuple[str, int] | None:
        """Bound (host, port) while running, else None."""
        if self._httpd is None:
            return None
        host, port = self._httpd.server_address[:2]
        return host, port

    def health(self) -> dict:
        uptime = time.monotonic() - self._started_at if self._started_at else 0.0
        return {
            "status": "ok",
            "version": self.version,
            "uptime": round(uptime, 3),
            "tls": self._tls_enabled(),
        }

    def _tls_enabled(self) -> bool:
        return bool(self.settings.cert_file and self.settings.key_file)

    def start(self) -> None:
        """Bind and start serving in a background thread.

        Raises:
            ServiceStartError: If this instance was already started, the
                address cannot be bound, or the TLS files cannot be loaded.
        """
        if self.state is not ServiceState.CONSTRUCTED:
            raise ServiceStartError(
                f"panel server cannot be started from state {self.state.value}"
            )

        address = (self.settings.listen, self.settings.port)
        try:
            httpd = _PanelHTTPServer(address, self)
        except OSError as e:
            self.state = ServiceState.STOPPED
            raise ServiceStartError(
                f"listen on {self.settings.listen or '*'}:{self.settings.port} failed: {e}",
                hint="Choose another port with 'xpanel setting -port <port>'",
            ) from e

        if self._tls_enabled():
            try:
                context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
                context.load_cert_chain(self.settings.cert_file, self.settings.key_file)
                httpd.socket = context.wrap_socket(
                    httpd.socket, server_side=True, do_handshake_on_connect=False
                )
            except (OSError, ssl.SSLError) as e:
                httpd.server_close()
                self.state = ServiceState.STOPPED
                raise ServiceStartError(f"load TLS certificate failed: {e}") from e

        self._httpd = httpd
        self._started_at = time.monotonic()
        self._thread = threading.Thread(
            target=httpd.serve_forever,
            kwargs={"poll_interval": 0.5},
            name="panel-http",
            daemon=True,
        )
        self._thread.start()
        self.state = ServiceState.RUNNING

        scheme = "https" if self._tls_enabled() else "http"
        host, port = self.address
        logger.info("Panel listening on %s://%s:%s%s", scheme, host, port, self.settings.base_path)

    def stop(self) -> None:
        """Stop serving and close the listening socket.

        The instance is STOPPED afterwards even if shutdown fails.

        Raises:
            ServiceStopError: If the instance was not running or the serving
                thread did not finish in time.
        """
        if self.state is not ServiceState.RUNNING:
            self.state = ServiceState.STOPPED
            raise ServiceStopError("panel server is not running")

        httpd, thread = self._httpd, self._thread
        self._httpd = None
        self._thread = None
        self.state = ServiceState.STOPPED

        httpd.shutdown()
        httpd.server_close()
        thread.join(timeout=STOP_JOIN_TIMEOUT)
        if thread.is_alive():
            raise ServiceStopError(
                f"panel server thread did not exit within {STOP_JOIN_TIMEOUT:.0f}s"
            )
        logger.info("Panel server stopped")
