"""Persisted panel settings.

Settings live in the store's settings table as key/value strings. A missing
row means the documented default applies, which is how a reset works: it
removes every row.
"""

from dataclasses import dataclass

WEB_LISTEN = "webListen"
WEB_PORT = "webPort"
WEB_BASE_PATH = "webBasePath"
WEB_CERT_FILE = "webCertFile"
WEB_KEY_FILE = "webKeyFile"
TIME_LOCATION = "timeLocation"

DEFAULT_SETTINGS: dict[str, str] = {
    WEB_LISTEN: "",
    WEB_PORT: "54321",
    WEB_BASE_PATH: "/",
    WEB_CERT_FILE: "",
    WEB_KEY_FILE: "",
    TIME_LOCATION: "Asia/Shanghai",
}

MIN_PORT = 1
MAX_PORT = 65535


@dataclass(frozen=True)
class PanelSettings:
    """Typed view of the persisted settings, read at each service (re)start."""

    listen: str = ""
    port: int = 54321
    base_path: str = "/"
    cert_file: str = ""
    key_file: str = ""
    time_location: str = "Asia/Shanghai"

    @classmethod
    def from_mapping(cls, values: dict[str, str]) -> "PanelSettings":
        """Build settings from stored key/value pairs, filling defaults.

        Args:
            values: Stored rows; keys missing here use DEFAULT_SETTINGS.

        Returns:
            PanelSettings with a normalized base path (leading and trailing '/').
        """
        merged = {**DEFAULT_SETTINGS, **values}
        base_path = merged[WEB_BASE_PATH] or "/"
        if not base_path.startswith("/"):
            base_path = "/" + base_path
        if not base_path.endswith("/"):
            base_path += "/"
        return cls(
            listen=merged[WEB_LISTEN],
            port=int(merged[WEB_PORT]),
            base_path=base_path,
            cert_file=merged[WEB_CERT_FILE],
            key_file=merged[WEB_KEY_FILE],
            time_location=merged[TIME_LOCATION],
        )
