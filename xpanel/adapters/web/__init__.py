"""HTTP panel service managed by the supervisor."""

from xpanel.adapters.web.server import PanelWebServer

__all__ = ["PanelWebServer"]
