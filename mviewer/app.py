"""
app.py

Assembles a viewer session: settings -> configuration -> map -> basemap
switcher and tools -> side panel controller. The side panel is wired even
when the configuration cannot be loaded; the session then shows the error on
the banner and has no map.

Run using 'panel serve viewer_app.py' or 'mviewer serve'.
"""

import logging
from typing import Any, Optional

import panel as pn

from .banner import MessageBanner
from .config import ViewerConfig, load_config
from .errors import ConfigError
from .importer import GeoJSONImporter
from .layers import LayerSwitcher
from .panel_controller import PanelController
from .settings import ViewerSettings, get_settings
from .tools import GEOJSON_UPLOAD
from .widget import CUSTOM_CSS, MapViewer

logger = logging.getLogger(__name__)

# Without a map the panel is a plain column, hidden while closed
DETACHED_PANEL_CSS = """
:host(:not(.open)) { display: none; }
"""


class ViewerApp:
    """One viewer session and the components it is made of."""

    def __init__(self, settings: Optional[ViewerSettings] = None, scheduler: Any = None) -> None:
        self.settings = settings or get_settings()
        self.banner = MessageBanner(scheduler=scheduler, timeout_ms=self.settings.banner_timeout_ms)
        self.controller = PanelController()
        self.config: Optional[ViewerConfig] = None
        self.viewer: Optional[MapViewer] = None
        self.layer_switcher: Optional[LayerSwitcher] = None
        self.importer: Optional[GeoJSONImporter] = None

        self.toggle_button = pn.widgets.Button(name="☰ Tools", button_type="light")
        self.close_button = pn.widgets.Button(name="✕", button_type="light", width=40)

        try:
            self.config = load_config(self.settings.config_path, timeout=self.settings.request_timeout)
        except ConfigError as exc:
            logger.error("Configuration unavailable: %s", exc)
            self.banner.error(f"Error while loading the configuration: {exc}")

        sections = []
        if self.config is not None:
            self.viewer = MapViewer.from_config(self.config)
            self.layer_switcher = LayerSwitcher(self.viewer)
            sections.append(self.layer_switcher.panel())
            if self.config.has_tool(GEOJSON_UPLOAD):
                self.importer = GeoJSONImporter(
                    self.viewer, self.banner, timeout=self.settings.request_timeout
                )
                sections.append(self.importer.panel())

        self.side_panel = pn.Column(
            pn.Row(pn.pane.Markdown("### Tools"), pn.layout.HSpacer(), self.close_button),
            *sections,
            css_classes=["mviewer-panel-body"],
            sizing_mode="stretch_width",
        )

        self.controller.wire(self.side_panel, self.toggle_button, self.close_button)
        self.controller.bind_map(self.viewer)

        if self.viewer is not None:
            self.viewer.param.update(side_panel=self.side_panel, panel_toggle=self.toggle_button)
            body = self.viewer
        else:
            self.side_panel.stylesheets = [DETACHED_PANEL_CSS]
            body = pn.Column(
                self.toggle_button,
                self.side_panel,
                pn.pane.Markdown("The map is unavailable."),
                sizing_mode="stretch_both",
            )

        self.layout = pn.Column(
            self.banner.panel(),
            body,
            sizing_mode="stretch_both",
            min_height=600,
        )

    def servable(self) -> pn.Column:
        return self.layout.servable(title="mviewer")


def create_app(settings: Optional[ViewerSettings] = None) -> pn.Column:
    """Layout of a new session, for pn.serve."""
    return ViewerApp(settings).layout


pn.extension("leaflet", raw_css=[CUSTOM_CSS])
