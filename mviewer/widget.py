"""
widget.py

Leaflet map component for Panel. Python-side parameters hold all viewer
state (viewport, basemaps, active basemap, tool controls, the single overlay
slot, side panel state); bundled JavaScript mirrors that state into Leaflet.

Assets and client-side behavior
- js/render.js
    Creates the Leaflet map and one tile layer per basemap, instantiates the
    tool controls described by `controls`, and stops click/scroll events on
    the side panel from reaching the map.
- js/sync_basemap.js
    Swaps the visible tile layer when `active_basemap` changes.
- js/sync_overlay.js
    Replaces the overlay layer when `overlay` changes: builds the new
    L.geoJSON layer with the fixed style and per-feature popups, swaps it for
    the previous one only once it was built, then fits the viewport to the
    precomputed bounds.
- js/sync_panel.js
    Toggles the `open` class of the side panel host and moves the controls
    docked on the left edge by `left_offset`.
- js/after_layout.js
    Calls invalidateSize() once Panel has finished laying out the page.
- assets/template.html
    Map container, panel toggle host and side panel host.
- assets/styles.css
    Side panel, toggle button and left-edge control positioning.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import panel as pn
import param
from panel.reactive import ReactiveHTML
from panel.viewable import Viewable

from .config import ViewerConfig
from .geojson import FIT_PADDING, OVERLAY_STYLE, as_feature_collection, compute_bounds, popup_html
from .tools import build_controls

# --- Asset loading ---------------------------------------------------------
ROOT = Path(__file__).parent
JS_DIR = ROOT / "js"
ASSET_DIR = ROOT / "assets"


def _read(path: Path) -> str:
    """Read a bundled JavaScript, HTML or CSS asset."""
    return path.read_text(encoding="utf-8")


RENDER_JS = _read(JS_DIR / "render.js")                # Map, basemaps, tool controls
AFTER_LAYOUT_JS = _read(JS_DIR / "after_layout.js")    # Post-layout size fix
SYNC_BASEMAP_JS = _read(JS_DIR / "sync_basemap.js")    # Active tile layer
SYNC_OVERLAY_JS = _read(JS_DIR / "sync_overlay.js")    # Single overlay slot
SYNC_PANEL_JS = _read(JS_DIR / "sync_panel.js")        # Panel class and left offset

TEMPLATE_HTML = _read(ASSET_DIR / "template.html")
CUSTOM_CSS = _read(ASSET_DIR / "styles.css")

PANEL_WIDTH_PX = 350
CONTROL_MARGIN_PX = 15
CLOSED_OFFSET = f"{CONTROL_MARGIN_PX}px"
OPEN_OFFSET = f"{PANEL_WIDTH_PX + CONTROL_MARGIN_PX}px"


# --- MapViewer -------------------------------------------------------------
class MapViewer(ReactiveHTML):
    """Leaflet map with switchable basemaps, tool controls and one GeoJSON overlay.

    Important parameters
    - center, zoom, max_zoom, min_zoom: initial viewport.
    - basemaps (List): basemap dicts (name, url, attribution, maxZoom) in
      configuration order.
    - active_basemap (Selector): name of the visible basemap. Its objects are
      the basemap names, so exactly one valid basemap is always selected.
    - controls (List): tool control descriptors from tools.build_controls.
    - overlay (Dict): the single overlay slot, or None. Holds the normalized
      FeatureCollection (each feature carrying its popup HTML), its bounds,
      the style and the fit padding, so the browser always receives a
      consistent overlay in one message.
    - panel_open (Boolean), left_offset (String): side panel state as
      decided by PanelController.
    - side_panel, panel_toggle: Panel objects rendered inside the map
      container (the side panel and the button opening it).

    Example
    >>> viewer = MapViewer.from_config(load_config("config.json"))
    >>> viewer.replace_overlay(parse_geojson(raw_bytes))
    """

    center = param.XYCoordinates(default=(0.0, 0.0), doc="(lat, lon)")
    zoom = param.Integer(default=2, bounds=(0, 30))
    max_zoom = param.Integer(default=19, bounds=(0, 30))
    min_zoom = param.Integer(default=0, bounds=(0, 30))
    map_options = param.Dict(default={}, doc="Extra L.map options (camelCase)")

    container_style = param.String(default="width:100%;height:100%;")

    basemaps = param.List(default=[])
    active_basemap = param.Selector(default=None, objects=[], allow_None=True, check_on_set=True)

    controls = param.List(default=[])

    overlay = param.Dict(default=None, allow_None=True)

    panel_open = param.Boolean(default=False)
    left_offset = param.String(default=CLOSED_OFFSET)

    side_panel = param.ClassSelector(class_=Viewable, allow_refs=False)
    panel_toggle = param.ClassSelector(class_=Viewable, allow_refs=False)

    def __init__(self, **params: Any) -> None:
        basemaps = params.get("basemaps", [])
        names = [b["name"] for b in basemaps]
        active = params.pop("active_basemap", names[0] if names else None)
        params.setdefault("side_panel", pn.Column(css_classes=["mviewer-panel-body"]))
        params.setdefault("panel_toggle", pn.Spacer(width=0, height=0))
        params.setdefault("stylesheets", [CUSTOM_CSS])
        super().__init__(**params)
        self.param.active_basemap.objects = names
        self.active_basemap = active

    @classmethod
    def from_config(cls, config: ViewerConfig, **params: Any) -> "MapViewer":
        """Build a viewer for ``config``; the first basemap starts active."""
        options = config.map
        return cls(
            center=options.center,
            zoom=options.zoom,
            max_zoom=options.max_zoom,
            min_zoom=options.min_zoom,
            basemaps=[b.to_dict() for b in config.basemaps],
            active_basemap=config.default_basemap.name,
            controls=build_controls(config.tools),
            **params,
        )

    @property
    def basemap_names(self) -> List[str]:
        return [b["name"] for b in self.basemaps]

    # --- Overlay slot ----------------------------------------------------
    def replace_overlay(self, geojson: Dict[str, Any], name: str = "GeoJSON") -> Dict[str, Any]:
        """Put ``geojson`` in the overlay slot, replacing whatever was there.

        The document is normalized to a FeatureCollection before anything
        changes, so an invalid document leaves the current overlay in place.

        Args:
            geojson: FeatureCollection, Feature or bare geometry.
            name: Label kept with the overlay.

        Returns:
            The new overlay entry.

        Raises:
            GeoJSONImportError: If ``geojson`` is not a GeoJSON object.
        """
        fc = as_feature_collection(geojson)
        features = [
            dict(feature, _popup=popup_html(feature.get("properties")))
            for feature in fc["features"]
        ]
        entry = {
            "name": name,
            "geojson": dict(fc, features=features),
            "bounds": compute_bounds(fc),
            "style": dict(OVERLAY_STYLE),
            "padding": list(FIT_PADDING),
        }
        self.overlay = entry
        return entry

    def clear_overlay(self) -> None:
        """Empty the overlay slot."""
        self.overlay = None

    @property
    def overlay_bounds(self) -> Optional[List[List[float]]]:
        return self.overlay["bounds"] if self.overlay else None

    @property
    def overlay_features(self) -> List[Dict[str, Any]]:
        return self.overlay["geojson"]["features"] if self.overlay else []

    # --- ReactiveHTML configuration ---------------------------------------
    _template = TEMPLATE_HTML

    _scripts = {
        "render": RENDER_JS,
        "after_layout": AFTER_LAYOUT_JS,
        "sync_basemap": SYNC_BASEMAP_JS,
        "sync_overlay": SYNC_OVERLAY_JS,
        "sync_panel": SYNC_PANEL_JS,
        "active_basemap": "self.sync_basemap()",
        "overlay": "self.sync_overlay()",
        "panel_open": "self.sync_panel()",
        "left_offset": "self.sync_panel()",
    }

    _extension_name = "leaflet"

    __css__ = [
        "https://unpkg.com/leaflet@1.9.4/dist/leaflet.css",
        "https://cdn.jsdelivr.net/npm/leaflet.locatecontrol@0.79.0/dist/L.Control.Locate.min.css",
        "https://unpkg.com/leaflet-minimap@3.6.1/dist/Control.MiniMap.min.css",
    ]

    __javascript__ = [
        "https://unpkg.com/leaflet@1.9.4/dist/leaflet.js",
        "https://cdn.jsdelivr.net/npm/leaflet.locatecontrol@0.79.0/dist/L.Control.Locate.min.js",
        "https://unpkg.com/leaflet-minimap@3.6.1/dist/Control.MiniMap.min.js",
    ]
