"""
tools.py

Map tools. Each tool is a pre-built Leaflet control (core or plugin) attached
at a fixed screen position; they are independent of each other. Python only
describes them; js/render.js instantiates one control per descriptor.

Tool names accepted in the configuration's ``tools`` list:

- ``locate``: leaflet.locatecontrol "show my location" button
- ``minimap``: leaflet-minimap overview map
- ``scale``: Leaflet's scale bar
- ``geojson_upload``: not a map control, enables the GeoJSON import section
  of the side panel

The zoom control is always present.
"""

import copy
import logging
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)

GEOJSON_UPLOAD = "geojson_upload"

MINIMAP_TILES = "https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}.png"

ZOOM_CONTROL: Dict[str, Any] = {"kind": "zoom", "options": {"position": "bottomright"}}

CONTROLS: Dict[str, Dict[str, Any]] = {
    "locate": {
        "kind": "locate",
        "options": {
            "position": "topright",
            "setView": "always",
            "flyTo": True,
            "showCompass": True,
            "drawCircle": True,
            "initialZoomLevel": 14,
            "strings": {"title": "Show my location", "popup": "You are here!"},
        },
    },
    "minimap": {
        "kind": "minimap",
        "tiles": {"url": MINIMAP_TILES, "attribution": "MiniMap", "maxZoom": 19},
        "options": {
            "position": "bottomleft",
            "toggleDisplay": True,
            "width": 150,
            "height": 150,
            "collapsedWidth": 19,
            "collapsedHeight": 19,
        },
    },
    "scale": {
        "kind": "scale",
        "options": {"position": "bottomleft", "metric": True, "imperial": False},
    },
}

KNOWN_TOOLS = frozenset(CONTROLS) | {GEOJSON_UPLOAD}


def build_controls(tool_names: Iterable[str]) -> List[Dict[str, Any]]:
    """Control descriptors for the enabled tools, zoom control first.

    Order follows CONTROLS, not the configuration, so the browser always
    stacks controls the same way. Unknown names are logged and skipped.
    """
    enabled = set()
    for name in tool_names:
        if name not in KNOWN_TOOLS:
            logger.warning("Ignoring unknown tool '%s'", name)
            continue
        enabled.add(name)

    controls = [copy.deepcopy(ZOOM_CONTROL)]
    controls.extend(copy.deepcopy(spec) for name, spec in CONTROLS.items() if name in enabled)
    return controls
