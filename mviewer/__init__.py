"""
mviewer

Browser map viewer built on Panel and Leaflet: configurable basemaps, a
collapsible side panel, locate/minimap/scale tools and GeoJSON import from a
file or a URL.
"""

__version__ = "0.1.0"

from .config import ViewerConfig, load_config
from .errors import ConfigError, GeoJSONImportError, PanelWiringError, ViewerError
from .widget import MapViewer

__all__ = [
    "ConfigError",
    "GeoJSONImportError",
    "MapViewer",
    "PanelWiringError",
    "ViewerConfig",
    "ViewerError",
    "__version__",
    "load_config",
]
