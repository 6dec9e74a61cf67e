"""
config.py

Map configuration: where the map starts, which basemaps it offers and which
tools are enabled. The document is JSON, read once at startup:

    {
      "map": {"center": [48.85, 2.35], "zoom": 12, "maxZoom": 19},
      "basemaps": [{"name": "OSM", "url": "...", "attribution": "...", "maxZoom": 19}],
      "tools": ["geojson_upload", "locate", "minimap", "scale"]
    }

The loaded objects are param.Parameterized instances whose parameters are
constant, so the configuration cannot change after startup.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import httpx
import param

from .errors import ConfigError

logger = logging.getLogger(__name__)


class Basemap(param.Parameterized):
    """A named tile source."""

    name = param.String(default="", constant=True)
    url = param.String(default="", constant=True, doc="Tile URL template, e.g. https://{s}.tile.../{z}/{x}/{y}.png")
    attribution = param.String(default="", constant=True)
    max_zoom = param.Integer(default=19, bounds=(0, 30), constant=True)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the shape the browser scripts expect."""
        return {
            "name": self.name,
            "url": self.url,
            "attribution": self.attribution,
            "maxZoom": self.max_zoom,
        }


class MapOptions(param.Parameterized):
    """Initial viewport of the map."""

    center = param.XYCoordinates(default=(0.0, 0.0), constant=True, doc="(lat, lon)")
    zoom = param.Integer(default=2, bounds=(0, 30), constant=True)
    max_zoom = param.Integer(default=19, bounds=(0, 30), constant=True)
    min_zoom = param.Integer(default=0, bounds=(0, 30), constant=True)


class ViewerConfig(param.Parameterized):
    """The whole configuration document."""

    map = param.ClassSelector(class_=MapOptions, constant=True)
    basemaps = param.List(default=[], item_type=Basemap, constant=True)
    tools = param.List(default=[], item_type=str, constant=True)

    @property
    def default_basemap(self) -> Basemap:
        return self.basemaps[0]

    def has_tool(self, name: str) -> bool:
        return name in self.tools

    @classmethod
    def from_dict(cls, data: Any) -> "ViewerConfig":
        """Build a configuration from a decoded JSON document.

        Raises:
            ConfigError: If a required key is missing or a value has the
                wrong type.
        """
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a JSON object")

        map_data = data.get("map")
        if not isinstance(map_data, dict):
            raise ConfigError("configuration is missing the 'map' section")

        center = map_data.get("center")
        if (
            not isinstance(center, (list, tuple))
            or len(center) != 2
            or not all(_is_number(c) for c in center)
        ):
            raise ConfigError("'map.center' must be a [lat, lon] pair")
        if "zoom" not in map_data:
            raise ConfigError("'map.zoom' is required")

        try:
            map_options = MapOptions(
                center=(float(center[0]), float(center[1])),
                zoom=map_data["zoom"],
                max_zoom=map_data.get("maxZoom", 19),
                min_zoom=map_data.get("minZoom", 0),
            )
        except ValueError as exc:
            raise ConfigError(f"invalid 'map' section: {exc}") from exc

        basemaps = _parse_basemaps(data.get("basemaps"), map_options.max_zoom)

        tools = data.get("tools", [])
        if not isinstance(tools, list) or not all(isinstance(t, str) for t in tools):
            raise ConfigError("'tools' must be a list of tool names")

        return cls(map=map_options, basemaps=basemaps, tools=list(tools))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_basemaps(entries: Any, default_max_zoom: int) -> List[Basemap]:
    if not isinstance(entries, list) or not entries:
        raise ConfigError("'basemaps' must be a non-empty list")

    basemaps: List[Basemap] = []
    seen = set()
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigError(f"basemap #{i} must be an object")
        name = entry.get("name")
        url = entry.get("url")
        if not isinstance(name, str) or not name:
            raise ConfigError(f"basemap #{i} has no name")
        if not isinstance(url, str) or not url:
            raise ConfigError(f"basemap '{name}' has no url")
        if name in seen:
            raise ConfigError(f"duplicate basemap name '{name}'")
        seen.add(name)
        try:
            basemaps.append(
                Basemap(
                    name=name,
                    url=url,
                    attribution=entry.get("attribution", ""),
                    max_zoom=entry.get("maxZoom", default_max_zoom),
                )
            )
        except ValueError as exc:
            raise ConfigError(f"invalid basemap '{name}': {exc}") from exc
    return basemaps


def _read_source(source: Union[str, Path], timeout: float) -> str:
    text_source = str(source)
    if text_source.startswith(("http://", "https://")):
        try:
            response = httpx.get(text_source, timeout=timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ConfigError(f"HTTP {exc.response.status_code} while fetching {text_source}") from exc
        except httpx.RequestError as exc:
            raise ConfigError(f"could not fetch {text_source}: {exc}") from exc
        return response.text

    try:
        return Path(source).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"could not read {source}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"{source} is not UTF-8 text: {exc}") from exc


def load_config(source: Union[str, Path] = "config.json", timeout: float = 15.0) -> ViewerConfig:
    """Load the map configuration from a file path or an http(s) URL.

    Args:
        source: Filesystem path or absolute URL of the JSON document.
        timeout: Timeout in seconds for remote documents.

    Returns:
        The parsed configuration.

    Raises:
        ConfigError: On any I/O, JSON or shape error. Nothing is retried.
    """
    text = _read_source(source, timeout)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{source} is not valid JSON: {exc}") from exc

    config = ViewerConfig.from_dict(data)
    logger.info(
        "Loaded configuration from %s (%d basemaps, tools: %s)",
        source,
        len(config.basemaps),
        ", ".join(config.tools) or "none",
    )
    return config
