"""
geojson.py

Helpers turning user supplied bytes into an overlay the map can draw:
decode and parse, normalize to a FeatureCollection, compute the bounding box
used to fit the viewport, and build the per-feature popup HTML.
"""

import html
import json
import math
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

import numpy as np

from .errors import GeoJSONImportError

# Fixed overlay look (Leaflet path options)
OVERLAY_STYLE: Dict[str, Any] = {"color": "#ff6347", "weight": 3, "fillOpacity": 0.6}

# Padding in pixels used when fitting the viewport to an overlay
FIT_PADDING = (50, 50)

# Nesting depth of `coordinates` above a single position
COORDINATE_DEPTH = {
    "Point": 0,
    "MultiPoint": 1,
    "LineString": 1,
    "MultiLineString": 2,
    "Polygon": 2,
    "MultiPolygon": 3,
}

GEOMETRY_TYPES = frozenset(COORDINATE_DEPTH) | {"GeometryCollection"}

INVALID_MESSAGE = "The file is not a valid GeoJSON document."


def parse_geojson(raw: Union[bytes, bytearray, str]) -> Dict[str, Any]:
    """Decode, parse and normalize a GeoJSON document.

    Args:
        raw: UTF-8 bytes (a leading BOM is accepted) or already decoded text.

    Returns:
        The document as a FeatureCollection dict.

    Raises:
        GeoJSONImportError: If the bytes are not UTF-8, the text is not JSON,
            or the JSON is not a GeoJSON object.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            text = bytes(raw).decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise GeoJSONImportError(f"{INVALID_MESSAGE} ({exc.reason})") from exc
    else:
        text = raw

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise GeoJSONImportError(f"{INVALID_MESSAGE} ({exc.msg} at line {exc.lineno})") from exc

    return as_feature_collection(data)


def as_feature_collection(data: Any) -> Dict[str, Any]:
    """Wrap a Feature or bare geometry into a FeatureCollection.

    Geometries are checked down to their positions, so anything accepted
    here can be drawn by Leaflet.

    Raises:
        GeoJSONImportError: If ``data`` is not a GeoJSON object.
    """
    if not isinstance(data, dict):
        raise GeoJSONImportError(INVALID_MESSAGE)

    kind = data.get("type")
    if kind == "FeatureCollection":
        features = data.get("features")
        if not isinstance(features, list) or not all(_is_feature(f) for f in features):
            raise GeoJSONImportError(INVALID_MESSAGE)
        return data
    if kind == "Feature":
        if not _is_feature(data):
            raise GeoJSONImportError(INVALID_MESSAGE)
        return {"type": "FeatureCollection", "features": [data]}
    if kind in GEOMETRY_TYPES:
        if not _is_geometry(data):
            raise GeoJSONImportError(INVALID_MESSAGE)
        return {
            "type": "FeatureCollection",
            "features": [{"type": "Feature", "geometry": data, "properties": {}}],
        }
    raise GeoJSONImportError(INVALID_MESSAGE)


def _is_feature(obj: Any) -> bool:
    if not isinstance(obj, dict) or obj.get("type") != "Feature":
        return False
    geometry = obj.get("geometry")
    return geometry is None or _is_geometry(geometry)


def _is_geometry(obj: Any) -> bool:
    if not isinstance(obj, dict):
        return False
    kind = obj.get("type")
    if kind == "GeometryCollection":
        geometries = obj.get("geometries")
        return isinstance(geometries, list) and all(_is_geometry(g) for g in geometries)
    if kind not in COORDINATE_DEPTH:
        return False
    return _valid_coordinates(obj.get("coordinates"), COORDINATE_DEPTH[kind])


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _is_position(value: Any) -> bool:
    return isinstance(value, list) and len(value) >= 2 and all(_is_number(v) for v in value)


def _valid_coordinates(coords: Any, depth: int) -> bool:
    if depth == 0:
        return _is_position(coords)
    return isinstance(coords, list) and all(_valid_coordinates(c, depth - 1) for c in coords)


def _iter_positions(geometry: Optional[Dict[str, Any]]) -> Iterator[Sequence[float]]:
    if not geometry:
        return
    if geometry.get("type") == "GeometryCollection":
        for child in geometry.get("geometries") or []:
            yield from _iter_positions(child)
        return
    yield from _flatten(geometry.get("coordinates"))


def _flatten(coords: Any) -> Iterator[Sequence[float]]:
    # Positions are yielded only when their lon/lat are real numbers
    if not isinstance(coords, (list, tuple)) or not coords:
        return
    if not isinstance(coords[0], (list, tuple)):
        if len(coords) >= 2 and _is_number(coords[0]) and _is_number(coords[1]):
            yield coords[:2]
        return
    for part in coords:
        yield from _flatten(part)


def compute_bounds(feature_collection: Dict[str, Any]) -> Optional[List[List[float]]]:
    """Bounding box of every position, as Leaflet ``[[south, west], [north, east]]``.

    Returns None when the collection holds no coordinates.
    """
    positions = [
        pos
        for feature in feature_collection.get("features", [])
        for pos in _iter_positions(feature.get("geometry"))
    ]
    if not positions:
        return None
    lonlat = np.asarray(positions, dtype=float)
    lonlat = lonlat[np.isfinite(lonlat).all(axis=1)]
    if not len(lonlat):
        return None
    west, south = lonlat.min(axis=0)
    east, north = lonlat.max(axis=0)
    return [[float(south), float(west)], [float(north), float(east)]]


def popup_html(properties: Optional[Dict[str, Any]]) -> str:
    """``<b>key</b>: value`` lines joined with ``<br>``, HTML-escaped."""
    if not properties:
        return ""
    return "<br>".join(
        f"<b>{html.escape(str(key))}</b>: {html.escape(_format_value(value))}"
        for key, value in properties.items()
    )


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list, bool)) or value is None:
        return json.dumps(value, ensure_ascii=False)
    return str(value)
