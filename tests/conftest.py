"""Shared fixtures for mviewer tests."""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

from mviewer.banner import MessageBanner
from mviewer.config import ViewerConfig
from mviewer.widget import MapViewer


class FakeTimer:
    def __init__(self, due: int, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False


class FakeScheduler:
    """Manually advanced clock standing in for Panel periodic callbacks."""

    def __init__(self) -> None:
        self.now = 0
        self.timers: List[FakeTimer] = []

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self.now + delay_ms, callback)
        self.timers.append(timer)
        return timer

    def cancel(self, handle: Any) -> None:
        if handle is not None:
            handle.cancelled = True

    def advance_to(self, t: int) -> None:
        for timer in sorted(self.timers, key=lambda tm: tm.due):
            if timer.due <= t and not timer.cancelled:
                self.now = timer.due
                timer.cancelled = True
                timer.callback()
        self.now = t

    @property
    def pending(self) -> List[FakeTimer]:
        return [t for t in self.timers if not t.cancelled]


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def banner(scheduler):
    return MessageBanner(scheduler=scheduler)


@pytest.fixture
def config_dict() -> Dict[str, Any]:
    return {
        "map": {"center": [48.8566, 2.3522], "zoom": 12, "maxZoom": 18},
        "basemaps": [
            {
                "name": "OSM",
                "url": "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
                "attribution": "&copy; OSM contributors",
                "maxZoom": 19,
            },
            {
                "name": "Topo",
                "url": "https://{s}.tile.opentopomap.org/{z}/{x}/{y}.png",
                "attribution": "&copy; OpenTopoMap contributors",
                "maxZoom": 17,
            },
        ],
        "tools": ["geojson_upload", "locate", "minimap", "scale"],
    }


@pytest.fixture
def config_file(tmp_path: Path, config_dict) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config_dict), encoding="utf-8")
    return path


@pytest.fixture
def config(config_dict) -> ViewerConfig:
    return ViewerConfig.from_dict(config_dict)


@pytest.fixture
def viewer(config) -> MapViewer:
    return MapViewer.from_config(config)


def point_feature(lon: float, lat: float, **properties: Any) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
        "properties": properties,
    }


def feature_collection(*features: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}


@pytest.fixture
def sample_geojson() -> Dict[str, Any]:
    return feature_collection(
        point_feature(2.35, 48.85, name="Paris", population=2148000),
        {
            "type": "Feature",
            "geometry": {
                "type": "Polygon",
                "coordinates": [[[2.0, 48.0], [3.0, 48.0], [3.0, 49.5], [2.0, 49.5], [2.0, 48.0]]],
            },
            "properties": {"name": "Box"},
        },
    )
