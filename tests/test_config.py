"""Tests for configuration loading."""

import json

import httpx
import pytest

from mviewer.config import ViewerConfig, load_config
from mviewer.errors import ConfigError


class TestLoadConfig:
    def test_loads_file(self, config_file):
        config = load_config(config_file)

        assert config.map.center == (48.8566, 2.3522)
        assert config.map.zoom == 12
        assert config.map.max_zoom == 18
        assert [b.name for b in config.basemaps] == ["OSM", "Topo"]
        assert config.default_basemap.name == "OSM"
        assert config.has_tool("geojson_upload")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="could not read"):
            load_config(tmp_path / "nope.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not valid", encoding="utf-8")

        with pytest.raises(ConfigError, match="not valid JSON"):
            load_config(path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_bytes(b"\xff\xfe{\"map\": {}}")

        with pytest.raises(ConfigError, match="not UTF-8"):
            load_config(path)

    def test_remote_config(self, monkeypatch, config_dict):
        def fake_get(url, **kwargs):
            return httpx.Response(200, json=config_dict, request=httpx.Request("GET", url))

        monkeypatch.setattr(httpx, "get", fake_get)
        config = load_config("https://example.org/config.json")

        assert config.default_basemap.name == "OSM"

    def test_remote_config_http_error(self, monkeypatch):
        def fake_get(url, **kwargs):
            return httpx.Response(500, request=httpx.Request("GET", url))

        monkeypatch.setattr(httpx, "get", fake_get)
        with pytest.raises(ConfigError, match="HTTP 500"):
            load_config("https://example.org/config.json")

    def test_remote_config_network_error(self, monkeypatch):
        def fake_get(url, **kwargs):
            raise httpx.ConnectError("connection refused", request=httpx.Request("GET", url))

        monkeypatch.setattr(httpx, "get", fake_get)
        with pytest.raises(ConfigError, match="connection refused"):
            load_config("https://example.org/config.json")


class TestFromDict:
    def test_defaults(self):
        config = ViewerConfig.from_dict(
            {
                "map": {"center": [0, 0], "zoom": 3, "maxZoom": 16},
                "basemaps": [{"name": "A", "url": "https://a/{z}/{x}/{y}.png"}],
            }
        )

        assert config.tools == []
        assert config.basemaps[0].attribution == ""
        assert config.basemaps[0].max_zoom == 16

    def test_configuration_is_frozen(self, config):
        with pytest.raises(TypeError):
            config.tools = []

    @pytest.mark.parametrize(
        "mutate, message",
        [
            (lambda d: d.pop("map"), "'map'"),
            (lambda d: d["map"].update(center=[1]), "center"),
            (lambda d: d["map"].pop("zoom"), "zoom"),
            (lambda d: d.update(basemaps=[]), "basemaps"),
            (lambda d: d["basemaps"][1].update(name="OSM"), "duplicate"),
            (lambda d: d["basemaps"][0].pop("url"), "no url"),
            (lambda d: d.update(tools="locate"), "tools"),
        ],
    )
    def test_invalid_shapes(self, config_dict, mutate, message):
        data = json.loads(json.dumps(config_dict))
        mutate(data)

        with pytest.raises(ConfigError, match=message):
            ViewerConfig.from_dict(data)

    def test_not_an_object(self):
        with pytest.raises(ConfigError):
            ViewerConfig.from_dict([1, 2, 3])
