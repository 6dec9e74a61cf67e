"""Tests for the MapViewer component (map bootstrap and overlay slot)."""

import panel as pn
import pytest

from mviewer.errors import GeoJSONImportError
from mviewer.geojson import FIT_PADDING, OVERLAY_STYLE
from mviewer.widget import CLOSED_OFFSET, MapViewer

from .conftest import feature_collection, point_feature


class TestBootstrap:
    def test_first_basemap_active(self, viewer):
        assert viewer.active_basemap == "OSM"
        assert viewer.basemap_names == ["OSM", "Topo"]

    def test_viewport_from_config(self, viewer):
        assert viewer.center == (48.8566, 2.3522)
        assert viewer.zoom == 12
        assert viewer.max_zoom == 18

    def test_controls_from_tools(self, viewer):
        assert [c["kind"] for c in viewer.controls] == ["zoom", "locate", "minimap", "scale"]

    def test_basemap_selection_is_exclusive(self, viewer):
        viewer.active_basemap = "Topo"
        assert viewer.active_basemap == "Topo"

        with pytest.raises(ValueError):
            viewer.active_basemap = "Satellite"
        assert viewer.active_basemap == "Topo"

    def test_initial_panel_state(self, viewer):
        assert viewer.panel_open is False
        assert viewer.left_offset == CLOSED_OFFSET

    def test_hosts_widgets_as_children(self, viewer):
        toggle = pn.widgets.Button(name="Tools")
        body = pn.Column(pn.widgets.Toggle(value=False))

        viewer.param.update(side_panel=body, panel_toggle=toggle)

        assert viewer.panel_toggle is toggle
        assert viewer.side_panel is body

    def test_viewers_do_not_share_basemaps(self, viewer):
        other = MapViewer(basemaps=[{"name": "Only", "url": "https://x/{z}/{x}/{y}.png"}])
        assert other.active_basemap == "Only"
        assert viewer.param.active_basemap.objects == ["OSM", "Topo"]


class TestOverlaySlot:
    def test_empty_initially(self, viewer):
        assert viewer.overlay is None
        assert viewer.overlay_bounds is None
        assert viewer.overlay_features == []

    def test_replace(self, viewer, sample_geojson):
        entry = viewer.replace_overlay(sample_geojson, name="cities")

        assert viewer.overlay is entry
        assert entry["name"] == "cities"
        assert entry["style"] == OVERLAY_STYLE
        assert entry["padding"] == list(FIT_PADDING)
        assert viewer.overlay_bounds == [[48.0, 2.0], [49.5, 3.0]]
        assert viewer.overlay_features[0]["_popup"] == "<b>name</b>: Paris<br><b>population</b>: 2148000"

    def test_input_not_mutated(self, viewer, sample_geojson):
        viewer.replace_overlay(sample_geojson)
        assert "_popup" not in sample_geojson["features"][0]

    def test_sequence_keeps_single_overlay(self, viewer):
        for i in range(5):
            viewer.replace_overlay(feature_collection(point_feature(i, i, idx=i)))
            assert isinstance(viewer.overlay, dict)

        assert len(viewer.overlay_features) == 1
        assert viewer.overlay_features[0]["properties"] == {"idx": 4}

    def test_invalid_document_keeps_previous(self, viewer, sample_geojson):
        previous = viewer.replace_overlay(sample_geojson)

        with pytest.raises(GeoJSONImportError):
            viewer.replace_overlay({"type": "Nope"})
        assert viewer.overlay is previous

    def test_clear(self, viewer, sample_geojson):
        viewer.replace_overlay(sample_geojson)
        viewer.clear_overlay()
        assert viewer.overlay is None
