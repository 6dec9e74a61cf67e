"""
layers.py

Basemap switcher for the side panel. The option list is an ordinary Panel
widget bound to MapViewer.active_basemap, so the panel layout does not depend
on the markup of Leaflet's own layers control.
"""

import logging
from typing import Any

import panel as pn
import param

from .widget import MapViewer

logger = logging.getLogger(__name__)


class LayerSwitcher(param.Parameterized):
    """Exclusive basemap selection kept in sync with a MapViewer."""

    viewer = param.ClassSelector(class_=MapViewer, constant=True)
    title = param.String(default="Basemaps")

    def __init__(self, viewer: MapViewer, **params: Any) -> None:
        super().__init__(viewer=viewer, **params)
        self.options = pn.widgets.RadioBoxGroup(
            name=self.title,
            options=viewer.basemap_names,
            value=viewer.active_basemap,
            inline=False,
        )
        self.options.param.watch(self._on_option, "value")
        viewer.param.watch(self._on_viewer, "active_basemap")

    @property
    def active(self) -> str:
        return self.viewer.active_basemap

    def select(self, name: str) -> None:
        """Make ``name`` the visible basemap.

        Raises:
            ValueError: If ``name`` is not a configured basemap.
        """
        if name not in self.viewer.basemap_names:
            raise ValueError(f"unknown basemap '{name}'")
        self.viewer.active_basemap = name

    def _on_option(self, event: param.parameterized.Event) -> None:
        if event.new is not None and event.new != self.viewer.active_basemap:
            logger.debug("Switching basemap to %s", event.new)
            self.viewer.active_basemap = event.new

    def _on_viewer(self, event: param.parameterized.Event) -> None:
        if self.options.value != event.new:
            self.options.value = event.new

    def panel(self) -> pn.Column:
        """Side panel section: title and the option list."""
        return pn.Column(
            pn.pane.Markdown(f"#### {self.title}"),
            self.options,
            css_classes=["mviewer-layers"],
            sizing_mode="stretch_width",
        )
