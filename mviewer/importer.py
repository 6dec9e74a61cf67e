"""
importer.py

GeoJSON import section of the side panel. Two ingestion paths end in the same
render step:

- local file: a FileInput restricted to .geojson/.json plus a load button,
  disabled until a file is selected;
- remote URL: a TextInput plus a load button that GETs the URL with httpx.

The previous overlay is replaced only once the new document has parsed, so a
bad import never blanks the map. Imports are not cancelled: if two URL
imports overlap, whichever finishes last wins.
"""

import logging
from typing import Any, Dict, Optional

import httpx
import panel as pn
import param

from .banner import MessageBanner
from .errors import GeoJSONImportError
from .geojson import compute_bounds, parse_geojson
from .widget import MapViewer

logger = logging.getLogger(__name__)

FILE_ACCEPT = ".geojson,.json"
URL_LABEL = "Load from URL"
BUSY_LABEL = "Loading…"
SUCCESS_MESSAGE = "GeoJSON loaded successfully!"
EMPTY_MESSAGE = "The GeoJSON document contains no coordinates."


class GeoJSONImporter(param.Parameterized):
    """Loads user GeoJSON from a file or a URL into the viewer's overlay slot.

    Args:
        viewer: Map whose overlay slot receives the data.
        banner: Where success and error messages go.
        timeout: Timeout in seconds for URL imports.
        transport: Optional httpx transport, used by tests to fake responses.
    """

    viewer = param.ClassSelector(class_=MapViewer, constant=True)
    banner = param.ClassSelector(class_=MessageBanner, constant=True)
    timeout = param.Number(default=15.0, bounds=(0, None))
    title = param.String(default="GeoJSON import")

    def __init__(
        self,
        viewer: MapViewer,
        banner: MessageBanner,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **params: Any,
    ) -> None:
        super().__init__(viewer=viewer, banner=banner, **params)
        self._transport = transport

        self.file_input = pn.widgets.FileInput(accept=FILE_ACCEPT, multiple=False)
        self.file_button = pn.widgets.Button(name="Load file", button_type="primary", disabled=True)
        self.url_input = pn.widgets.TextInput(name="GeoJSON URL", placeholder="https://example.org/data.geojson")
        self.url_button = pn.widgets.Button(name=URL_LABEL, button_type="primary")

        self.file_input.param.watch(self._on_file_selected, "value")
        self.file_button.on_click(self.load_file)
        self.url_button.on_click(self.load_url)

    def _on_file_selected(self, event: param.parameterized.Event) -> None:
        self.file_button.disabled = event.new is None

    # --- Ingestion paths ---------------------------------------------------
    def load_file(self, event: Any = None) -> Optional[Dict[str, Any]]:
        """Parse the selected file and render it.

        Returns the new overlay entry, or None when the import failed.
        """
        raw = self.file_input.value
        if raw is None:
            self.banner.error("Select a GeoJSON file first.")
            return None
        name = self.file_input.filename or "GeoJSON"
        try:
            return self._render(parse_geojson(raw), name)
        except GeoJSONImportError as exc:
            logger.warning("Rejected file %s: %s", name, exc)
            self.banner.error(str(exc))
            return None

    async def load_url(self, event: Any = None) -> Optional[Dict[str, Any]]:
        """Fetch the URL typed in the panel, parse the body and render it.

        The URL button is disabled and shows a busy label while the request
        is in flight, and is restored whatever the outcome.

        Returns the new overlay entry, or None when the import failed.
        """
        url = (self.url_input.value or "").strip()
        if not url:
            self.banner.error("Enter a URL to import.")
            return None

        self.url_button.param.update(disabled=True, name=BUSY_LABEL)
        try:
            raw = await self._fetch(url)
            return self._render(parse_geojson(raw), url)
        except GeoJSONImportError as exc:
            logger.warning("Import from %s failed: %s", url, exc)
            self.banner.error(str(exc))
            return None
        finally:
            self.url_button.param.update(disabled=False, name=URL_LABEL)

    async def _fetch(self, url: str) -> bytes:
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
        except httpx.RequestError as exc:
            raise GeoJSONImportError(f"Could not load {url}: {exc}") from exc

        if not response.is_success:
            raise GeoJSONImportError(
                f"Could not load {url}: HTTP {response.status_code} {response.reason_phrase}".rstrip(),
                status_code=response.status_code,
            )
        return response.content

    # --- Render step -------------------------------------------------------
    def _render(self, data: Dict[str, Any], name: str) -> Dict[str, Any]:
        # An overlay without coordinates has no bounds to fit the viewport to
        if compute_bounds(data) is None:
            raise GeoJSONImportError(EMPTY_MESSAGE)
        entry = self.viewer.replace_overlay(data, name=name)
        logger.info("Loaded %d features from %s", len(data["features"]), name)
        self.banner.success(SUCCESS_MESSAGE)
        return entry

    def panel(self) -> pn.Column:
        """Side panel section with both ingestion paths."""
        return pn.Column(
            pn.pane.Markdown(f"#### {self.title}"),
            pn.pane.Markdown("Import a GeoJSON file:"),
            self.file_input,
            self.file_button,
            pn.pane.Markdown("Or load it from a URL:"),
            self.url_input,
            self.url_button,
            css_classes=["mviewer-geojson"],
            sizing_mode="stretch_width",
        )
