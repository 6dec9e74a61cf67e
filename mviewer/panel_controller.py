"""
panel_controller.py

Opens and closes the side panel. Besides the panel's own ``open`` class, the
controller keeps the horizontal offset of the map controls docked on the left
edge in step with the panel, so the panel never hides them:

    open   -> 365px (350px panel + 15px margin)
    closed -> 15px
"""

import logging
from typing import Any, Optional

import param

from .errors import PanelWiringError
from .widget import CLOSED_OFFSET, OPEN_OFFSET, MapViewer

logger = logging.getLogger(__name__)

OPEN_CLASS = "open"


class PanelController(param.Parameterized):
    """Side panel state and its effect on left-anchored map controls."""

    is_open = param.Boolean(default=False)
    left_offset = param.String(default=CLOSED_OFFSET, constant=True)
    wired = param.Boolean(default=False, constant=True)

    def __init__(self, **params: Any) -> None:
        super().__init__(**params)
        self._side_panel: Any = None
        self.param.watch(self._apply, "is_open")

    def wire(self, side_panel: Any, toggle_button: Any, close_button: Any) -> bool:
        """Attach the open/close triggers to the panel.

        If any element is missing nothing is wired, the error is logged and
        the panel stays inert for the session.

        Returns:
            True when the panel is interactive.
        """
        if self.wired:
            return True
        missing = [
            label
            for label, obj in (
                ("side panel", side_panel),
                ("toggle button", toggle_button),
                ("close button", close_button),
            )
            if obj is None
        ]
        if missing:
            error = PanelWiringError(f"Panel elements not found ({', '.join(missing)}); the panel will not be interactive.")
            logger.error("%s", error)
            return False

        self._side_panel = side_panel
        toggle_button.on_click(lambda event: self.open())
        close_button.on_click(lambda event: self.close())
        with param.edit_constant(self):
            self.wired = True
        self._apply()
        return True

    def bind_map(self, viewer: Optional[MapViewer]) -> None:
        """Mirror panel state into ``viewer`` so the browser moves its controls."""
        if viewer is None:
            return

        def _sync(*events: param.parameterized.Event) -> None:
            viewer.param.update(panel_open=self.is_open, left_offset=self.left_offset)

        self.param.watch(_sync, ["is_open", "left_offset"])
        _sync()

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def toggle(self) -> None:
        self.is_open = not self.is_open

    def _apply(self, *events: param.parameterized.Event) -> None:
        with param.edit_constant(self):
            self.left_offset = OPEN_OFFSET if self.is_open else CLOSED_OFFSET
        if self._side_panel is None:
            return
        classes = [c for c in self._side_panel.css_classes if c != OPEN_CLASS]
        if self.is_open:
            classes.append(OPEN_CLASS)
        self._side_panel.css_classes = classes
