"""
banner.py

Single-slot message banner. One message is visible at a time; it hides
itself after a fixed timeout, and a new message replaces the current text and
restarts the timeout.

Timing goes through a scheduler so the banner works both inside a Panel
session (periodic callbacks on the session's event loop) and in tests (a
manually advanced clock).
"""

import logging
from typing import Any, Callable, Optional

import panel as pn
import param

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000


class PanelScheduler:
    """Schedules one-shot callbacks with ``pn.state.add_periodic_callback``."""

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        return pn.state.add_periodic_callback(callback, period=delay_ms, count=1)

    def cancel(self, handle: Any) -> None:
        if handle is not None and handle.running:
            handle.stop()


class MessageBanner(param.Parameterized):
    """Transient message shown above the map.

    Parameters
    - message (String): Text currently shown.
    - level (Selector): ``danger`` for errors, ``success`` for confirmations.
    - visible (Boolean): Whether the banner is shown.
    - timeout_ms (Integer): Auto-dismiss delay.
    """

    message = param.String(default="")
    level = param.Selector(default="danger", objects=["danger", "warning", "success", "info"])
    visible = param.Boolean(default=False)
    timeout_ms = param.Integer(default=DEFAULT_TIMEOUT_MS, bounds=(1, None))

    def __init__(self, scheduler: Optional[Any] = None, **params: Any) -> None:
        super().__init__(**params)
        self._scheduler = scheduler if scheduler is not None else PanelScheduler()
        self._handle: Any = None
        self._alert: Optional[pn.pane.Alert] = None

    def show(self, message: str, level: str = "danger") -> None:
        """Show ``message`` and (re)start the dismiss timer."""
        self._scheduler.cancel(self._handle)
        self.param.update(message=message, level=level, visible=True)
        self._handle = self._scheduler.schedule(self.timeout_ms, self.hide)

    def error(self, message: str) -> None:
        self.show(message, level="danger")

    def success(self, message: str) -> None:
        self.show(message, level="success")

    def hide(self) -> None:
        self._handle = None
        self.visible = False

    def panel(self) -> pn.pane.Alert:
        """Alert pane mirroring the banner state."""
        if self._alert is None:
            self._alert = pn.pane.Alert(
                self.message,
                alert_type=self.level,
                visible=self.visible,
                css_classes=["mviewer-banner"],
                sizing_mode="stretch_width",
            )
            self.param.watch(self._sync_alert, ["message", "level", "visible"])
        return self._alert

    def _sync_alert(self, *events: param.parameterized.Event) -> None:
        self._alert.param.update(
            object=self.message,
            alert_type=self.level,
            visible=self.visible,
        )
