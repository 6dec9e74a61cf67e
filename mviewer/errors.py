"""
errors.py

Exception hierarchy for the viewer. Library code raises these; the UI edge
(importer callbacks, application assembly) turns them into banner messages.
"""

from typing import Optional


class ViewerError(Exception):
    """Base class for every error raised by mviewer."""


class ConfigError(ViewerError):
    """The map configuration could not be fetched, parsed or understood."""


class GeoJSONImportError(ViewerError):
    """A user supplied GeoJSON document could not be loaded.

    Args:
        message: Text shown to the user.
        status_code: HTTP status of a failed remote import, if any.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PanelWiringError(ViewerError):
    """Required side panel elements are missing."""
