"""
Command line entry point.

Usage:
    mviewer serve
    mviewer serve --config ./config.json --port 5007 --show
"""

import functools
import logging
from typing import Optional

import click
import panel as pn

from .app import create_app
from .settings import get_settings

logger = logging.getLogger("mviewer.cli")


@click.group()
@click.option("--log-level", default=None, help="Override MVIEWER_LOG_LEVEL.")
@click.pass_context
def main(ctx: click.Context, log_level: Optional[str]) -> None:
    """mviewer: browser map viewer."""
    settings = get_settings()
    logging.basicConfig(
        level=(log_level or settings.log_level.value).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = settings


@main.command("serve")
@click.option("--config", "config_path", default=None, help="Path or URL of the map configuration.")
@click.option("--port", type=int, default=None, help="Port to serve on.")
@click.option("--show/--no-show", default=None, help="Open a browser tab.")
@click.pass_obj
def serve(settings, config_path: Optional[str], port: Optional[int], show: Optional[bool]) -> None:
    """Serve the viewer with Panel."""
    overrides = {
        key: value
        for key, value in (("config_path", config_path), ("port", port), ("show", show))
        if value is not None
    }
    settings = settings.model_copy(update=overrides)
    logger.info("Serving mviewer on port %d with %s", settings.port, settings.config_path)
    pn.serve(
        {"mviewer": functools.partial(create_app, settings)},
        port=settings.port,
        show=settings.show,
        title="mviewer",
    )
