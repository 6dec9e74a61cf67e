"""
settings.py

Process level settings loaded from the environment (prefix ``MVIEWER_``) or an
optional ``.env`` file. These are separate from the map configuration
document, which describes what the map shows.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ViewerSettings(BaseSettings):
    """Settings for serving the viewer."""

    model_config = SettingsConfigDict(
        env_prefix="MVIEWER_",
        env_file=".env",
        extra="ignore",
    )

    config_path: str = Field(default="config.json", description="Path or URL of the map configuration")
    banner_timeout_ms: int = Field(default=5000, gt=0, description="Banner auto-dismiss delay")
    request_timeout: float = Field(default=15.0, gt=0, description="HTTP timeout in seconds")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Root log level")
    port: int = Field(default=5006, description="Port used by `mviewer serve`")
    show: bool = Field(default=False, description="Open a browser tab on serve")


@lru_cache
def get_settings() -> ViewerSettings:
    """Get cached settings instance."""
    return ViewerSettings()
