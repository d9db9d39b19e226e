"""Configuration module for livetex."""

from livetex.config.settings import (
    DelimiterConfig,
    EngineConfig,
    LivetexSettings,
    OutputConfig,
    PreviewConfig,
    get_settings,
    reload_settings,
)

__all__ = [
    "DelimiterConfig",
    "EngineConfig",
    "LivetexSettings",
    "OutputConfig",
    "PreviewConfig",
    "get_settings",
    "reload_settings",
]
