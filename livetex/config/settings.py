"""Configuration settings using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource

from livetex.config.constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_DISPLAY_DELIMITERS,
    DEFAULT_INLINE_DELIMITERS,
    DEFAULT_INPUT_DEBOUNCE_MS,
    DEFAULT_LOG_DIR,
    DEFAULT_MATH_PACKAGES,
    DEFAULT_MATHJAX_URL,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_PAGE_TITLE,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RENDER_DEBOUNCE_MS,
    DEFAULT_STALL_WARNING_SECONDS,
    USER_CONFIG_FILE,
)


class DelimiterConfig(BaseModel):
    """Math delimiter pairs consumed by the transformer."""

    inline: tuple[str, str] = DEFAULT_INLINE_DELIMITERS
    display: tuple[str, str] = DEFAULT_DISPLAY_DELIMITERS

    @field_validator("inline", "display")
    @classmethod
    def _reject_whitespace(cls, value: tuple[str, str]) -> tuple[str, str]:
        # Whitespace-only delimiters would match between every word
        open_, close = value
        if (open_ and not open_.strip()) or (close and not close.strip()):
            raise ValueError("delimiters must not be whitespace-only")
        return value


class PreviewConfig(BaseModel):
    """Live preview behaviour."""

    live_preview: bool = True
    input_debounce_ms: int = Field(default=DEFAULT_INPUT_DEBOUNCE_MS, ge=0)
    render_debounce_ms: int = Field(default=DEFAULT_RENDER_DEBOUNCE_MS, ge=0)
    stall_warning_seconds: float = Field(default=DEFAULT_STALL_WARNING_SECONDS, gt=0)
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)


class EngineConfig(BaseModel):
    """Typesetting engine configuration."""

    kind: Literal["passthrough", "command"] = "passthrough"
    command: list[str] = Field(default_factory=list)  # argv, markup is fed on stdin


class OutputConfig(BaseModel):
    """Preview page configuration."""

    path: str = DEFAULT_OUTPUT_FILE
    title: str = DEFAULT_PAGE_TITLE
    mathjax_url: str = DEFAULT_MATHJAX_URL
    math_packages: list[str] = Field(default_factory=lambda: list(DEFAULT_MATH_PACKAGES))
    reload_seconds: int = Field(default=0, ge=0)  # Browser auto-reload, 0 = off


class LivetexSettings(BaseSettings):
    """Main configuration class for livetex."""

    model_config = SettingsConfigDict(
        env_prefix="LIVETEX_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings sources to include YAML file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(
                settings_cls,
                # Later files win: the project file overrides the user file
                yaml_file=[USER_CONFIG_FILE, DEFAULT_CONFIG_FILE],
            ),
            file_secret_settings,
        )

    # Sub-configurations
    delimiters: DelimiterConfig = Field(default_factory=DelimiterConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    # Global settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_dir: str = DEFAULT_LOG_DIR


@lru_cache
def get_settings() -> LivetexSettings:
    """Get cached settings instance."""
    return LivetexSettings()


def reload_settings() -> LivetexSettings:
    """Force reload settings (clear cache)."""
    get_settings.cache_clear()
    return get_settings()
