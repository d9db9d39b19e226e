"""Typesetting engines."""

from livetex.config.settings import EngineConfig
from livetex.engines.base import TypesettingEngine
from livetex.engines.command import CommandEngine
from livetex.engines.passthrough import PassthroughEngine
from livetex.exceptions import ConfigurationError


def create_engine(config: EngineConfig) -> TypesettingEngine:
    """Build the engine selected by ``config.kind``."""
    if config.kind == "command":
        if not config.command:
            raise ConfigurationError("engine.command must be set when engine.kind is 'command'")
        return CommandEngine(config.command)
    return PassthroughEngine()


__all__ = [
    "CommandEngine",
    "PassthroughEngine",
    "TypesettingEngine",
    "create_engine",
]
