"""Custom exceptions for livetex."""


class LivetexError(Exception):
    """Base exception class for livetex."""

    pass


class RenderError(LivetexError):
    """Error raised by a typesetting engine or output sink."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class EngineNotFoundError(RenderError):
    """The external typesetting executable could not be located."""

    def __init__(self, executable: str) -> None:
        super().__init__(f"Typesetting engine not found in PATH: {executable}")
        self.executable = executable


class StateError(LivetexError):
    """Render coordinator state machine error."""

    pass


class ConfigurationError(LivetexError):
    """Configuration error."""

    pass
