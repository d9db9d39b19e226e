"""Output sink interface."""

from abc import ABC, abstractmethod


class OutputSink(ABC):
    """A single surface showing the current preview.

    Each successful render replaces the whole content; nothing is patched
    incrementally. Failed renders never reach the sink, so the last good
    preview stays visible.
    """

    @abstractmethod
    async def replace(self, document: str) -> None:
        """Replace the sink content with ``document``."""
        pass
