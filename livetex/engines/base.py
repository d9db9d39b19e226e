"""Typesetting engine interface."""

from abc import ABC, abstractmethod


class TypesettingEngine(ABC):
    """Abstract base class for typesetting engines.

    Engines are assumed non-reentrant: callers must not invoke ``typeset``
    again before the previous call has completed. ``RenderCoordinator``
    enforces this.
    """

    name: str = "base"

    @abstractmethod
    async def typeset(self, markup: str) -> str:
        """Typeset canonical markup.

        Args:
            markup: Output of the delimiter transformer

        Returns:
            The typeset document body

        Raises:
            RenderError: If typesetting fails
        """
        pass
