"""Engine that leaves typesetting to the viewer."""

from livetex.engines.base import TypesettingEngine


class PassthroughEngine(TypesettingEngine):
    """Return the markup unchanged.

    The canonical ``\\(...\\)`` and ``\\[...\\]`` escapes are typeset by the
    MathJax script embedded in the preview page when it is displayed.
    """

    name = "passthrough"

    async def typeset(self, markup: str) -> str:
        return markup
