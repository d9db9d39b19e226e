"""Delimiter transformation for the preview pipeline.

Turns raw editor text into the markup handed to the typesetting engine:

1. ``&``, ``<`` and ``>`` are HTML-escaped.
2. Inline math spans (``$...$`` by default) become ``\\(...\\)``.
3. Display math spans (``$$...$$`` by default) become ``\\[...\\]``.
4. Blank lines separate paragraphs; single newlines become ``<br>``; every
   paragraph is wrapped in ``<p>``.

This is a shallow substitution, not a parser. Unbalanced delimiters are left
as literal text.
"""

import html
import re
from dataclasses import dataclass

from livetex.config.constants import (
    DEFAULT_DISPLAY_DELIMITERS,
    DEFAULT_INLINE_DELIMITERS,
    DISPLAY_MATH_CLOSE,
    DISPLAY_MATH_OPEN,
    INLINE_MATH_CLOSE,
    INLINE_MATH_OPEN,
)
from livetex.config.settings import DelimiterConfig

_PARAGRAPH_BREAK = re.compile(r"\n{2,}")


@dataclass(frozen=True)
class MathDelimiters:
    """Open/close marker pairs for inline and display math.

    Frozen: a transformer captures its delimiters once, so reconfiguring the
    application never changes how content already in flight is processed.
    """

    inline: tuple[str, str] = DEFAULT_INLINE_DELIMITERS
    display: tuple[str, str] = DEFAULT_DISPLAY_DELIMITERS

    @classmethod
    def from_config(cls, config: DelimiterConfig) -> "MathDelimiters":
        return cls(inline=tuple(config.inline), display=tuple(config.display))


def _span_pattern(open_: str, close: str, group: str) -> str | None:
    """Regex for one delimited span, or None when the pair is unusable.

    Delimiters are matched against escaped text, so they are escaped the same
    way. The body is non-empty, never contains the close marker and never
    crosses a blank line.
    """
    if not open_ or not close:
        return None
    o = re.escape(html.escape(open_, quote=False))
    c = re.escape(html.escape(close, quote=False))
    return rf"{o}(?P<{group}>(?:(?!{c})[^\n]|\n(?!\n))+?){c}"


class DelimiterTransformer:
    """Rewrite raw editor text into canonical, display-ready markup."""

    def __init__(self, delimiters: MathDelimiters | None = None) -> None:
        self.delimiters = delimiters or MathDelimiters()
        self._scanner = self._compile(self.delimiters)

    @staticmethod
    def _compile(delimiters: MathDelimiters) -> re.Pattern[str]:
        candidates = [
            (delimiters.display[0], _span_pattern(*delimiters.display, "display"), 0),
            (delimiters.inline[0], _span_pattern(*delimiters.inline, "inline"), 1),
        ]
        # Longest opening marker first, so "$$a$$" is one display span rather
        # than two inline spans around nothing.
        candidates.sort(key=lambda c: (-len(c[0]), c[2]))
        alternatives = [pattern for _, pattern, _ in candidates if pattern is not None]
        alternatives.append(r"(?P<newline>\n)")
        return re.compile("|".join(alternatives))

    def transform(self, raw: str) -> str:
        """Transform raw text into markup for the typesetting engine.

        Args:
            raw: Full editor content

        Returns:
            Paragraph-wrapped markup with canonical math escapes
        """
        text = raw.replace("\r\n", "\n").replace("\r", "\n")
        text = html.escape(text, quote=False)

        return "\n".join(
            f"<p>{self._scanner.sub(self._rewrite, paragraph)}</p>"
            for paragraph in _PARAGRAPH_BREAK.split(text)
        )

    @staticmethod
    def _rewrite(match: re.Match[str]) -> str:
        groups = match.groupdict()
        if groups.get("display") is not None:
            return f"{DISPLAY_MATH_OPEN}{groups['display']}{DISPLAY_MATH_CLOSE}"
        if groups.get("inline") is not None:
            return f"{INLINE_MATH_OPEN}{groups['inline']}{INLINE_MATH_CLOSE}"
        return "<br>"


def transform(raw: str, delimiters: MathDelimiters | None = None) -> str:
    """Transform ``raw`` with the given (or default) delimiters."""
    return DelimiterTransformer(delimiters).transform(raw)
