"""Markup processing: delimiter transformation and editor commands."""

from livetex.markup.commands import EditResult, apply_command
from livetex.markup.transformer import DelimiterTransformer, MathDelimiters, transform

__all__ = [
    "DelimiterTransformer",
    "EditResult",
    "MathDelimiters",
    "apply_command",
    "transform",
]
