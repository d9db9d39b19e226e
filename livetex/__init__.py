"""livetex - Live typeset preview for LaTeX-flavoured markup."""

__version__ = "0.1.0"
