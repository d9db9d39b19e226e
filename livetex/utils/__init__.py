"""Utility module for livetex."""

from livetex.utils.fs import atomic_write
from livetex.utils.logging import get_logger, setup_logging, setup_session_logging

__all__ = [
    "atomic_write",
    "get_logger",
    "setup_logging",
    "setup_session_logging",
]
