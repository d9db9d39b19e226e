"""Core rendering pipeline for livetex."""

from livetex.core.coordinator import RenderCoordinator, RenderOutcome, RenderState, RenderStats
from livetex.core.debounce import Debouncer
from livetex.core.events import (
    ContentChanged,
    ErrorCategory,
    ErrorNotification,
    NotificationBus,
)
from livetex.core.pipeline import PreviewPipeline

__all__ = [
    "ContentChanged",
    "Debouncer",
    "ErrorCategory",
    "ErrorNotification",
    "NotificationBus",
    "PreviewPipeline",
    "RenderCoordinator",
    "RenderOutcome",
    "RenderState",
    "RenderStats",
]
