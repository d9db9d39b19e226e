"""Typed, synchronous publish/subscribe bus.

The preview pipeline announces render results here; the rest of an
application (status bars, toasts, loggers) subscribes without the pipeline
knowing about it. Messages form a closed set of dataclasses and handlers are
registered per message type.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from livetex.utils.logging import get_logger

log = get_logger(__name__)


class ErrorCategory(str, Enum):
    """Where a reported error originated."""

    RENDER = "render"


@dataclass(frozen=True)
class ContentChanged:
    """A render finished and the output sink holds new content."""

    success: bool = True


@dataclass(frozen=True)
class ErrorNotification:
    """Something failed; the pipeline itself keeps running."""

    category: ErrorCategory
    message: str
    cause: Exception | None = None


Message = ContentChanged | ErrorNotification

M = TypeVar("M", ContentChanged, ErrorNotification)


class NotificationBus:
    """Dispatch messages to handlers subscribed to their exact type.

    A handler that raises is logged and skipped; the remaining handlers
    still run and the publisher never sees the exception.

    Usage:
        bus = NotificationBus()
        bus.subscribe(ErrorNotification, lambda msg: print(msg.message))
        bus.publish(ErrorNotification(ErrorCategory.RENDER, "Failed"))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = {}

    def subscribe(self, message_type: type[M], handler: Callable[[M], None]) -> None:
        """Register ``handler`` for messages of ``message_type``."""
        self._handlers.setdefault(message_type, []).append(handler)
        log.debug("Handler subscribed", message=message_type.__name__)

    def unsubscribe(self, message_type: type[M], handler: Callable[[M], None]) -> None:
        """Remove ``handler``; unknown handlers are ignored."""
        handlers = self._handlers.get(message_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            log.debug("Handler unsubscribed", message=message_type.__name__)

    def publish(self, message: Message) -> int:
        """Deliver ``message`` to its subscribers.

        Returns:
            Number of handlers that completed without raising
        """
        message_name = type(message).__name__
        log.debug("Publishing message", message=message_name)

        delivered = 0
        # Copy so handlers may unsubscribe themselves while being called
        for handler in list(self._handlers.get(type(message), [])):
            try:
                handler(message)
                delivered += 1
            except Exception as e:
                log.error(
                    "Notification handler failed",
                    message=message_name,
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    error=str(e),
                )
        return delivered

    def subscriber_count(self, message_type: type) -> int:
        """Number of handlers registered for ``message_type``."""
        return len(self._handlers.get(message_type, []))
