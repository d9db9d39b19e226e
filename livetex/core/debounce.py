"""Debounced input coalescing.

Each new event cancels the outstanding timer and starts a fresh one, so a
burst of edits produces a single settled callback carrying the last content,
``delay`` seconds after the burst ends.
"""

import asyncio
from collections.abc import Callable

from livetex.utils.logging import get_logger

log = get_logger(__name__)


class Debouncer:
    """Coalesce rapid content snapshots into one settled callback.

    Runs on the current asyncio event loop; ``push`` must be called from a
    coroutine or loop callback.

    Usage:
        debouncer = Debouncer(0.3, on_settled)
        debouncer.push("a")
        debouncer.push("ab")  # only "ab" reaches on_settled, 300 ms later
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[str], None],
        suppress_duplicates: bool = True,
        name: str = "debounce",
    ) -> None:
        """Initialize the debouncer.

        Args:
            delay: Quiet period in seconds
            callback: Called with the settled content
            suppress_duplicates: Ignore content equal to the last accepted one
            name: Label used in log messages
        """
        self.delay = delay
        self.suppress_duplicates = suppress_duplicates
        self.name = name
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._pending: str | None = None
        self._last_accepted: str | None = None
        self.emitted_count = 0
        self.suppressed_count = 0

    @property
    def pending(self) -> bool:
        """True while a settled callback is scheduled."""
        return self._handle is not None

    def push(self, content: str) -> bool:
        """Record a new snapshot and restart the quiet period.

        Returns:
            False if the snapshot was suppressed as unchanged
        """
        if self.suppress_duplicates and content == self._last_accepted:
            self.suppressed_count += 1
            return False

        self._last_accepted = content
        self._pending = content
        if self._handle is not None:
            self._handle.cancel()
        self._handle = asyncio.get_running_loop().call_later(self.delay, self._fire)
        return True

    def prime(self, content: str) -> None:
        """Treat ``content`` as already seen without scheduling anything."""
        self._last_accepted = content

    def flush(self) -> bool:
        """Fire the scheduled callback now instead of waiting.

        Returns:
            True if there was something to emit
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def cancel(self) -> None:
        """Drop the scheduled callback without firing it."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending = None

    def _fire(self) -> None:
        self._handle = None
        content, self._pending = self._pending, None
        if content is None:
            return

        self.emitted_count += 1
        log.debug("Input settled", debouncer=self.name, length=len(content))
        try:
            self._callback(content)
        except Exception as e:
            # Runs from the event loop; there is no caller to hand this to
            log.exception("Debounce callback failed", debouncer=self.name, error=str(e))
