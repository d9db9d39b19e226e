"""Render queue coordination for a non-reentrant typesetting engine.

The engine call is asynchronous, can outlast the gap between two edits and
must never run twice at once. ``RenderCoordinator`` serialises it with a
latest-wins policy: at most one submission waits while the engine is busy,
and a newer submission overwrites it. The visible preview therefore always
converges to the last submitted content, while intermediate contents may be
skipped.

States::

    IDLE ──submit──▶ PENDING ──drain──▶ RUNNING ──done──▶ IDLE
                       ▲                   │
                       │                submit
                       │                   ▼
                       └──────done──── RUNNING_WITH_PENDING ◀─┐
                                           └────submit────────┘
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from livetex.config.constants import DEFAULT_STALL_WARNING_SECONDS
from livetex.core.events import ContentChanged, ErrorCategory, ErrorNotification, NotificationBus
from livetex.engines.base import TypesettingEngine
from livetex.exceptions import StateError
from livetex.sinks.base import OutputSink
from livetex.utils.logging import get_logger

log = get_logger(__name__)

RENDER_FAILED_MESSAGE = "Failed to render LaTeX content"


class RenderState(str, Enum):
    """Coordinator states."""

    IDLE = "idle"
    PENDING = "pending"
    RUNNING = "running"
    RUNNING_WITH_PENDING = "running_with_pending"


_VALID_TRANSITIONS: dict[RenderState, set[RenderState]] = {
    RenderState.IDLE: {RenderState.PENDING},
    RenderState.PENDING: {RenderState.PENDING, RenderState.RUNNING},
    RenderState.RUNNING: {RenderState.IDLE, RenderState.RUNNING_WITH_PENDING},
    RenderState.RUNNING_WITH_PENDING: {RenderState.RUNNING_WITH_PENDING, RenderState.PENDING},
}


@dataclass(frozen=True)
class RenderOutcome:
    """Result of one engine invocation.

    Attributes:
        success: Whether typesetting and the sink update both succeeded
        content: The processed content that was typeset
        error: The exception raised, if any
        duration: Wall time of the invocation in seconds
    """

    success: bool
    content: str
    error: Exception | None = None
    duration: float = 0.0


@dataclass
class RenderStats:
    """Counters for a coordinator instance.

    Attributes:
        submitted: Calls to ``submit``
        discarded: Submissions overwritten before reaching the engine
        invocations: Engine calls started
        succeeded: Engine calls that updated the sink
        failed: Engine calls that raised
        stalled: Engine calls that exceeded the stall warning threshold
        last_duration: Duration of the most recent completed call
    """

    submitted: int = 0
    discarded: int = 0
    invocations: int = 0
    succeeded: int = 0
    failed: int = 0
    stalled: int = 0
    last_duration: float | None = None

    @property
    def completed(self) -> int:
        return self.succeeded + self.failed


class RenderCoordinator:
    """Serialise typesetting calls, keeping only the newest waiting content.

    All methods must be called from the event loop thread. A host that
    submits from other threads has to hop onto the loop first
    (``loop.call_soon_threadsafe(coordinator.submit, content)``).

    Usage:
        coordinator = RenderCoordinator(PassthroughEngine(), MemorySink(), bus)
        coordinator.submit("<p>A</p>")
        coordinator.submit("<p>B</p>")
        await coordinator.wait_idle()
    """

    def __init__(
        self,
        engine: TypesettingEngine,
        sink: OutputSink,
        bus: NotificationBus | None = None,
        stall_warning: float = DEFAULT_STALL_WARNING_SECONDS,
        on_outcome: Callable[[RenderOutcome], None] | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            engine: Non-reentrant typesetting engine
            sink: Surface replaced on every successful render
            bus: Optional bus receiving ContentChanged / ErrorNotification
            stall_warning: Seconds after which a running call is reported
            on_outcome: Optional callback receiving every RenderOutcome
        """
        self.engine = engine
        self.sink = sink
        self.bus = bus
        self.stall_warning = stall_warning
        self.on_outcome = on_outcome

        self._state = RenderState.IDLE
        self._pending: str | None = None
        self._task: asyncio.Task[None] | None = None
        self.stats = RenderStats()

    @property
    def state(self) -> RenderState:
        return self._state

    @property
    def pending(self) -> str | None:
        """Content waiting for the engine, if any."""
        return self._pending

    @property
    def is_processing(self) -> bool:
        return self._state in (RenderState.RUNNING, RenderState.RUNNING_WITH_PENDING)

    def submit(self, content: str) -> None:
        """Queue ``content`` for rendering, superseding any waiting content.

        The engine is not called synchronously: draining starts on the next
        loop iteration, so several submissions made in one burst collapse
        into a single render of the last one.

        Never raises on engine failure; results are reported through
        ``RenderOutcome`` and the bus.
        """
        # Raises before any state changes when called outside the event loop
        loop = asyncio.get_running_loop()

        self.stats.submitted += 1
        if self._pending is not None:
            self.stats.discarded += 1
            log.debug("Discarding superseded content", state=self._state.value)
        self._pending = content

        if self._state is RenderState.IDLE:
            self._transition(RenderState.PENDING)
            self._task = loop.create_task(self._drain())
        elif self._state is RenderState.PENDING:
            self._transition(RenderState.PENDING)
        else:
            self._transition(RenderState.RUNNING_WITH_PENDING)

    async def wait_idle(self) -> None:
        """Wait until no content is pending and the engine is not running."""
        while self._state is not RenderState.IDLE:
            task = self._task
            if task is None:
                raise StateError(f"Coordinator in {self._state.value} without a render task")
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                # A cancelled drain task recovers on its own; only our own
                # cancellation propagates
                if not task.cancelled():
                    raise

    def _transition(self, new_state: RenderState) -> None:
        if new_state not in _VALID_TRANSITIONS[self._state]:
            raise StateError(f"Invalid render transition {self._state.value} -> {new_state.value}")
        if new_state is not self._state:
            log.debug("Render state", from_state=self._state.value, to_state=new_state.value)
        self._state = new_state

    async def _drain(self) -> None:
        """Render pending content until nothing newer arrived meanwhile."""
        try:
            while self._state is RenderState.PENDING:
                content, self._pending = self._pending, None
                if content is None:
                    raise StateError("Drain requested with nothing pending")
                self._transition(RenderState.RUNNING)
                self.stats.invocations += 1

                self._report(await self._invoke(content))

                if self._state is RenderState.RUNNING:
                    self._transition(RenderState.IDLE)
                else:
                    self._transition(RenderState.PENDING)
        finally:
            self._task = None
            if self._state is not RenderState.IDLE:
                self._recover()

    def _recover(self) -> None:
        """Restore a drainable state after the drain task ended abnormally.

        Happens when the engine call raises a BaseException such as
        ``CancelledError``; the exception itself keeps propagating.
        """
        if self.is_processing:
            self.stats.failed += 1
        log.warning(
            "Render interrupted",
            engine=self.engine.name,
            state=self._state.value,
            waiting=self._pending is not None,
        )
        # Forced transitions: the interrupted call never resolved
        if self._pending is None:
            self._state = RenderState.IDLE
            return
        self._state = RenderState.PENDING
        self._task = asyncio.get_running_loop().create_task(self._drain())

    async def _invoke(self, content: str) -> RenderOutcome:
        loop = asyncio.get_running_loop()
        started = time.perf_counter()
        stall_handle = loop.call_later(self.stall_warning, self._report_stall, started)

        try:
            document = await self.engine.typeset(content)
            await self.sink.replace(document)
        except Exception as e:
            return RenderOutcome(
                success=False,
                content=content,
                error=e,
                duration=time.perf_counter() - started,
            )
        finally:
            stall_handle.cancel()

        return RenderOutcome(
            success=True,
            content=content,
            duration=time.perf_counter() - started,
        )

    def _report_stall(self, started: float) -> None:
        # No timeout exists: a hung engine blocks every later render
        self.stats.stalled += 1
        log.warning(
            "Typesetting engine call is taking unusually long",
            engine=self.engine.name,
            elapsed=round(time.perf_counter() - started, 2),
            waiting=self._pending is not None,
        )

    def _report(self, outcome: RenderOutcome) -> None:
        self.stats.last_duration = outcome.duration
        if outcome.success:
            self.stats.succeeded += 1
            log.info(
                "Render complete",
                engine=self.engine.name,
                duration=round(outcome.duration, 3),
                superseded=self._pending is not None,
            )
        else:
            self.stats.failed += 1
            log.warning(
                "Render failed",
                engine=self.engine.name,
                error=str(outcome.error),
                duration=round(outcome.duration, 3),
            )

        if self.on_outcome is not None:
            try:
                self.on_outcome(outcome)
            except Exception as e:
                log.error("Render outcome callback failed", error=str(e))

        if self.bus is not None:
            if outcome.success:
                self.bus.publish(ContentChanged(success=True))
            else:
                self.bus.publish(
                    ErrorNotification(
                        category=ErrorCategory.RENDER,
                        message=RENDER_FAILED_MESSAGE,
                        cause=outcome.error,
                    )
                )
