"""Live preview pipeline.

Wires the stages together for one editing session::

    feed() ─▶ input Debouncer ─▶ render Debouncer ─▶ DelimiterTransformer
          ─▶ RenderCoordinator ─▶ engine ─▶ sink + NotificationBus

Every collaborator is passed in explicitly; nothing is shared through module
globals, so several independent pipelines can run in one process.
"""

from pathlib import Path

from livetex.config.settings import LivetexSettings
from livetex.core.coordinator import RenderCoordinator, RenderOutcome
from livetex.core.debounce import Debouncer
from livetex.core.events import NotificationBus
from livetex.engines import create_engine
from livetex.engines.base import TypesettingEngine
from livetex.markup.commands import EditResult, apply_command
from livetex.markup.transformer import DelimiterTransformer, MathDelimiters
from livetex.sinks.base import OutputSink
from livetex.sinks.html_file import HtmlFileSink
from livetex.utils.logging import get_logger

log = get_logger(__name__)


class PreviewPipeline:
    """Turn a stream of full-content snapshots into a rendered preview."""

    def __init__(
        self,
        engine: TypesettingEngine,
        sink: OutputSink,
        *,
        delimiters: MathDelimiters | None = None,
        bus: NotificationBus | None = None,
        input_delay: float = 0.3,
        render_delay: float = 0.5,
        live_preview: bool = True,
        stall_warning: float = 10.0,
    ) -> None:
        """Initialize the pipeline.

        Args:
            engine: Typesetting engine
            sink: Output sink replaced on each successful render
            delimiters: Math delimiters, captured for the pipeline's lifetime
            bus: Notification bus; a private one is created if omitted
            input_delay: Quiet period for raw edits, in seconds
            render_delay: Quiet period before transform and render, in seconds
            live_preview: Render while typing; otherwise only on ``refresh``
            stall_warning: Seconds before a running engine call is reported
        """
        self.bus = bus or NotificationBus()
        self.transformer = DelimiterTransformer(delimiters)
        self.coordinator = RenderCoordinator(engine, sink, bus=self.bus, stall_warning=stall_warning)
        self.live_preview = live_preview
        self._latest: str | None = None
        self._input = Debouncer(input_delay, self._on_input_settled, name="input")
        self._render = Debouncer(
            render_delay, self._process, suppress_duplicates=False, name="render"
        )

    @classmethod
    def from_settings(
        cls,
        settings: LivetexSettings,
        engine: TypesettingEngine | None = None,
        sink: OutputSink | None = None,
        bus: NotificationBus | None = None,
        output_path: Path | None = None,
    ) -> "PreviewPipeline":
        """Build a pipeline from settings, creating engine and sink if omitted."""
        preview = settings.preview
        return cls(
            engine=engine or create_engine(settings.engine),
            sink=sink or HtmlFileSink.from_config(settings.output, path=output_path),
            delimiters=MathDelimiters.from_config(settings.delimiters),
            bus=bus,
            input_delay=preview.input_debounce_ms / 1000,
            render_delay=preview.render_debounce_ms / 1000,
            live_preview=preview.live_preview,
            stall_warning=preview.stall_warning_seconds,
        )

    @property
    def content(self) -> str | None:
        """The most recent raw content seen by the pipeline."""
        return self._latest

    def feed(self, content: str) -> None:
        """Accept a new snapshot of the full editor content."""
        self._latest = content
        if self.live_preview:
            self._input.push(content)

    def set_content(self, content: str) -> None:
        """Replace the content wholesale, e.g. after loading a document.

        Skips the raw-edit stage; the content goes straight to the render
        debounce.
        """
        self._latest = content
        self._input.cancel()
        self._input.prime(content)
        self._render.push(content)

    def apply_command(self, start: int, end: int, command: str) -> EditResult:
        """Apply an editor command to the current content and re-render."""
        result = apply_command(
            self._latest or "", start, end, command, self.transformer.delimiters
        )
        if result.changed:
            self._latest = result.text
            # A raw edit still settling would otherwise overwrite the command
            self._input.cancel()
            self._input.prime(result.text)
            if self.live_preview:
                self._render.push(result.text)
        return result

    def refresh(self) -> None:
        """Render the latest content now, bypassing both quiet periods."""
        self._input.cancel()
        self._render.cancel()
        if self._latest is not None:
            self._input.prime(self._latest)
            self._process(self._latest)

    async def flush(self) -> None:
        """Fire any waiting debounce stage and wait for rendering to settle."""
        self._input.flush()
        self._render.flush()
        await self.coordinator.wait_idle()

    async def render_now(self, content: str) -> RenderOutcome | None:
        """Render ``content`` immediately and return the last outcome."""
        outcomes: list[RenderOutcome] = []
        previous = self.coordinator.on_outcome

        def collect(outcome: RenderOutcome) -> None:
            outcomes.append(outcome)
            if previous is not None:
                previous(outcome)

        self.coordinator.on_outcome = collect
        try:
            self._latest = content
            self.refresh()
            await self.coordinator.wait_idle()
        finally:
            self.coordinator.on_outcome = previous
        return outcomes[-1] if outcomes else None

    async def aclose(self) -> None:
        """Render whatever is still waiting, then stop."""
        await self.flush()
        log.debug(
            "Pipeline closed",
            submitted=self.coordinator.stats.submitted,
            discarded=self.coordinator.stats.discarded,
            invocations=self.coordinator.stats.invocations,
        )

    async def __aenter__(self) -> "PreviewPipeline":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _on_input_settled(self, content: str) -> None:
        self._render.push(content)

    def _process(self, content: str) -> None:
        self.coordinator.submit(self.transformer.transform(content))
