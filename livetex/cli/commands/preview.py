"""Preview commands: transform, render and watch."""

import asyncio
import shlex
from pathlib import Path
from typing import Annotated

import anyio
import typer
from rich.console import Console

from livetex.cli.callbacks import validate_engine_kind, validate_positive_interval
from livetex.config import EngineConfig, LivetexSettings, get_settings
from livetex.config.constants import ENGINE_KINDS
from livetex.core.events import ContentChanged, ErrorNotification
from livetex.core.pipeline import PreviewPipeline
from livetex.engines import create_engine
from livetex.engines.base import TypesettingEngine
from livetex.exceptions import LivetexError
from livetex.markup.transformer import DelimiterTransformer, MathDelimiters
from livetex.utils.logging import get_logger, setup_session_logging

console = Console()
log = get_logger(__name__)

InputFile = Annotated[
    Path,
    typer.Argument(
        help="Source file with LaTeX-flavoured markup.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]
OutputOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="HTML preview file (defaults to output.path from config).",
        dir_okay=False,
        resolve_path=True,
    ),
]
EngineOption = Annotated[
    str | None,
    typer.Option(
        "--engine",
        "-e",
        help=f"Typesetting engine. Options: {', '.join(ENGINE_KINDS)}",
        callback=validate_engine_kind,
    ),
]
CommandOption = Annotated[
    str | None,
    typer.Option(
        "--command",
        "-c",
        help='Command for the "command" engine, e.g. "pandoc -f html -t html --mathml".',
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
]


def _build_engine(
    settings: LivetexSettings, engine: str | None, command: str | None
) -> TypesettingEngine:
    config = settings.engine
    if engine is not None or command is not None:
        config = EngineConfig(
            kind=engine or ("command" if command else config.kind),
            command=shlex.split(command) if command else config.command,
        )
    return create_engine(config)


def transform(
    input_file: InputFile,
) -> None:
    """Print the markup the typesetting engine would receive.

    Examples:
        livetex transform notes.tex
    """
    settings = get_settings()
    transformer = DelimiterTransformer(MathDelimiters.from_config(settings.delimiters))
    typer.echo(transformer.transform(input_file.read_text(encoding="utf-8")))


def render(
    input_file: InputFile,
    output: OutputOption = None,
    engine: EngineOption = None,
    command: CommandOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Render a file once into an HTML preview.

    Examples:
        livetex render notes.tex
        livetex render notes.tex -o notes.html
        livetex render notes.tex --command "pandoc -f html -t html --mathml"
    """
    settings = get_settings()
    _, log_path = setup_session_logging(settings.log_dir, prefix="render", verbose=verbose)
    if verbose:
        log.info("Logs will be saved to", log_file=str(log_path))

    try:
        pipeline = PreviewPipeline.from_settings(
            settings,
            engine=_build_engine(settings, engine, command),
            output_path=output,
        )
    except LivetexError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    outcome = asyncio.run(pipeline.render_now(input_file.read_text(encoding="utf-8")))

    if outcome is None or not outcome.success:
        reason = outcome.error if outcome is not None else "nothing was rendered"
        console.print(f"[red]Render failed:[/red] {reason}")
        raise typer.Exit(1)

    target = output or Path(settings.output.path)
    console.print(f"[green]Preview written to:[/green] {target} ({outcome.duration:.2f}s)")


async def watch_file(
    path: Path,
    pipeline: PreviewPipeline,
    interval: float,
    stop: asyncio.Event,
) -> None:
    """Feed ``path`` into ``pipeline`` every time its content changes.

    Runs until ``stop`` is set, then renders whatever is still pending.
    """
    source = anyio.Path(path)
    last: str | None = None

    async with pipeline:
        while not stop.is_set():
            try:
                text = await source.read_text(encoding="utf-8")
            except FileNotFoundError:
                log.warning("Watched file is missing", path=str(path))
            except (OSError, UnicodeDecodeError) as e:
                # Half-written or non-UTF-8 saves; the next poll retries
                log.warning("Could not read watched file", path=str(path), error=str(e))
            else:
                if text != last:
                    last = text
                    pipeline.feed(text)

            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except TimeoutError:
                pass


def watch(
    input_file: InputFile,
    output: OutputOption = None,
    engine: EngineOption = None,
    command: CommandOption = None,
    interval: Annotated[
        float | None,
        typer.Option(
            "--interval",
            "-i",
            help="Polling interval in seconds (defaults to preview.poll_interval).",
            callback=validate_positive_interval,
        ),
    ] = None,
    verbose: VerboseOption = False,
) -> None:
    """Keep an HTML preview in sync with a file until interrupted.

    Examples:
        livetex watch notes.tex
        livetex watch notes.tex -o /tmp/preview.html --interval 0.5
    """
    settings = get_settings()
    _, log_path = setup_session_logging(settings.log_dir, prefix="watch", verbose=verbose)

    try:
        pipeline = PreviewPipeline.from_settings(
            settings,
            engine=_build_engine(settings, engine, command),
            output_path=output,
        )
    except LivetexError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    def on_changed(message: ContentChanged) -> None:
        stats = pipeline.coordinator.stats
        console.print(
            f"[green]Rendered[/green] "
            f"[dim](renders: {stats.succeeded}, skipped edits: {stats.discarded})[/dim]"
        )

    def on_error(message: ErrorNotification) -> None:
        console.print(f"[red]{message.message}:[/red] {message.cause}")

    pipeline.bus.subscribe(ContentChanged, on_changed)
    pipeline.bus.subscribe(ErrorNotification, on_error)

    target = output or Path(settings.output.path)
    console.print(f"[bold blue]Watching[/bold blue] {input_file} -> {target}")
    console.print(f"[dim]Logs: {log_path}. Press Ctrl+C to stop.[/dim]")

    async def run() -> None:
        await watch_file(
            input_file,
            pipeline,
            interval or settings.preview.poll_interval,
            asyncio.Event(),
        )

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped watching.[/yellow]")
