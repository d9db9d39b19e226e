"""Config command for configuration management."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from livetex.config import get_settings
from livetex.config.constants import CONFIG_LOCATIONS, DEFAULT_CONFIG_FILE

config_app = typer.Typer(help="Configuration management.")
console = Console()


@config_app.command("show")
def show() -> None:
    """Show current configuration."""
    settings = get_settings()

    console.print("\n[bold blue]Current Configuration[/bold blue]\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Log Level", settings.log_level)
    table.add_row("Log Directory", settings.log_dir)

    inline_open, inline_close = settings.delimiters.inline
    display_open, display_close = settings.delimiters.display
    table.add_row("Inline Delimiters", f"{inline_open} ... {inline_close}")
    table.add_row("Display Delimiters", f"{display_open} ... {display_close}")

    table.add_row("Live Preview", str(settings.preview.live_preview))
    table.add_row("Input Debounce (ms)", str(settings.preview.input_debounce_ms))
    table.add_row("Render Debounce (ms)", str(settings.preview.render_debounce_ms))
    table.add_row("Stall Warning (s)", str(settings.preview.stall_warning_seconds))

    table.add_row("Engine", settings.engine.kind)
    if settings.engine.command:
        table.add_row("Engine Command", " ".join(settings.engine.command))

    table.add_row("Output File", settings.output.path)
    table.add_row("MathJax Packages", ", ".join(settings.output.math_packages) or "none")

    console.print(table)
    console.print()


# Default configuration template
DEFAULT_CONFIG_TEMPLATE = """# livetex Configuration

log_level: "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
log_dir: ".logs"

delimiters:
  inline: ["$", "$"]
  display: ["$$", "$$"]

preview:
  live_preview: true  # Render while typing
  input_debounce_ms: 300  # Quiet period for raw edits
  render_debounce_ms: 500  # Quiet period before rendering
  stall_warning_seconds: 10  # Report (never cancel) slow engine calls
  poll_interval: 0.2  # Seconds between file checks in watch mode

engine:
  kind: "passthrough"  # passthrough (MathJax in the browser), command
  # command: ["pandoc", "--from", "html", "--to", "html", "--mathml"]

output:
  path: "preview.html"
  title: "LaTeX Preview"
  math_packages: ["ams"]
  reload_seconds: 0  # Browser auto-reload interval, 0 = off
"""


@config_app.command("init")
def init(
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Path to create config file.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing config file.",
        ),
    ] = False,
) -> None:
    """Initialize a configuration file."""
    config_path = path or Path.cwd() / DEFAULT_CONFIG_FILE

    if config_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists at {config_path}")
        console.print("Use --force to overwrite.")
        raise typer.Exit(1)

    config_path.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    console.print(f"[green]Created config file at:[/green] {config_path}")


@config_app.command("locations")
def locations() -> None:
    """Show configuration file search locations."""
    console.print("\n[bold blue]Configuration File Locations[/bold blue]\n")

    for i, loc in enumerate(CONFIG_LOCATIONS, 1):
        exists = "[green]exists[/green]" if loc.exists() else "[dim]not found[/dim]"
        console.print(f"  {i}. {loc} ({exists})")

    console.print()
    console.print("[dim]Environment variables with LIVETEX_ prefix are also supported.[/dim]")
    console.print()
