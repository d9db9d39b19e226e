"""Main CLI application using Typer."""

from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from livetex import __version__
from livetex.cli.commands.config import config_app
from livetex.cli.commands.preview import render, transform, watch

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="livetex",
    help="Live typeset preview for LaTeX-flavoured markup.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()

app.command(name="transform", help="Print the markup produced for a file.")(transform)
app.command(name="render", help="Render a file once into an HTML preview.")(render)
app.command(name="watch", help="Re-render a file's preview whenever it changes.")(watch)
app.add_typer(config_app, name="config")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]livetex[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """livetex - live LaTeX preview.

    Escapes and paragraph-wraps your text, rewrites math delimiters into the
    form MathJax expects, and keeps an HTML preview in sync with the file.
    """
    pass


if __name__ == "__main__":
    app()
