"""CLI callback functions."""

import typer


def validate_engine_kind(value: str | None) -> str | None:
    """Validate the --engine option."""
    from livetex.config.constants import ENGINE_KINDS

    if value is not None and value not in ENGINE_KINDS:
        raise typer.BadParameter(f"Invalid engine '{value}'. Options: {', '.join(ENGINE_KINDS)}")

    return value


def validate_positive_interval(value: float | None) -> float | None:
    """Validate the --interval option."""
    if value is not None and value <= 0:
        raise typer.BadParameter("Interval must be greater than zero")
    return value
