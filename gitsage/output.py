"""Console output helpers.

Progress goes to stdout; warnings and errors go to stderr.
"""

import typer


def info(message: str = "") -> None:
    """Print a progress line."""
    typer.echo(message)


def warn(message: str) -> None:
    """Print a warning for a recoverable condition."""
    typer.echo(f"Warning: {message}", err=True)


def error(message: str) -> None:
    """Print an error for a fatal condition."""
    typer.echo(f"Error: {message}", err=True)


def detail(message: str) -> None:
    """Print a diagnostic line to stderr without a prefix."""
    typer.echo(message, err=True)
