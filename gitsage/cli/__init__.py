"""CLI entry point for gitsage.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

from typing import Optional

import typer

from gitsage import __version__
from gitsage.cli.config import config_app
from gitsage.cli.split import split_command

# Main application
app = typer.Typer(
    name="gitsage",
    help="gitsage: split your changes into atomic commits with an LLM",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gitsage {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show the gitsage version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """gitsage: split your changes into atomic commits with an LLM."""


# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("split")(split_command)


__all__ = [
    "app",
    "config_app",
    "split_command",
]
