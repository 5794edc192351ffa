# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""CLI application entry point wiring commands."""

from __future__ import annotations

from typing import Annotated

import typer

from .. import __version__
from .commands import register_commands

app = typer.Typer(
    name="wthooks",
    help="Pre-commit setup and per-stack commit checks.",
    no_args_is_help=True,
    add_completion=False,
)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"wthooks {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_show_version, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Pre-commit setup and per-stack commit checks."""


register_commands(app)

__all__ = ["app", "main"]
