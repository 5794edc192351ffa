# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors

"""CLI command running the interactive setup workflow."""

from __future__ import annotations

from pathlib import Path

import typer

from ...logging import CLILogger, build_cli_logger
from ...setup import RichPrompter, SetupContext, run_setup


def build_context(logger: CLILogger) -> SetupContext:
    """Return the setup context for the current working directory."""

    return SetupContext(cwd=Path.cwd(), prompter=RichPrompter(), logger=logger)


def setup_command() -> None:
    """Configure pre-commit hooks for this repository interactively.

    Raises:
        typer.Exit: Always raised with the workflow's exit status.
    """

    logger = build_cli_logger()
    result = run_setup(build_context(logger))
    raise typer.Exit(code=result.exit_code)


def register(app: typer.Typer) -> None:
    """Register the ``setup`` command on ``app``."""

    app.command(name="setup", help="Write .pre-commit-config.yaml and install the git hook.")(setup_command)


__all__ = ["build_context", "register", "setup_command"]
