# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors

"""CLI command executing one stack's commit-time checks."""

from __future__ import annotations

from typing import Annotated

import typer

from ...errors import WtHooksError
from ...hooks import run_stack
from ...logging import build_cli_logger
from ..shared import exit_with_error


def run_command(
    stack: Annotated[str, typer.Argument(help="Stack key, e.g. python, js, ror. See 'wthooks stacks'.")],
) -> None:
    """Run the checks of ``stack`` against the staged changes.

    Args:
        stack: Key of the stack whose checks should run.

    Raises:
        typer.Exit: Always raised; status 0 only when every gating check passed.
    """

    try:
        report = run_stack(stack)
    except WtHooksError as exc:
        raise exit_with_error(exc, build_cli_logger()) from exc
    raise typer.Exit(code=report.exit_code)


def register(app: typer.Typer) -> None:
    """Register the ``run`` command on ``app``."""

    app.command(name="run", help="Run one stack's pre-commit checks on the staged files.")(run_command)


__all__ = ["register", "run_command"]
