# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Shared helpers for CLI commands."""

from __future__ import annotations

import typer

from ..errors import WtHooksError
from ..logging import CLILogger


def exit_with_error(exc: WtHooksError, logger: CLILogger) -> typer.Exit:
    """Report ``exc`` on standard error and return the matching ``typer.Exit``.

    Args:
        exc: Failure raised by the command implementation.
        logger: Logger used to print the message and remediation lines.

    Returns:
        typer.Exit: Exit signal carrying ``exc.exit_code``; callers raise it.
    """

    logger.error(str(exc), exc.remediation)
    return typer.Exit(code=exc.exit_code)


__all__ = ["exit_with_error"]
