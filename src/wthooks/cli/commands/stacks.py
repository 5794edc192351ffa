# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors

"""CLI command listing the supported stacks."""

from __future__ import annotations

import typer

from ...logging import build_cli_logger
from ...setup.render import stacks_table
from ...stacks import DEFAULT_STACKS


def stacks_command() -> None:
    """Print the built-in stack table."""

    build_cli_logger().render(stacks_table(DEFAULT_STACKS))


def register(app: typer.Typer) -> None:
    """Register the ``stacks`` command on ``app``."""

    app.command(name="stacks", help="List supported stacks and their hook ids.")(stacks_command)


__all__ = ["register", "stacks_command"]
