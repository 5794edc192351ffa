# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors

"""CLI command registry."""

from __future__ import annotations

import typer

from . import run, setup, stacks

__all__ = ["register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register the built-in commands on ``app``.

    Args:
        app: Typer application receiving command registrations.
    """

    setup.register(app)
    run.register(app)
    stacks.register(app)
