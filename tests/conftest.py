# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from io import StringIO

import pytest
from rich.console import Console
from support import BufferedLogger, FakeRunner

from wthooks.console import get_console_manager
from wthooks.logging import CLILogger


@pytest.fixture
def buffered_logger() -> BufferedLogger:
    """Return a logger writing to string buffers without colour."""

    out, err = StringIO(), StringIO()
    logger = CLILogger(
        use_emoji=False,
        use_color=False,
        console=Console(file=out, color_system=None, width=200, soft_wrap=True),
        err_console=Console(file=err, color_system=None, width=200, soft_wrap=True),
    )
    return BufferedLogger(logger=logger, out=out, err=err)


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Return an empty fake command runner."""

    return FakeRunner()


@pytest.fixture(autouse=True)
def _reset_consoles() -> Iterator[None]:
    """Drop cached consoles so CliRunner captures the current streams."""

    get_console_manager().reset()
    yield
    get_console_manager().reset()
