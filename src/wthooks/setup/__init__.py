# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Interactive workflow that writes the hook config and installs the git hook."""

from __future__ import annotations

from .context import SetupContext
from .orchestrator import SetupOutcome, SetupResult, SetupState, run_setup
from .prompts import Prompter, RichPrompter

__all__ = [
    "Prompter",
    "RichPrompter",
    "SetupContext",
    "SetupOutcome",
    "SetupResult",
    "SetupState",
    "run_setup",
]
