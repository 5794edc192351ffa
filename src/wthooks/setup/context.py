# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""State threaded through every step of the setup workflow."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from ..config.document import CONFIG_FILENAME, HookConfigDocument
from ..environment import CapabilityProbe, ExistingConfig, OperatingSystem
from ..errors import FatalEnvironmentError
from ..logging import CLILogger
from ..process import CommandRunner, run_command
from ..selection import Selection
from ..stacks import DEFAULT_STACKS, StackDefinition
from .prompts import Prompter

if TYPE_CHECKING:
    from .orchestrator import SetupState


@dataclass(slots=True)
class SetupContext:
    """Collaborators and accumulated facts of one setup run.

    Every step reads what earlier steps recorded here instead of sharing
    module-level state; ``history`` lists the visited states in order.
    """

    cwd: Path
    prompter: Prompter
    logger: CLILogger = field(default_factory=CLILogger)
    runner: CommandRunner = run_command
    probe: CapabilityProbe = field(default_factory=CapabilityProbe)
    table: tuple[StackDefinition, ...] = DEFAULT_STACKS
    clock: Callable[[], datetime] | None = None
    system: str | None = None
    os_name: OperatingSystem = OperatingSystem.UNKNOWN
    root: Path | None = None
    python: str | None = None
    existing: ExistingConfig | None = None
    hook_path: Path | None = None
    hook_present: bool = False
    detected: tuple[StackDefinition, ...] = ()
    selection: Selection | None = None
    document: HookConfigDocument | None = None
    backup: Path | None = None
    full_run_passed: bool | None = None
    history: list[SetupState] = field(default_factory=list)

    @property
    def project_root(self) -> Path:
        """Return the repository root recorded by the git check.

        Raises:
            FatalEnvironmentError: If the repository has not been located yet.
        """

        if self.root is None:
            raise FatalEnvironmentError("Repository root has not been detected yet.")
        return self.root

    @property
    def config_path(self) -> Path:
        """Return the path of the config document in the repository root."""

        return self.project_root / CONFIG_FILENAME


__all__ = ["SetupContext"]
