# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Execution context shared by every check of a stack invocation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from subprocess import CompletedProcess

from ..config.settings import WtHooksSettings
from ..environment import CapabilityProbe, has_marker
from ..logging import CLILogger
from ..process import CommandRunner, run_command


@dataclass(slots=True)
class CheckContext:
    """Repository state and collaborators available to checks."""

    root: Path
    staged: tuple[Path, ...]
    settings: WtHooksSettings = field(default_factory=WtHooksSettings)
    probe: CapabilityProbe = field(default_factory=CapabilityProbe)
    runner: CommandRunner = run_command
    logger: CLILogger = field(default_factory=CLILogger)

    def staged_matching(self, suffixes: Sequence[str]) -> tuple[Path, ...]:
        """Return staged files that still exist and end with one of ``suffixes``.

        An empty ``suffixes`` sequence matches every staged file.
        """

        lowered = tuple(suffix.lower() for suffix in suffixes)
        matches: list[Path] = []
        for path in self.staged:
            if lowered and not path.name.lower().endswith(lowered):
                continue
            if (self.root / path).is_file():
                matches.append(path)
        return tuple(matches)

    def exists(self, *relative: str) -> bool:
        """Return ``True`` when any of the project-relative paths exists."""

        return any((self.root / item).exists() for item in relative)

    def has_marker(self, patterns: Iterable[str]) -> bool:
        """Return ``True`` when any glob in ``patterns`` matches in the repository."""

        return has_marker(self.root, patterns)

    def resolve_executable(self, candidates: Sequence[str]) -> str | None:
        """Return the first usable executable from ``candidates``.

        Candidates containing a path separator are resolved against the
        repository root; bare names are looked up through the probe.
        """

        for candidate in candidates:
            if "/" in candidate:
                if (self.root / candidate).is_file():
                    return candidate
                continue
            if self.probe.check_required_tool(candidate):
                return candidate
        return None

    def run(self, args: Sequence[str], *, capture: bool = True) -> CompletedProcess[str]:
        """Run ``args`` from the repository root with the configured timeout.

        Raises:
            FileNotFoundError: If the executable cannot be resolved.
        """

        return self.runner(
            list(args),
            cwd=self.root,
            check=False,
            capture_output=capture,
            timeout=self.settings.timeout,
        )

    def succeeds(self, args: Sequence[str]) -> bool:
        """Return ``True`` when ``args`` runs and exits with status zero."""

        try:
            return self.run(args).returncode == 0
        except FileNotFoundError:
            return False


__all__ = ["CheckContext"]
