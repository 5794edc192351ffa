# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Lookup of stack hooks and the commit-time entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from ..config.settings import WtHooksSettings, load_settings
from ..environment import CapabilityProbe, detect_project_root
from ..errors import WtHooksError
from ..logging import CLILogger
from ..process import CommandRunner, run_command
from ..stacks import DEFAULT_STACKS, StackDefinition
from .aggregator import ReportAggregator, render_report
from .context import CheckContext
from .models import RunReport, StackHook
from .staged import staged_files
from .stacks import ALL_HOOKS

_HOOKS: Final[dict[str, StackHook]] = {hook.key: hook for hook in ALL_HOOKS}


def available_hooks() -> tuple[StackHook, ...]:
    """Return every registered stack hook in table order."""

    return tuple(_HOOKS[stack.key] for stack in DEFAULT_STACKS if stack.key in _HOOKS)


def hook_for(key: str) -> StackHook:
    """Return the hook registered for ``key``.

    Raises:
        WtHooksError: If no stack uses ``key``.
    """

    hook = _HOOKS.get(key.strip().lower())
    if hook is None:
        raise WtHooksError(
            f"Unknown stack '{key}'",
            exit_code=2,
            remediation=("Run 'wthooks stacks' to list the supported stacks.",),
        )
    return hook


def missing_hooks(table: tuple[StackDefinition, ...] = DEFAULT_STACKS) -> tuple[str, ...]:
    """Return stack keys in ``table`` that have no registered hook."""

    return tuple(stack.key for stack in table if stack.key not in _HOOKS)


def run_stack(
    key: str,
    *,
    cwd: Path | None = None,
    logger: CLILogger | None = None,
    runner: CommandRunner = run_command,
    probe: CapabilityProbe | None = None,
    settings: WtHooksSettings | None = None,
    aggregator: ReportAggregator | None = None,
) -> RunReport:
    """Run the checks for ``key`` against the staged changes of the repository.

    Args:
        key: Stack key such as ``python`` or ``ror``.
        cwd: Directory inside the repository; defaults to the process cwd.
        logger: Logger used for progress and the summary table.
        runner: Command runner used for git and every tool.
        probe: Capability probe; a fresh one is created when omitted.
        settings: Settings override; loaded from ``pyproject.toml`` otherwise.
        aggregator: Aggregator override for tests.

    Returns:
        RunReport: Ordered outcomes of the invocation.

    Raises:
        WtHooksError: On an unknown stack, a missing repository, or an unmet
            stack precondition.
    """

    hook = hook_for(key)
    root = detect_project_root(cwd or Path.cwd(), runner=runner)
    resolved_settings = settings or load_settings(root)
    resolved_logger = logger or CLILogger(use_emoji=resolved_settings.emoji, use_color=resolved_settings.color)
    ctx = CheckContext(
        root=root,
        staged=staged_files(root, runner=runner),
        settings=resolved_settings,
        probe=probe or CapabilityProbe(),
        runner=runner,
        logger=resolved_logger,
    )
    report = (aggregator or ReportAggregator()).execute(hook, ctx)
    render_report(report, resolved_logger)
    return report


__all__ = ["available_hooks", "hook_for", "missing_hooks", "run_stack"]
