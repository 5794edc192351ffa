# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Dataclasses describing checks, their outcomes, and per-stack reports."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import FatalEnvironmentError
from ..severity import CheckSeverity

if TYPE_CHECKING:
    from .context import CheckContext

Predicate = Callable[["CheckContext"], bool]
ArgsFactory = Callable[["CheckContext"], Sequence[str]]
CommandFactory = Callable[["CheckContext"], Sequence[str] | None]
InternalCheck = Callable[["CheckContext", tuple[Path, ...]], "InternalResult"]


@dataclass(frozen=True, slots=True)
class InternalResult:
    """Result returned by a check implemented in-process."""

    passed: bool
    message: str = ""
    details: tuple[str, ...] = ()
    modified: tuple[Path, ...] = ()


@dataclass(frozen=True, slots=True)
class CheckSpec:
    """Static description of one check in a stack's sequence.

    Attributes:
        name: Stable check name, also used by the ``skip`` setting.
        severity: Whether a failure blocks, is auto-fixed, or is advisory.
        description: Progress line printed before the check runs.
        executables: Candidate executables; project-relative paths such as
            ``vendor/bin/phpstan`` are tried before bare names on ``PATH``.
        args: Static arguments following the executable.
        args_factory: Builds the arguments from the context instead of ``args``.
        command: Builds the whole command line from the context, taking
            precedence over ``executables``; returning ``None`` marks the tool
            as unavailable.
        suffixes: Staged-file filter. ``None`` means the check is not file
            scoped, an empty tuple means every staged file.
        append_files: Append the matching staged files to the command line.
        when: Run condition; when false the check is skipped with ``skip_severity``.
        skip_reason: Message used when ``when`` is false.
        skip_severity: Severity reported for a skipped check.
        available: Extra availability predicate (e.g. a gem is bundled).
        internal: In-process implementation used instead of an executable.
        remediation: Hint printed when the check fails.
        passed_message: Message printed when the check passes.
        install_hint: Hint printed when the tool is missing.
        tool_label: Human-readable tool name used in missing-tool messages.
        ok_codes: Exit codes treated as success.
    """

    name: str
    severity: CheckSeverity
    description: str = ""
    executables: tuple[str, ...] = ()
    args: tuple[str, ...] = ()
    args_factory: ArgsFactory | None = None
    command: CommandFactory | None = None
    suffixes: tuple[str, ...] | None = None
    append_files: bool = False
    when: Predicate | None = None
    skip_reason: str = ""
    skip_severity: CheckSeverity = CheckSeverity.INFO
    available: Predicate | None = None
    internal: InternalCheck | None = None
    remediation: str = ""
    passed_message: str = ""
    install_hint: str = ""
    tool_label: str = ""
    ok_codes: tuple[int, ...] = (0,)


@dataclass(frozen=True, slots=True)
class CheckOutcome:
    """Result of running one check."""

    name: str
    severity: CheckSeverity
    passed: bool
    message: str
    skipped: bool = False
    returncode: int | None = None
    details: tuple[str, ...] = ()
    modified: tuple[Path, ...] = ()
    restaged: tuple[Path, ...] = ()


@dataclass(slots=True)
class RunReport:
    """Ordered outcomes of one stack invocation."""

    stack: str
    outcomes: list[CheckOutcome] = field(default_factory=list)
    halted_at: str | None = None

    @property
    def overall_passed(self) -> bool:
        """Return ``True`` when every gating outcome passed."""

        return all(outcome.passed for outcome in self.outcomes if outcome.severity.gating)

    @property
    def exit_code(self) -> int:
        """Return the process exit status implied by the report."""

        return 0 if self.overall_passed else 1

    @property
    def advisories(self) -> tuple[CheckOutcome, ...]:
        """Return non-gating outcomes that reported a problem."""

        return tuple(
            outcome
            for outcome in self.outcomes
            if not outcome.severity.gating
            and (not outcome.passed or (outcome.skipped and outcome.severity is CheckSeverity.WARNING))
        )


@dataclass(frozen=True, slots=True)
class Precondition:
    """Environment requirement checked before any check of a stack runs."""

    message: str
    tool: str | None = None
    markers: tuple[str, ...] = ()
    predicate: Predicate | None = None
    remediation: tuple[str, ...] = ()

    def satisfied(self, ctx: CheckContext) -> bool:
        """Return ``True`` when the tool, any marker, and the predicate all hold."""

        if self.tool is not None and not ctx.probe.check_required_tool(self.tool):
            return False
        if self.markers and not ctx.has_marker(self.markers):
            return False
        return self.predicate is None or self.predicate(ctx)


@dataclass(frozen=True, slots=True)
class StackHook:
    """Ordered check sequence executed for one stack at commit time."""

    key: str
    title: str
    checks: tuple[CheckSpec, ...]
    preconditions: tuple[Precondition, ...] = ()

    def verify(self, ctx: CheckContext) -> None:
        """Raise when a precondition of the stack is not met.

        Raises:
            FatalEnvironmentError: If any precondition fails.
        """

        for precondition in self.preconditions:
            if not precondition.satisfied(ctx):
                raise FatalEnvironmentError(precondition.message, remediation=precondition.remediation)

    def check_names(self) -> tuple[str, ...]:
        """Return the names of the checks in execution order."""

        return tuple(check.name for check in self.checks)


__all__ = [
    "ArgsFactory",
    "CheckOutcome",
    "CheckSpec",
    "CommandFactory",
    "InternalCheck",
    "InternalResult",
    "Precondition",
    "Predicate",
    "RunReport",
    "StackHook",
]
