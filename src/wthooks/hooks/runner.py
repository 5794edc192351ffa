# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Execute a single check and classify its result."""

from __future__ import annotations

from pathlib import Path

from ..process import TIMEOUT_EXIT_CODE
from ..severity import CheckSeverity
from .context import CheckContext
from .models import CheckOutcome, CheckSpec, InternalCheck
from .staged import changed_files, file_digests


class ToolRunner:
    """Run one :class:`CheckSpec` against a :class:`CheckContext`."""

    def run(self, check: CheckSpec, ctx: CheckContext) -> CheckOutcome:
        """Return the outcome of ``check``; tool failures never raise."""

        if ctx.settings.skips(check.name):
            return _skipped(check, CheckSeverity.INFO, f"{check.name}: skipped by configuration")

        files: tuple[Path, ...] = ()
        if check.suffixes is not None:
            files = ctx.staged_matching(check.suffixes)
            if not files:
                return _skipped(check, CheckSeverity.INFO, f"{check.name}: no matching staged files")

        if check.when is not None and not check.when(ctx):
            reason = check.skip_reason or f"{check.name}: not applicable"
            return _skipped(check, check.skip_severity, reason)

        if check.internal is not None:
            return self._run_internal(check, check.internal, ctx, files)
        return self._run_external(check, ctx, files)

    def _run_internal(
        self,
        check: CheckSpec,
        internal: InternalCheck,
        ctx: CheckContext,
        files: tuple[Path, ...],
    ) -> CheckOutcome:
        result = internal(ctx, files)
        message = result.message or _default_message(check, passed=result.passed)
        return CheckOutcome(
            name=check.name,
            severity=check.severity,
            passed=result.passed,
            message=message,
            details=result.details,
            modified=result.modified,
        )

    def _run_external(self, check: CheckSpec, ctx: CheckContext, files: tuple[Path, ...]) -> CheckOutcome:
        args = _command_line(check, ctx)
        if args is None:
            return _missing(check)
        if check.append_files:
            args.extend(str(path) for path in files)

        tracked = files or ctx.staged_matching(())
        before = file_digests(ctx.root, tracked) if check.severity is CheckSeverity.AUTO_FIXED else {}
        try:
            completed = ctx.run(args, capture=False)
        except FileNotFoundError:
            return _missing(check)
        modified = changed_files(before, file_digests(ctx.root, before)) if before else ()

        passed = completed.returncode in check.ok_codes
        if passed:
            message = _default_message(check, passed=True)
        elif completed.returncode == TIMEOUT_EXIT_CODE:
            message = f"{check.name} timed out"
        else:
            message = _default_message(check, passed=False, returncode=completed.returncode)
        return CheckOutcome(
            name=check.name,
            severity=check.severity,
            passed=passed,
            message=message,
            returncode=completed.returncode,
            modified=modified,
        )


def _command_line(check: CheckSpec, ctx: CheckContext) -> list[str] | None:
    if check.command is not None:
        built = check.command(ctx)
        return list(built) if built else None
    executable = ctx.resolve_executable(check.executables)
    if executable is None:
        return None
    if check.available is not None and not check.available(ctx):
        return None
    return [executable, *(check.args_factory(ctx) if check.args_factory is not None else check.args)]


def _default_message(check: CheckSpec, *, passed: bool, returncode: int | None = None) -> str:
    if passed:
        return check.passed_message or f"{check.name} passed"
    if check.remediation:
        return f"{check.name} failed. {check.remediation}"
    if returncode is not None:
        return f"{check.name} failed (exit {returncode})"
    return f"{check.name} failed"


def _skipped(check: CheckSpec, severity: CheckSeverity, message: str) -> CheckOutcome:
    return CheckOutcome(name=check.name, severity=severity, passed=True, message=message, skipped=True)


def _missing(check: CheckSpec) -> CheckOutcome:
    tool = check.tool_label or (check.executables[0] if check.executables else check.name)
    message = f"{tool} not found, skipping {check.name}"
    if check.install_hint:
        message = f"{message}. {check.install_hint}"
    return _skipped(check, CheckSeverity.WARNING, message)


__all__ = ["ToolRunner"]
