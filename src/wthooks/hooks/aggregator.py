# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Sequence a stack's checks, re-stage fixes, and summarise the run."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Sequence
from pathlib import Path

from rich import box
from rich.table import Table
from rich.text import Text

from ..logging import CLILogger
from ..severity import CheckSeverity, severity_style
from .context import CheckContext
from .models import CheckOutcome, RunReport, StackHook
from .runner import ToolRunner
from .staged import restage

Restager = Callable[[CheckContext, Sequence[Path]], bool]


def _git_restage(ctx: CheckContext, files: Sequence[Path]) -> bool:
    return restage(ctx.root, files, runner=ctx.runner)


class ReportAggregator:
    """Run checks in order and stop at the first gating failure."""

    def __init__(self, runner: ToolRunner | None = None, *, restager: Restager | None = None) -> None:
        self._runner = runner or ToolRunner()
        self._restager = restager or _git_restage

    def execute(self, hook: StackHook, ctx: CheckContext) -> RunReport:
        """Run ``hook`` against ``ctx`` and return the ordered report.

        Args:
            hook: Stack definition whose checks are executed.
            ctx: Repository context for the invocation.

        Returns:
            RunReport: Outcomes in execution order; ``halted_at`` names the
            check that stopped the run, if any.

        Raises:
            FatalEnvironmentError: If a stack precondition is not met.
        """

        logger = ctx.logger
        logger.section(hook.title)
        hook.verify(ctx)
        report = RunReport(stack=hook.key)
        for check in hook.checks:
            if check.description:
                logger.info(check.description)
            outcome = self._runner.run(check, ctx)
            if outcome.severity is CheckSeverity.AUTO_FIXED and outcome.passed and outcome.modified:
                outcome = self._restage(outcome, ctx)
            report.outcomes.append(outcome)
            emit_outcome(outcome, logger)
            if outcome.severity.gating and not outcome.passed:
                report.halted_at = check.name
                break
        return report

    def _restage(self, outcome: CheckOutcome, ctx: CheckContext) -> CheckOutcome:
        if self._restager(ctx, outcome.modified):
            names = ", ".join(str(path) for path in outcome.modified)
            ctx.logger.debug(f"Re-staged {names}")
            return dataclasses.replace(outcome, restaged=outcome.modified)
        return dataclasses.replace(
            outcome,
            passed=False,
            message=f"{outcome.name} modified files but re-staging them failed",
        )


def emit_outcome(outcome: CheckOutcome, logger: CLILogger) -> None:
    """Print one outcome line with the level matching its severity."""

    if outcome.skipped:
        if outcome.severity is CheckSeverity.WARNING:
            logger.warn(outcome.message)
        else:
            logger.info(outcome.message)
    elif outcome.passed:
        logger.ok(outcome.message)
        if outcome.restaged:
            logger.info(f"Re-staged {len(outcome.restaged)} fixed file(s)")
    elif outcome.severity.gating:
        logger.fail(outcome.message)
    elif outcome.severity is CheckSeverity.WARNING:
        logger.warn(outcome.message)
    else:
        logger.info(outcome.message)
    for detail in outcome.details:
        logger.echo(f"    {detail}")


def _status_text(outcome: CheckOutcome, *, color: bool) -> Text:
    if outcome.skipped:
        label, style = "skipped", "dim"
    elif outcome.passed:
        label, style = "passed", "green"
    elif outcome.severity.gating:
        label, style = "failed", "bold red"
    else:
        label, style = "flagged", "yellow"
    return Text(label, style=style) if color else Text(label)


def build_summary_table(report: RunReport, *, color: bool = True) -> Table:
    """Return a Rich table with one row per outcome."""

    table = Table(
        title=f"{report.stack} checks",
        box=box.SIMPLE_HEAVY if color else box.SIMPLE,
        expand=False,
    )
    table.add_column("Check", no_wrap=True)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Message", overflow="fold")
    for outcome in report.outcomes:
        severity = Text(outcome.severity.value, style=severity_style(outcome.severity) if color else "")
        table.add_row(outcome.name, severity, _status_text(outcome, color=color), outcome.message)
    return table


def render_report(report: RunReport, logger: CLILogger) -> None:
    """Print the summary table followed by the final verdict."""

    color = logger.use_color if logger.use_color is not None else True
    logger.render(build_summary_table(report, color=color))
    if report.halted_at is not None:
        logger.fail(f"Pre-commit checks failed at '{report.halted_at}'. Commit aborted.")
    elif report.overall_passed:
        advisories = len(report.advisories)
        suffix = f" ({advisories} advisory notice(s))" if advisories else ""
        logger.ok(f"All pre-commit checks passed!{suffix}")
    else:
        logger.fail("Pre-commit checks failed. Commit aborted.")


__all__ = ["ReportAggregator", "Restager", "build_summary_table", "emit_outcome", "render_report"]
