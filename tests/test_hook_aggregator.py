# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Tests for sequencing checks, re-staging fixes, and reporting."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest
from support import BufferedLogger, FakeRunner, completed, make_probe

from wthooks.errors import FatalEnvironmentError
from wthooks.hooks.aggregator import ReportAggregator, build_summary_table, render_report
from wthooks.hooks.context import CheckContext
from wthooks.hooks.models import CheckSpec, InternalResult, Precondition, StackHook
from wthooks.hooks.staged import changed_files, file_digests, staged_files
from wthooks.severity import CheckSeverity


def _context(root: Path, runner: FakeRunner, logger: BufferedLogger, *, staged: Sequence[str] = ()) -> CheckContext:
    for name in staged:
        (root / name).write_text("value = 1\n", encoding="utf-8")
    return CheckContext(
        root=root,
        staged=tuple(Path(name) for name in staged),
        probe=make_probe({"first", "second", "third", "fixer"}),
        runner=runner,
        logger=logger.logger,
    )


def _hook(*checks: CheckSpec, preconditions: tuple[Precondition, ...] = ()) -> StackHook:
    return StackHook(key="demo", title="Demo checks", checks=checks, preconditions=preconditions)


def test_blocking_failure_halts_remaining_checks(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    runner = FakeRunner().on(["second"], 2)
    ctx = _context(tmp_path, runner, buffered_logger)
    hook = _hook(
        CheckSpec(name="first", severity=CheckSeverity.BLOCKING, executables=("first",)),
        CheckSpec(name="second", severity=CheckSeverity.BLOCKING, executables=("second",)),
        CheckSpec(name="third", severity=CheckSeverity.BLOCKING, executables=("third",)),
    )

    report = ReportAggregator().execute(hook, ctx)

    assert runner.calls == [["first"], ["second"]]
    assert [outcome.name for outcome in report.outcomes] == ["first", "second"]
    assert report.halted_at == "second"
    assert not report.overall_passed
    assert report.exit_code == 1
    assert "second failed (exit 2)" in buffered_logger.stdout


def test_advisory_failures_never_change_exit_status(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    runner = FakeRunner().on(["first"], 1)
    ctx = _context(tmp_path, runner, buffered_logger)
    hook = _hook(
        CheckSpec(name="first", severity=CheckSeverity.WARNING, executables=("first",)),
        CheckSpec(
            name="notes",
            severity=CheckSeverity.INFO,
            internal=lambda context, files: InternalResult(passed=False, message="TODO comments found"),
        ),
        CheckSpec(name="missing", severity=CheckSeverity.BLOCKING, executables=("not-installed",)),
        CheckSpec(name="third", severity=CheckSeverity.BLOCKING, executables=("third",)),
    )

    report = ReportAggregator().execute(hook, ctx)

    assert report.halted_at is None
    assert report.overall_passed
    assert report.exit_code == 0
    assert [outcome.name for outcome in report.advisories] == ["first", "notes", "missing"]
    assert runner.calls == [["first"], ["third"]]


def test_auto_fixed_changes_are_restaged(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    def fix(command: list[str], kwargs: dict[str, Any]) -> Any:
        (kwargs["cwd"] / "a.py").write_text("value = 2\n", encoding="utf-8")
        return completed(command)

    runner = FakeRunner().on(["fixer"], fix)
    ctx = _context(tmp_path, runner, buffered_logger, staged=("a.py", "b.py"))
    hook = _hook(
        CheckSpec(
            name="fixer",
            severity=CheckSeverity.AUTO_FIXED,
            executables=("fixer",),
            suffixes=(".py",),
            append_files=True,
        ),
    )

    report = ReportAggregator().execute(hook, ctx)

    outcome = report.outcomes[0]
    assert outcome.passed
    assert outcome.restaged == (Path("a.py"),)
    assert runner.calls[-1] == ["git", "add", "--", "a.py"]
    assert report.exit_code == 0
    assert "Re-staged 1 fixed file(s)" in buffered_logger.stdout


def test_unchanged_files_are_not_restaged(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    runner = FakeRunner()
    ctx = _context(tmp_path, runner, buffered_logger, staged=("a.py",))
    hook = _hook(CheckSpec(name="fixer", severity=CheckSeverity.AUTO_FIXED, executables=("fixer",), suffixes=(".py",)))

    ReportAggregator().execute(hook, ctx)

    assert runner.calls == [["fixer"]]


def test_restage_failure_is_gating(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    def fix(command: list[str], kwargs: dict[str, Any]) -> Any:
        (kwargs["cwd"] / "a.py").write_text("value = 3\n", encoding="utf-8")
        return completed(command)

    runner = FakeRunner().on(["fixer"], fix)
    ctx = _context(tmp_path, runner, buffered_logger, staged=("a.py",))
    hook = _hook(
        CheckSpec(name="fixer", severity=CheckSeverity.AUTO_FIXED, executables=("fixer",), suffixes=(".py",)),
        CheckSpec(name="first", severity=CheckSeverity.BLOCKING, executables=("first",)),
    )

    report = ReportAggregator(restager=lambda context, files: False).execute(hook, ctx)

    assert report.halted_at == "fixer"
    assert report.outcomes[0].message == "fixer modified files but re-staging them failed"
    assert report.exit_code == 1
    assert ["first"] not in runner.calls


def test_unmet_precondition_aborts_before_checks(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    runner = FakeRunner()
    ctx = _context(tmp_path, runner, buffered_logger)
    hook = _hook(
        CheckSpec(name="first", severity=CheckSeverity.BLOCKING, executables=("first",)),
        preconditions=(Precondition(message="gradlew not found in project root.", markers=("gradlew",)),),
    )

    with pytest.raises(FatalEnvironmentError, match="gradlew not found"):
        ReportAggregator().execute(hook, ctx)
    assert runner.calls == []


def test_render_report_prints_table_and_verdict(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    runner = FakeRunner().on(["first"], 1)
    ctx = _context(tmp_path, runner, buffered_logger)
    hook = _hook(CheckSpec(name="first", severity=CheckSeverity.BLOCKING, executables=("first",)))
    report = ReportAggregator().execute(hook, ctx)

    render_report(report, buffered_logger.logger)

    output = buffered_logger.stdout
    assert "--- Demo checks ---" in output
    assert "Check" in output and "Severity" in output
    assert "Pre-commit checks failed at 'first'. Commit aborted." in output


def test_render_report_counts_advisories(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    ctx = _context(tmp_path, FakeRunner(), buffered_logger)
    hook = _hook(
        CheckSpec(
            name="notes",
            severity=CheckSeverity.INFO,
            internal=lambda context, files: InternalResult(passed=False, message="TODO comments found"),
        ),
    )

    render_report(ReportAggregator().execute(hook, ctx), buffered_logger.logger)

    assert "All pre-commit checks passed! (1 advisory notice(s))" in buffered_logger.stdout


def test_summary_table_has_one_row_per_outcome(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    ctx = _context(tmp_path, FakeRunner(), buffered_logger)
    hook = _hook(
        CheckSpec(name="first", severity=CheckSeverity.BLOCKING, executables=("first",)),
        CheckSpec(name="second", severity=CheckSeverity.WARNING, executables=("second",)),
    )

    table = build_summary_table(ReportAggregator().execute(hook, ctx), color=False)

    assert table.row_count == 2
    assert [column.header for column in table.columns] == ["Check", "Severity", "Status", "Message"]


def test_staged_files_lists_index_paths(tmp_path: Path) -> None:
    runner = FakeRunner().on(["git", "diff", "--cached"], "src/app.py\nREADME.md\n\n")

    assert staged_files(tmp_path, runner=runner) == (Path("src/app.py"), Path("README.md"))
    assert runner.calls == [["git", "diff", "--cached", "--name-only", "--diff-filter=ACMR"]]


def test_staged_files_failure_is_fatal(tmp_path: Path) -> None:
    runner = FakeRunner().on(["git", "diff"], 128)

    with pytest.raises(FatalEnvironmentError, match="Unable to list staged files"):
        staged_files(tmp_path, runner=runner)


def test_digest_comparison_detects_content_and_deletion(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_text("one", encoding="utf-8")
    (tmp_path / "b.txt").write_text("two", encoding="utf-8")
    files = (Path("a.txt"), Path("b.txt"), Path("c.txt"))
    before = file_digests(tmp_path, files)

    (tmp_path / "a.txt").write_text("one", encoding="utf-8")
    (tmp_path / "b.txt").unlink()

    assert before[Path("c.txt")] is None
    assert changed_files(before, file_digests(tmp_path, files)) == (Path("b.txt"),)
