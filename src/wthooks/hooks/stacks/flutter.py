# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Flutter (Dart) checks: dependencies, formatting, analysis, and tests."""

from __future__ import annotations

import re

from ...severity import CheckSeverity
from ..context import CheckContext
from ..models import CheckSpec, Precondition, StackHook
from ..scans import iter_project_files, pattern_advisory


def _has_dart_tests(ctx: CheckContext) -> bool:
    return any(True for _ in iter_project_files(ctx.root, suffixes=(".dart",), under=("test",)))


def _format_targets(ctx: CheckContext) -> list[str]:
    targets = [name for name in ("lib", "test") if (ctx.root / name).is_dir()]
    return ["format", "--set-exit-if-changed", *(f"{name}/" for name in targets or ["lib"])]


FLUTTER_HOOK = StackHook(
    key="flutter",
    title="Running Flutter pre-commit checks...",
    preconditions=(
        Precondition(message="Flutter is not installed or not in PATH", tool="flutter"),
        Precondition(message="Not a Flutter project (pubspec.yaml not found)", markers=("pubspec.yaml",)),
    ),
    checks=(
        CheckSpec(
            name="pub-get",
            severity=CheckSeverity.BLOCKING,
            description="Getting Flutter dependencies...",
            executables=("flutter",),
            args=("pub", "get"),
            remediation="Failed to get Flutter dependencies.",
            passed_message="Flutter dependencies resolved",
        ),
        CheckSpec(
            name="dart-format",
            severity=CheckSeverity.BLOCKING,
            description="Checking Dart code formatting...",
            executables=("dart",),
            args_factory=_format_targets,
            remediation="Code formatting issues found. Run 'dart format lib/ test/' to fix them.",
            passed_message="Code formatting check passed",
            install_hint="The Dart SDK ships with Flutter; make sure 'dart' is on PATH",
        ),
        CheckSpec(
            name="dart-analyze",
            severity=CheckSeverity.BLOCKING,
            description="Running Dart analyzer...",
            executables=("dart",),
            args=("analyze",),
            remediation="Dart analyzer found issues. Please fix them before committing.",
            passed_message="Dart analyzer passed",
        ),
        CheckSpec(
            name="flutter-test",
            severity=CheckSeverity.BLOCKING,
            description="Running Flutter tests...",
            executables=("flutter",),
            args=("test",),
            when=_has_dart_tests,
            skip_reason="No tests found, skipping test execution",
            remediation="Tests failed. Please fix them before committing.",
            passed_message="All tests passed",
        ),
        CheckSpec(
            name="print-statements",
            severity=CheckSeverity.WARNING,
            internal=pattern_advisory(
                re.escape("print("),
                "Found print() statements in lib/ directory. Consider using debugPrint() or a proper logging solution",
                suffixes=(".dart",),
                under=("lib",),
            ),
            passed_message="No print() statements found",
        ),
        CheckSpec(
            name="todo-comments",
            severity=CheckSeverity.INFO,
            internal=pattern_advisory(
                r"TODO|FIXME",
                "Found TODO/FIXME comments in code",
                suffixes=(".dart",),
                under=("lib",),
                flags=re.IGNORECASE,
            ),
            passed_message="No TODO/FIXME comments found",
        ),
    ),
)

__all__ = ["FLUTTER_HOOK"]
