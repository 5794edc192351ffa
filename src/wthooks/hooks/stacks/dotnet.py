# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
""".NET (C#) checks: restore, format, build, test, and source advisories."""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from ...severity import CheckSeverity
from ..context import CheckContext
from ..models import CheckSpec, Precondition, StackHook
from ..scans import (
    find_named,
    find_pattern,
    large_file_advisory,
    pattern_advisory,
    sensitive_file_advisory,
)

PROJECT_GLOBS = ("*.csproj", "*.vbproj", "*.fsproj")
TEST_PROJECT_GLOBS = ("*.Test*.csproj", "*.Tests.csproj", "*Test.csproj", "*Tests.csproj")
BUILD_OUTPUT_DIRS = ("bin", "obj")
_TEST_ATTRIBUTES = re.compile(r"\[(Test|TestMethod|Fact)\]")


def _shallow_matches(root: Path, patterns: Sequence[str]) -> list[Path]:
    matches: set[Path] = set()
    for pattern in patterns:
        matches.update(root.glob(pattern))
        matches.update(root.glob(f"*/{pattern}"))
    return sorted(path for path in matches if path.is_file())


def discover_build_target(root: Path) -> str:
    """Return the solution, else the project file, else ``.`` to build.

    Only the repository root and its direct children are searched.
    """

    for patterns in (("*.sln",), PROJECT_GLOBS):
        matches = _shallow_matches(root, patterns)
        if matches:
            return matches[0].relative_to(root).as_posix()
    return "."


def sdk_major_version(ctx: CheckContext) -> int | None:
    """Return the major version reported by ``dotnet --version``."""

    try:
        completed = ctx.run(["dotnet", "--version"])
    except FileNotFoundError:
        return None
    head = (completed.stdout or "").strip().split(".", 1)[0]
    return int(head) if completed.returncode == 0 and head.isdigit() else None


def _format_args(ctx: CheckContext) -> list[str]:
    major = sdk_major_version(ctx)
    mode = "--verify-no-changes" if major is None or major >= 6 else "--check"
    return ["format", discover_build_target(ctx.root), mode, "--verbosity", "quiet"]


def _format_available(ctx: CheckContext) -> bool:
    major = sdk_major_version(ctx)
    return major is None or major >= 6 or ctx.probe.check_required_tool("dotnet-format")


def has_tests(ctx: CheckContext) -> bool:
    """Return ``True`` when test projects or test attributes exist."""

    if find_named(ctx.root, TEST_PROJECT_GLOBS, exclude=BUILD_OUTPUT_DIRS, limit=1):
        return True
    return bool(find_pattern(ctx.root, _TEST_ATTRIBUTES, suffixes=(".cs",), exclude=BUILD_OUTPUT_DIRS, limit=1))


DOTNET_HOOK = StackHook(
    key="dotnet",
    title="Running .NET pre-commit checks...",
    preconditions=(
        Precondition(
            message=".NET CLI is not installed or not in PATH",
            tool="dotnet",
            remediation=("Please install .NET SDK from https://dotnet.microsoft.com/download",),
        ),
    ),
    checks=(
        CheckSpec(
            name="restore",
            severity=CheckSeverity.BLOCKING,
            description="Restoring NuGet packages...",
            executables=("dotnet",),
            args_factory=lambda ctx: ["restore", discover_build_target(ctx.root), "--verbosity", "quiet"],
            remediation="Failed to restore NuGet packages.",
            passed_message="Package restore completed",
        ),
        CheckSpec(
            name="format",
            severity=CheckSeverity.BLOCKING,
            description="Checking code formatting...",
            executables=("dotnet",),
            args_factory=_format_args,
            available=_format_available,
            remediation="Code formatting issues found. Run 'dotnet format' to fix them.",
            passed_message="Code formatting check passed",
            install_hint="Install with: dotnet tool install -g dotnet-format",
            tool_label="dotnet-format",
        ),
        CheckSpec(
            name="build",
            severity=CheckSeverity.BLOCKING,
            description="Building project...",
            executables=("dotnet",),
            args_factory=lambda ctx: [
                "build",
                discover_build_target(ctx.root),
                "--configuration",
                "Release",
                "--no-restore",
                "--verbosity",
                "quiet",
            ],
            remediation="Build failed. Please fix build errors before committing.",
            passed_message="Build successful",
        ),
        CheckSpec(
            name="test",
            severity=CheckSeverity.BLOCKING,
            description="Running tests...",
            executables=("dotnet",),
            args_factory=lambda ctx: [
                "test",
                discover_build_target(ctx.root),
                "--configuration",
                "Release",
                "--no-build",
                "--verbosity",
                "quiet",
                "--logger",
                "console;verbosity=minimal",
            ],
            when=has_tests,
            skip_reason="No test projects found, skipping test execution",
            remediation="Tests failed. Please fix failing tests before committing.",
            passed_message="All tests passed",
        ),
        CheckSpec(
            name="console-output",
            severity=CheckSeverity.WARNING,
            internal=pattern_advisory(
                r"Console\.WriteLine|System\.Diagnostics\.Debug\.WriteLine",
                "Found Console.WriteLine or Debug.WriteLine statements. Consider using proper logging (ILogger, Serilog)",
                suffixes=(".cs",),
                exclude=BUILD_OUTPUT_DIRS,
            ),
            passed_message="No console output statements found",
        ),
        CheckSpec(
            name="hardcoded-secrets",
            severity=CheckSeverity.WARNING,
            internal=pattern_advisory(
                r"connectionString|password|secret|apikey",
                "Potential hardcoded secrets found. Keep sensitive data in configuration or environment variables",
                suffixes=(".cs",),
                exclude=BUILD_OUTPUT_DIRS,
            ),
            passed_message="No hardcoded secrets found",
        ),
        CheckSpec(
            name="todo-comments",
            severity=CheckSeverity.INFO,
            internal=pattern_advisory(
                r"TODO|FIXME|HACK",
                "Found TODO/FIXME/HACK comments in code",
                suffixes=(".cs",),
                exclude=BUILD_OUTPUT_DIRS,
            ),
            passed_message="No TODO/FIXME/HACK comments found",
        ),
        CheckSpec(
            name="large-files",
            severity=CheckSeverity.WARNING,
            internal=large_file_advisory(exclude=BUILD_OUTPUT_DIRS),
        ),
        CheckSpec(
            name="sensitive-files",
            severity=CheckSeverity.WARNING,
            internal=sensitive_file_advisory(
                ("appsettings.production.json", "web.config", "*.pfx", "*.p12", "*.key", "secrets.json"),
                "Potentially sensitive configuration files found. Ensure production configurations and "
                "certificates are not committed",
            ),
        ),
    ),
)

__all__ = ["DOTNET_HOOK", "discover_build_target", "has_tests", "sdk_major_version"]
