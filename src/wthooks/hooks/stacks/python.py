# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Python checks on staged files: hygiene, formatting, linting, security, tests."""

from __future__ import annotations

import json
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Final

import yaml

from ...severity import CheckSeverity
from ..context import CheckContext
from ..models import CheckSpec, InternalResult, StackHook

PYTHON_SUFFIXES: Final[tuple[str, ...]] = (".py",)
SECRETS_BASELINE: Final[str] = ".secrets.baseline"
_CONFLICT_MARKER = re.compile(r"^(<<<<<<< |=======$|>>>>>>> )")


def _read_text(path: Path) -> str | None:
    try:
        data = path.read_bytes()
    except OSError:
        return None
    if b"\0" in data:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


def find_conflict_markers(ctx: CheckContext, files: tuple[Path, ...]) -> InternalResult:
    """Fail when a staged file still contains merge conflict markers."""

    flagged: list[str] = []
    for relative in files:
        text = _read_text(ctx.root / relative)
        if text is None:
            continue
        if any(_CONFLICT_MARKER.match(line) for line in text.splitlines()):
            flagged.append(relative.as_posix())
    if flagged:
        return InternalResult(
            passed=False,
            message="Merge conflict markers found! Please resolve conflicts before committing.",
            details=tuple(flagged),
        )
    return InternalResult(passed=True, message="No merge conflict markers found")


def normalise_whitespace(text: str) -> str:
    """Strip trailing whitespace from every line and end non-empty text with a newline."""

    lines = [line.rstrip() for line in text.split("\n")]
    fixed = "\n".join(lines)
    if fixed and not fixed.endswith("\n"):
        fixed += "\n"
    return fixed


def fix_whitespace(ctx: CheckContext, files: tuple[Path, ...]) -> InternalResult:
    """Rewrite staged text files with trailing whitespace and final newline fixed."""

    modified: list[Path] = []
    for relative in files:
        path = ctx.root / relative
        text = _read_text(path)
        if text is None:
            continue
        fixed = normalise_whitespace(text)
        if fixed == text:
            continue
        try:
            path.write_text(fixed, encoding="utf-8", newline="")
        except OSError as exc:
            return InternalResult(passed=False, message=f"Unable to fix whitespace in {relative.as_posix()}: {exc}")
        modified.append(relative)
    return InternalResult(passed=True, message="Whitespace and end-of-file fixed", modified=tuple(modified))


def _load_yaml(path: Path) -> None:
    with path.open(encoding="utf-8") as handle:
        list(yaml.safe_load_all(handle))


def _load_json(path: Path) -> None:
    with path.open(encoding="utf-8") as handle:
        json.load(handle)


def _load_toml(path: Path) -> None:
    with path.open("rb") as handle:
        tomllib.load(handle)


def syntax_check(label: str, loader: Callable[[Path], None]) -> Callable[[CheckContext, tuple[Path, ...]], InternalResult]:
    """Return a check that parses each staged file with ``loader``."""

    def _check(ctx: CheckContext, files: tuple[Path, ...]) -> InternalResult:
        errors: list[str] = []
        for relative in files:
            try:
                loader(ctx.root / relative)
            except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as exc:
                errors.append(f"{relative.as_posix()}: {exc}")
        if errors:
            return InternalResult(passed=False, message=f"{label} validation failed!", details=tuple(errors))
        return InternalResult(passed=True, message=f"{label} files are valid")

    return _check


def _is_test_file(path: Path) -> bool:
    return path.name.startswith("test_") or path.name.endswith("_test.py") or "tests" in path.parts[:-1]


def related_tests(ctx: CheckContext) -> tuple[Path, ...]:
    """Return the test modules related to the staged Python files.

    Staged test modules are included as they are; for other modules the
    conventional ``test_<name>.py`` and ``<name>_test.py`` locations are tried.
    """

    found: list[Path] = []
    for relative in ctx.staged_matching(PYTHON_SUFFIXES):
        if _is_test_file(relative):
            candidates = [relative]
        else:
            folder, stem = relative.parent, relative.stem
            candidates = [
                folder / f"test_{stem}.py",
                folder / f"{stem}_test.py",
                folder / "tests" / f"test_{stem}.py",
                Path("tests") / folder / f"test_{stem}.py",
                Path("tests") / f"test_{stem}.py",
            ]
        for candidate in candidates:
            if (ctx.root / candidate).is_file():
                if candidate not in found:
                    found.append(candidate)
                break
    return tuple(found)


def _bandit_args(ctx: CheckContext) -> list[str]:
    if ctx.exists("pyproject.toml"):
        return ["-ll", "-c", "pyproject.toml", "--quiet"]
    return ["-ll", "--quiet"]


PYTHON_HOOK = StackHook(
    key="python",
    title="Running pre-commit checks...",
    checks=(
        CheckSpec(
            name="merge-conflicts",
            severity=CheckSeverity.BLOCKING,
            description="Checking for merge conflict markers...",
            suffixes=(),
            internal=find_conflict_markers,
        ),
        CheckSpec(
            name="whitespace",
            severity=CheckSeverity.AUTO_FIXED,
            description="Fixing trailing whitespace and EOF...",
            suffixes=(),
            internal=fix_whitespace,
        ),
        CheckSpec(
            name="yaml-syntax",
            severity=CheckSeverity.BLOCKING,
            description="Validating YAML files...",
            suffixes=(".yaml", ".yml"),
            internal=syntax_check("YAML", _load_yaml),
        ),
        CheckSpec(
            name="json-syntax",
            severity=CheckSeverity.BLOCKING,
            description="Validating JSON files...",
            suffixes=(".json",),
            internal=syntax_check("JSON", _load_json),
        ),
        CheckSpec(
            name="toml-syntax",
            severity=CheckSeverity.BLOCKING,
            description="Validating TOML files...",
            suffixes=(".toml",),
            internal=syntax_check("TOML", _load_toml),
        ),
        CheckSpec(
            name="black",
            severity=CheckSeverity.AUTO_FIXED,
            description="Formatting staged files with Black...",
            executables=("black",),
            args=("--quiet",),
            suffixes=PYTHON_SUFFIXES,
            append_files=True,
            remediation="Black could not format the staged files.",
            passed_message="Black formatting applied",
            install_hint="Install with: pip install black",
        ),
        CheckSpec(
            name="isort",
            severity=CheckSeverity.AUTO_FIXED,
            description="Sorting imports with isort...",
            executables=("isort",),
            args=("--profile", "black", "--quiet"),
            suffixes=PYTHON_SUFFIXES,
            append_files=True,
            remediation="isort could not sort the staged imports.",
            passed_message="Imports sorted",
            install_hint="Install with: pip install isort",
        ),
        CheckSpec(
            name="flake8",
            severity=CheckSeverity.BLOCKING,
            description="Linting staged files with Flake8...",
            executables=("flake8",),
            suffixes=PYTHON_SUFFIXES,
            append_files=True,
            remediation="Flake8 linting failed!",
            passed_message="Flake8 passed",
            install_hint="Install with: pip install flake8",
        ),
        CheckSpec(
            name="mypy",
            severity=CheckSeverity.WARNING,
            description="Running mypy type check...",
            executables=("mypy",),
            args=("--no-error-summary",),
            suffixes=PYTHON_SUFFIXES,
            append_files=True,
            remediation="mypy found type issues (non-blocking)",
            passed_message="mypy passed",
            install_hint="Install with: pip install mypy",
        ),
        CheckSpec(
            name="bandit",
            severity=CheckSeverity.BLOCKING,
            description="Running Bandit security checks...",
            executables=("bandit",),
            args_factory=_bandit_args,
            suffixes=PYTHON_SUFFIXES,
            append_files=True,
            remediation="Bandit security checks failed!",
            passed_message="Bandit passed",
            install_hint="Install with: pip install bandit",
        ),
        CheckSpec(
            name="detect-secrets",
            severity=CheckSeverity.BLOCKING,
            description="Scanning for secrets...",
            executables=("detect-secrets",),
            args=("scan", "--baseline", SECRETS_BASELINE),
            suffixes=(),
            append_files=True,
            when=lambda ctx: ctx.exists(SECRETS_BASELINE),
            skip_reason=f"No {SECRETS_BASELINE} found, skipping secret detection",
            skip_severity=CheckSeverity.WARNING,
            remediation=f"Secrets detected! Please review and update {SECRETS_BASELINE} if needed.",
            passed_message="No new secrets detected",
            install_hint="Install with: pip install detect-secrets",
        ),
        CheckSpec(
            name="pytest",
            severity=CheckSeverity.BLOCKING,
            description="Running unit tests...",
            executables=("pytest",),
            args_factory=lambda ctx: ["--tb=short", "--quiet", *(path.as_posix() for path in related_tests(ctx))],
            suffixes=PYTHON_SUFFIXES,
            when=lambda ctx: bool(related_tests(ctx)),
            skip_reason="No related tests found or pytest not configured",
            skip_severity=CheckSeverity.WARNING,
            remediation="Unit tests failed!",
            passed_message="Unit tests passed",
            install_hint="Install with: pip install pytest",
        ),
    ),
)

__all__ = [
    "PYTHON_HOOK",
    "find_conflict_markers",
    "fix_whitespace",
    "normalise_whitespace",
    "related_tests",
    "syntax_check",
]
