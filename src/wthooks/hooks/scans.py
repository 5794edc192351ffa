# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Working-tree scans backing the advisory checks of several stacks."""

from __future__ import annotations

import fnmatch
import os
import re
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import Final

from .context import CheckContext
from .models import InternalCheck, InternalResult

ALWAYS_EXCLUDED: Final[frozenset[str]] = frozenset({".git"})
DEFAULT_RESULT_LIMIT: Final[int] = 5


def iter_project_files(
    root: Path,
    *,
    suffixes: Sequence[str] = (),
    under: Sequence[str] = (),
    exclude: Iterable[str] = (),
) -> Iterator[Path]:
    """Yield files below ``root`` as root-relative paths in a stable order.

    Args:
        root: Repository root.
        suffixes: Keep only files ending with one of these suffixes.
        under: Restrict the walk to these root-relative directories.
        exclude: Root-relative directory paths pruned from the walk.
    """

    excluded = {item.strip("/") for item in exclude} | ALWAYS_EXCLUDED
    starts = [root / item for item in under] if under else [root]
    for start in starts:
        if not start.is_dir():
            continue
        for current, dirnames, filenames in os.walk(start):
            current_path = Path(current)
            dirnames[:] = sorted(
                name
                for name in dirnames
                if (current_path / name).relative_to(root).as_posix() not in excluded and name not in ALWAYS_EXCLUDED
            )
            for filename in sorted(filenames):
                if suffixes and not filename.endswith(tuple(suffixes)):
                    continue
                yield (current_path / filename).relative_to(root)


def file_matches(path: Path, pattern: re.Pattern[str]) -> bool:
    """Return ``True`` when any line of ``path`` matches ``pattern``."""

    try:
        with path.open(encoding="utf-8", errors="ignore") as handle:
            return any(pattern.search(line) for line in handle)
    except OSError:
        return False


def find_pattern(
    root: Path,
    pattern: re.Pattern[str],
    *,
    suffixes: Sequence[str] = (),
    under: Sequence[str] = (),
    exclude: Iterable[str] = (),
    limit: int = DEFAULT_RESULT_LIMIT,
) -> tuple[Path, ...]:
    """Return up to ``limit`` files containing ``pattern``."""

    found: list[Path] = []
    for relative in iter_project_files(root, suffixes=suffixes, under=under, exclude=exclude):
        if file_matches(root / relative, pattern):
            found.append(relative)
            if len(found) >= limit:
                break
    return tuple(found)


def find_large_files(
    root: Path,
    threshold: int,
    *,
    exclude: Iterable[str] = (),
    limit: int = DEFAULT_RESULT_LIMIT,
) -> tuple[Path, ...]:
    """Return up to ``limit`` files larger than ``threshold`` bytes."""

    found: list[Path] = []
    for relative in iter_project_files(root, exclude=exclude):
        try:
            size = (root / relative).stat().st_size
        except OSError:
            continue
        if size > threshold:
            found.append(relative)
            if len(found) >= limit:
                break
    return tuple(found)


def find_named(
    root: Path,
    names: Sequence[str],
    *,
    exclude: Iterable[str] = (),
    limit: int = DEFAULT_RESULT_LIMIT,
) -> tuple[Path, ...]:
    """Return up to ``limit`` files whose name matches any glob in ``names``."""

    found: list[Path] = []
    for relative in iter_project_files(root, exclude=exclude):
        if any(fnmatch.fnmatchcase(relative.name, name) for name in names):
            found.append(relative)
            if len(found) >= limit:
                break
    return tuple(found)


def _details(paths: Sequence[Path]) -> tuple[str, ...]:
    return tuple(path.as_posix() for path in paths)


def pattern_advisory(
    pattern: str,
    message: str,
    *,
    suffixes: Sequence[str] = (),
    under: Sequence[str] = (),
    exclude: Sequence[str] = (),
    flags: int = 0,
    show_paths: bool = False,
) -> InternalCheck:
    """Return a check that flags the working tree when ``pattern`` occurs.

    Args:
        pattern: Regular expression searched line by line.
        message: Message reported when the pattern is found.
        suffixes: File suffixes to scan.
        under: Root-relative directories to scan; defaults to the whole tree.
        exclude: Root-relative directories to skip.
        flags: ``re`` flags applied to ``pattern``.
        show_paths: Include the matching paths as outcome details.

    Returns:
        InternalCheck: Callable suitable for :attr:`CheckSpec.internal`.
    """

    compiled = re.compile(pattern, flags)

    def _check(ctx: CheckContext, _files: tuple[Path, ...]) -> InternalResult:
        found = find_pattern(ctx.root, compiled, suffixes=suffixes, under=under, exclude=exclude)
        if not found:
            return InternalResult(passed=True)
        return InternalResult(passed=False, message=message, details=_details(found) if show_paths else ())

    return _check


def large_file_advisory(*, exclude: Sequence[str] = ()) -> InternalCheck:
    """Return a check listing files above the configured size limit."""

    def _check(ctx: CheckContext, _files: tuple[Path, ...]) -> InternalResult:
        limit = ctx.settings.large_file_limit
        found = find_large_files(ctx.root, limit, exclude=exclude)
        if not found:
            return InternalResult(passed=True, message="No large files found")
        return InternalResult(
            passed=False,
            message=f"Large files found (>{_format_size(limit)}). Consider using Git LFS for large binary files",
            details=_details(found),
        )

    return _check


def sensitive_file_advisory(names: Sequence[str], message: str, *, exclude: Sequence[str] = ()) -> InternalCheck:
    """Return a check flagging files whose names suggest secrets or production config."""

    def _check(ctx: CheckContext, _files: tuple[Path, ...]) -> InternalResult:
        found = find_named(ctx.root, names, exclude=exclude)
        if not found:
            return InternalResult(passed=True, message="No sensitive files found")
        return InternalResult(passed=False, message=message, details=_details(found))

    return _check


def _format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KB", "MB"):
        if value < 1024:
            return f"{value:.0f}{unit}"
        value /= 1024
    return f"{value:.0f}GB"


__all__ = [
    "ALWAYS_EXCLUDED",
    "file_matches",
    "find_large_files",
    "find_named",
    "find_pattern",
    "iter_project_files",
    "large_file_advisory",
    "pattern_advisory",
    "sensitive_file_advisory",
]
