# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Git index helpers used by the commit-time checks."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from ..errors import FatalEnvironmentError
from ..process import CommandRunner, run_command

_STAGED_ARGS = ("git", "diff", "--cached", "--name-only", "--diff-filter=ACMR")


def staged_files(root: Path, *, runner: CommandRunner = run_command) -> tuple[Path, ...]:
    """Return added, copied, modified, or renamed paths in the index, relative to ``root``.

    Raises:
        FatalEnvironmentError: If git is unavailable or the command fails.
    """

    try:
        completed = runner(list(_STAGED_ARGS), cwd=root, check=False, capture_output=True)
    except FileNotFoundError as exc:
        raise FatalEnvironmentError("git is not installed. Please install git first.") from exc
    if completed.returncode != 0:
        detail = (completed.stderr or "").strip()
        raise FatalEnvironmentError(f"Unable to list staged files: {detail or 'git diff failed'}")
    lines = (line.strip() for line in (completed.stdout or "").splitlines())
    return tuple(Path(line) for line in lines if line)


def file_digests(root: Path, files: Iterable[Path]) -> dict[Path, str | None]:
    """Return a SHA-256 digest per file; missing files map to ``None``."""

    digests: dict[Path, str | None] = {}
    for relative in files:
        candidate = root / relative
        try:
            digests[relative] = hashlib.sha256(candidate.read_bytes()).hexdigest()
        except OSError:
            digests[relative] = None
    return digests


def changed_files(before: Mapping[Path, str | None], after: Mapping[Path, str | None]) -> tuple[Path, ...]:
    """Return paths whose digest differs between two snapshots, in ``before`` order."""

    return tuple(path for path, digest in before.items() if after.get(path) != digest)


def restage(root: Path, files: Sequence[Path], *, runner: CommandRunner = run_command) -> bool:
    """Add ``files`` back to the index and return ``True`` on success."""

    if not files:
        return True
    try:
        completed = runner(
            ["git", "add", "--", *(str(path) for path in files)],
            cwd=root,
            check=False,
            capture_output=True,
        )
    except FileNotFoundError:
        return False
    return completed.returncode == 0


__all__ = ["changed_files", "file_digests", "restage", "staged_files"]
