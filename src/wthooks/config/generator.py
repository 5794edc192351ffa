# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Render a stack selection into the hook manager config document on disk."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Final

from ..errors import BackupFailureError, EmptySelectionError, WriteFailureError
from ..selection import Selection
from .document import HookConfigDocument, build_document, dump_document

BACKUP_TIMESTAMP_FORMAT: Final[str] = "%Y%m%d_%H%M%S"

Clock = Callable[[], datetime]
BackupCallback = Callable[[Path], None]


@dataclass(frozen=True, slots=True)
class WriteResult:
    """Outcome of writing a config document to disk."""

    path: Path
    text: str
    backup: Path | None


def backup_path_for(path: Path, moment: datetime) -> Path:
    """Return ``<path>.backup.<timestamp>`` without clobbering earlier backups.

    Args:
        path: Config document being backed up.
        moment: Timestamp embedded in the backup name.

    Returns:
        Path: First candidate name that does not already exist.
    """

    stamp = moment.strftime(BACKUP_TIMESTAMP_FORMAT)
    candidate = path.with_name(f"{path.name}.backup.{stamp}")
    counter = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.name}.backup.{stamp}_{counter}")
        counter += 1
    return candidate


def write_document(
    document: HookConfigDocument,
    output_path: Path,
    *,
    clock: Clock | None = None,
) -> WriteResult:
    """Write ``document`` to ``output_path``, backing up any existing file first.

    Args:
        document: Document to serialise.
        output_path: Destination file.
        clock: Optional clock used to timestamp the backup.

    Returns:
        WriteResult: Path written, serialised text, and the backup path if one was made.

    Raises:
        BackupFailureError: If the existing file cannot be copied; nothing is overwritten.
        WriteFailureError: If the destination cannot be written.
    """

    text = dump_document(document)
    backup: Path | None = None
    if output_path.exists():
        backup = backup_path_for(output_path, (clock or datetime.now)())
        try:
            shutil.copy2(output_path, backup)
        except OSError as exc:
            raise BackupFailureError(f"Unable to back up {output_path} to {backup}: {exc}") from exc

    try:
        output_path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise WriteFailureError(f"Unable to write {output_path}: {exc}") from exc
    return WriteResult(path=output_path, text=text, backup=backup)


def generate(
    selection: Selection,
    output_path: Path,
    *,
    clock: Clock | None = None,
    on_backup: BackupCallback | None = None,
) -> HookConfigDocument:
    """Generate the config document for ``selection`` and write it to ``output_path``.

    Args:
        selection: Stacks whose hooks should be enabled, in order.
        output_path: Destination of the config document.
        clock: Optional clock used to timestamp the backup.
        on_backup: Callback receiving the backup path when an existing file was preserved.

    Returns:
        HookConfigDocument: The document that was written.

    Raises:
        EmptySelectionError: If ``selection`` is empty; raised before any file I/O.
        BackupFailureError: If an existing document cannot be backed up.
        WriteFailureError: If the document cannot be written.
    """

    if not selection:
        raise EmptySelectionError("Cannot generate a config document without any selected stack.")

    document = build_document(selection.hook_identifiers)
    result = write_document(document, output_path, clock=clock)
    if result.backup is not None and on_backup is not None:
        on_backup(result.backup)
    return document


__all__ = ["BACKUP_TIMESTAMP_FORMAT", "WriteResult", "backup_path_for", "generate", "write_document"]
