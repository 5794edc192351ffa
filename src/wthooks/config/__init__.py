# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Hook manager config documents, their generator, and runtime settings."""

from __future__ import annotations

from .document import (
    CONFIG_FILENAME,
    HOOK_REPOSITORY_URL,
    HOOK_REVISION,
    HookConfigDocument,
    build_document,
    dump_document,
    load_document,
    parse_document,
)
from .generator import generate, write_document
from .settings import WtHooksSettings, load_settings

__all__ = [
    "CONFIG_FILENAME",
    "HOOK_REPOSITORY_URL",
    "HOOK_REVISION",
    "HookConfigDocument",
    "WtHooksSettings",
    "build_document",
    "dump_document",
    "generate",
    "load_document",
    "load_settings",
    "parse_document",
    "write_document",
]
