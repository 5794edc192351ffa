# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Polyglot pre-commit hooks and the interactive setup workflow that installs them."""

from __future__ import annotations

from importlib import metadata

__all__ = ["__version__"]

try:
    __version__ = metadata.version("wt-pre-commit-hooks")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
