# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors

"""wthooks command-line interface."""

from __future__ import annotations

from typing import Final

__all__: Final[list[str]] = []
