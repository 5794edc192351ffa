# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Severity levels attached to every check in a stack sequence."""

from __future__ import annotations

from enum import Enum
from typing import Final


class CheckSeverity(str, Enum):
    """Control whether a failing check halts the run, is corrected, or is reported."""

    BLOCKING = "blocking"
    AUTO_FIXED = "auto-fixed"
    WARNING = "warning"
    INFO = "info"

    @property
    def gating(self) -> bool:
        """Return ``True`` when a failure at this level fails the whole run."""

        return self in GATING_SEVERITIES


GATING_SEVERITIES: Final[frozenset[CheckSeverity]] = frozenset(
    {CheckSeverity.BLOCKING, CheckSeverity.AUTO_FIXED},
)

_SEVERITY_STYLES: Final[dict[CheckSeverity, str]] = {
    CheckSeverity.BLOCKING: "red",
    CheckSeverity.AUTO_FIXED: "magenta",
    CheckSeverity.WARNING: "yellow",
    CheckSeverity.INFO: "cyan",
}


def severity_style(severity: CheckSeverity) -> str:
    """Map :class:`CheckSeverity` to the Rich style used in summaries."""

    return _SEVERITY_STYLES.get(severity, "white")


__all__ = ["CheckSeverity", "GATING_SEVERITIES", "severity_style"]
