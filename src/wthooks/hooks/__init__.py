# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Commit-time hook runtime shared by every stack."""

from __future__ import annotations

from .aggregator import ReportAggregator, build_summary_table, render_report
from .context import CheckContext
from .models import CheckOutcome, CheckSpec, InternalResult, Precondition, RunReport, StackHook
from .registry import available_hooks, hook_for, run_stack
from .runner import ToolRunner

__all__ = [
    "CheckContext",
    "CheckOutcome",
    "CheckSpec",
    "InternalResult",
    "Precondition",
    "ReportAggregator",
    "RunReport",
    "StackHook",
    "ToolRunner",
    "available_hooks",
    "build_summary_table",
    "hook_for",
    "render_report",
    "run_stack",
]
