# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""JavaScript and TypeScript checks on staged sources."""

from __future__ import annotations

from ...severity import CheckSeverity
from ..models import CheckSpec, StackHook

PRETTIER_SUFFIXES = (".ts", ".tsx", ".js", ".jsx", ".json", ".md")
ESLINT_SUFFIXES = (".ts", ".tsx", ".js", ".jsx")
_NODE_HINT = "Install Node.js so that 'npx' is available"

JS_HOOK = StackHook(
    key="js",
    title="Running pre-commit checks...",
    checks=(
        CheckSpec(
            name="prettier",
            severity=CheckSeverity.AUTO_FIXED,
            description="Formatting staged files with Prettier...",
            executables=("npx",),
            args=("prettier", "--write"),
            suffixes=PRETTIER_SUFFIXES,
            append_files=True,
            remediation="Prettier could not format the staged files.",
            passed_message="Prettier formatting applied",
            install_hint=_NODE_HINT,
        ),
        CheckSpec(
            name="eslint",
            severity=CheckSeverity.AUTO_FIXED,
            description="Linting staged files with ESLint...",
            executables=("npx",),
            args=("eslint", "--fix"),
            suffixes=ESLINT_SUFFIXES,
            append_files=True,
            remediation="ESLint found issues it could not fix.",
            passed_message="ESLint passed",
            install_hint=_NODE_HINT,
        ),
    ),
)

__all__ = ["ESLINT_SUFFIXES", "JS_HOOK", "PRETTIER_SUFFIXES"]
