# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""iOS (Swift) checks run through Mint."""

from __future__ import annotations

from ...severity import CheckSeverity
from ..models import CheckSpec, Precondition, StackHook

_MINT_HINT = "Install Mint with 'brew install mint'"

IOS_HOOK = StackHook(
    key="ios",
    title="Running iOS pre-commit checks...",
    preconditions=(
        Precondition(
            message="Mint is not installed or not in PATH",
            tool="mint",
            remediation=(_MINT_HINT, "Then add SwiftLint and SwiftFormat to your Mintfile."),
        ),
    ),
    checks=(
        CheckSpec(
            name="swiftlint",
            severity=CheckSeverity.AUTO_FIXED,
            description="Running SwiftLint...",
            executables=("mint",),
            args=("run", "swiftlint", "autocorrect"),
            remediation="Please fix the issues before committing.",
            passed_message="SwiftLint passed",
            install_hint=_MINT_HINT,
        ),
        CheckSpec(
            name="swiftformat",
            severity=CheckSeverity.AUTO_FIXED,
            description="Running SwiftFormat...",
            executables=("mint",),
            args=("run", "swiftformat", ".", "--autocorrect", "--quiet"),
            remediation="Please fix the issues before committing.",
            passed_message="SwiftFormat passed",
            install_hint=_MINT_HINT,
        ),
    ),
)

__all__ = ["IOS_HOOK"]
