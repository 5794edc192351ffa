# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Android (Java/Kotlin) checks driven by the Gradle Spotless plugin."""

from __future__ import annotations

from ...severity import CheckSeverity
from ..models import CheckSpec, Precondition, StackHook

ANDROID_HOOK = StackHook(
    key="android",
    title="Running Android pre-commit checks...",
    preconditions=(
        Precondition(
            message="Gradle wrapper not found (./gradlew is missing)",
            markers=("gradlew",),
            remediation=("Run this hook from the root of an Android project that ships the Gradle wrapper.",),
        ),
    ),
    checks=(
        CheckSpec(
            name="spotless",
            severity=CheckSeverity.BLOCKING,
            description="Running spotlessCheck...",
            executables=("./gradlew",),
            args=("spotlessCheck",),
            remediation="Please run './gradlew spotlessApply' to fix formatting issues, or fix them manually.",
            passed_message="Spotless check passed",
        ),
    ),
)

__all__ = ["ANDROID_HOOK"]
