# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Per-stack check sequences."""

from __future__ import annotations

from .android import ANDROID_HOOK
from .dotnet import DOTNET_HOOK
from .flutter import FLUTTER_HOOK
from .ios import IOS_HOOK
from .js import JS_HOOK
from .php import PHP_HOOK
from .python import PYTHON_HOOK
from .ror import ROR_HOOK

ALL_HOOKS = (
    ANDROID_HOOK,
    DOTNET_HOOK,
    FLUTTER_HOOK,
    IOS_HOOK,
    JS_HOOK,
    PHP_HOOK,
    PYTHON_HOOK,
    ROR_HOOK,
)

__all__ = [
    "ALL_HOOKS",
    "ANDROID_HOOK",
    "DOTNET_HOOK",
    "FLUTTER_HOOK",
    "IOS_HOOK",
    "JS_HOOK",
    "PHP_HOOK",
    "PYTHON_HOOK",
    "ROR_HOOK",
]
