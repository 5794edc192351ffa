# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Exception hierarchy shared by the setup workflow and the hook runtime.

Every failure in this package is terminal for the current invocation. The CLI
layer converts a :class:`WtHooksError` into a printed message and the carried
exit code; nothing retries.
"""

from __future__ import annotations

from collections.abc import Sequence


class WtHooksError(RuntimeError):
    """Base error carrying an exit status and optional remediation lines."""

    def __init__(self, message: str, *, exit_code: int = 1, remediation: Sequence[str] = ()) -> None:
        """Initialise the error with a message, exit code and remediation hints.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
            remediation: Lines suggesting how the user can resolve the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code
        self.remediation: tuple[str, ...] = tuple(remediation)


class FatalEnvironmentError(WtHooksError):
    """Raised when a mandatory host tool or project precondition is missing."""


class NotARepositoryError(FatalEnvironmentError):
    """Raised when the working directory is not inside a git working tree."""


class UserDeclinedError(WtHooksError):
    """Raised when the user answers "no" to a consent prompt the workflow depends on."""


class NoValidSelectionError(WtHooksError):
    """Raised when stack selection input contains no valid stack identifier."""


class EmptySelectionError(WtHooksError):
    """Raised when config generation is requested for an empty selection."""


class BackupFailureError(WtHooksError):
    """Raised when an existing config document cannot be backed up."""


class WriteFailureError(WtHooksError):
    """Raised when the config document cannot be written."""


class HookInstallError(WtHooksError):
    """Raised when the hook manager fails to install the git hook."""


class ConfigError(WtHooksError):
    """Raised when configuration input is invalid."""


__all__ = [
    "BackupFailureError",
    "ConfigError",
    "EmptySelectionError",
    "FatalEnvironmentError",
    "HookInstallError",
    "NoValidSelectionError",
    "NotARepositoryError",
    "UserDeclinedError",
    "WriteFailureError",
    "WtHooksError",
]
