# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Host capability probing and project detection.

Tool presence is queried once per name and cached on the probe, so the setup
workflow and the hook runtime never re-run ``PATH`` lookups ad hoc.
"""

from __future__ import annotations

import platform
import shutil
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from .errors import FatalEnvironmentError, NotARepositoryError
from .process import CommandRunner, run_command
from .stacks import DEFAULT_STACKS, StackDefinition

WhichFunction = Callable[[str], str | None]


class OperatingSystem(str, Enum):
    """Host platforms distinguished when printing remediation hints."""

    LINUX = "Linux"
    MACOS = "macOS"
    WINDOWS = "Windows"
    UNKNOWN = "Unknown"


class CapabilityStatus(str, Enum):
    """Variant result of querying a host tool."""

    PRESENT = "present"
    ABSENT_OPTIONAL = "absent-optional"
    ABSENT_MANDATORY = "absent-mandatory"


@dataclass(frozen=True, slots=True)
class Capability:
    """Cached answer for one executable lookup."""

    name: str
    status: CapabilityStatus
    path: str | None = None

    @property
    def present(self) -> bool:
        """Return ``True`` when the executable was found."""

        return self.status is CapabilityStatus.PRESENT


@dataclass(frozen=True, slots=True)
class ExistingConfig:
    """Whether a config document is present, and its text when it is."""

    present: bool
    content: str | None = None


_INSTALL_HINTS: Final[dict[str, dict[OperatingSystem, tuple[str, ...]]]] = {
    "git": {
        OperatingSystem.LINUX: (
            "sudo apt install git   # Debian/Ubuntu",
            "sudo yum install git   # CentOS/RHEL",
            "sudo pacman -S git     # Arch",
        ),
        OperatingSystem.MACOS: ("brew install git",),
        OperatingSystem.WINDOWS: ("Download from https://git-scm.com/download/win",),
    },
    "python": {
        OperatingSystem.LINUX: (
            "sudo apt install python3 python3-pip   # Debian/Ubuntu",
            "sudo yum install python3 python3-pip   # CentOS/RHEL",
            "sudo pacman -S python python-pip       # Arch",
        ),
        OperatingSystem.MACOS: ("brew install python3",),
        OperatingSystem.WINDOWS: (
            "Download from https://www.python.org/downloads/",
            "Or: winget install Python.Python.3",
        ),
    },
    "pip": {
        OperatingSystem.LINUX: ("sudo apt install python3-pip   # Debian/Ubuntu",),
        OperatingSystem.MACOS: ("{python} -m ensurepip --upgrade",),
        OperatingSystem.WINDOWS: ("{python} -m ensurepip --upgrade",),
    },
}


def detect_os(system: str | None = None) -> OperatingSystem:
    """Classify the host platform.

    Args:
        system: Optional ``uname -s`` style string; defaults to :func:`platform.system`.

    Returns:
        OperatingSystem: Detected platform family.
    """

    name = (system if system is not None else platform.system()).upper()
    if name.startswith("LINUX"):
        return OperatingSystem.LINUX
    if name.startswith("DARWIN"):
        return OperatingSystem.MACOS
    if name.startswith(("CYGWIN", "MINGW", "MSYS", "WINDOWS")):
        return OperatingSystem.WINDOWS
    return OperatingSystem.UNKNOWN


def install_hints(tool: str, os_name: OperatingSystem, *, python: str = "python3") -> tuple[str, ...]:
    """Return platform-specific installation hints for ``tool``."""

    hints = _INSTALL_HINTS.get(tool, {}).get(os_name, ())
    return tuple(hint.format(python=python) for hint in hints)


class CapabilityProbe:
    """Query host executables once and cache the variant result."""

    def __init__(self, *, which: WhichFunction | None = None) -> None:
        self._which = which or shutil.which
        self._cache: dict[str, Capability] = {}

    def query(self, name: str, *, mandatory: bool = False) -> Capability:
        """Return the cached capability for ``name``, probing ``PATH`` on first use.

        Args:
            name: Executable name to look up.
            mandatory: Classify an absent tool as mandatory rather than optional.

        Returns:
            Capability: Presence information for ``name``.
        """

        cached = self._cache.get(name)
        if cached is None:
            path = self._which(name)
            status = CapabilityStatus.PRESENT if path else CapabilityStatus.ABSENT_OPTIONAL
            cached = Capability(name=name, status=status, path=path)
            self._cache[name] = cached
        if mandatory and not cached.present:
            return Capability(name=name, status=CapabilityStatus.ABSENT_MANDATORY, path=None)
        return cached

    def check_required_tool(self, name: str) -> bool:
        """Return ``True`` when ``name`` is present on the executable search path."""

        return self.query(name).present

    def first_present(self, names: Iterable[str]) -> Capability | None:
        """Return the first present capability among ``names``."""

        for name in names:
            capability = self.query(name)
            if capability.present:
                return capability
        return None

    def require(self, name: str, *, message: str, remediation: Sequence[str] = ()) -> Capability:
        """Return the capability for ``name`` or raise when it is absent.

        Raises:
            FatalEnvironmentError: If ``name`` is not present.
        """

        capability = self.query(name, mandatory=True)
        if capability.status is CapabilityStatus.ABSENT_MANDATORY:
            raise FatalEnvironmentError(message, remediation=remediation)
        return capability

    def refresh(self, name: str) -> Capability:
        """Forget the cached answer for ``name`` and probe again."""

        self._cache.pop(name, None)
        return self.query(name)


def detect_project_root(cwd: Path, *, runner: CommandRunner = run_command) -> Path:
    """Return the top level of the git working tree containing ``cwd``.

    Raises:
        FatalEnvironmentError: If git cannot be executed.
        NotARepositoryError: If ``cwd`` is not inside a working tree.
    """

    try:
        completed = runner(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=cwd,
            check=False,
            capture_output=True,
        )
    except FileNotFoundError as exc:
        raise FatalEnvironmentError("git is not installed. Please install git first.") from exc
    toplevel = (completed.stdout or "").strip()
    if completed.returncode != 0 or not toplevel:
        raise NotARepositoryError(
            "Not inside a git repository!",
            remediation=("Please run this command from the root of your git project.",),
        )
    return Path(toplevel)


def detect_hook_path(root: Path, *, runner: CommandRunner = run_command, hook: str = "pre-commit") -> Path:
    """Return the git hook file path for ``hook``, honouring worktrees and ``core.hooksPath``."""

    fallback = root / ".git" / "hooks" / hook
    try:
        completed = runner(
            ["git", "rev-parse", "--git-path", f"hooks/{hook}"],
            cwd=root,
            check=False,
            capture_output=True,
        )
    except FileNotFoundError:
        return fallback
    reported = (completed.stdout or "").strip()
    if completed.returncode != 0 or not reported:
        return fallback
    path = Path(reported)
    return path if path.is_absolute() else root / path


def detect_existing_config(path: Path) -> ExistingConfig:
    """Return whether ``path`` exists and, if so, its text content."""

    if not path.is_file():
        return ExistingConfig(present=False)
    try:
        return ExistingConfig(present=True, content=path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError):
        return ExistingConfig(present=True, content=None)


def hook_installed(hook_path: Path, *, marker: str = "pre-commit") -> bool:
    """Return ``True`` when ``hook_path`` exists and was written by the hook manager."""

    if not hook_path.is_file():
        return False
    try:
        return marker in hook_path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return False


def has_marker(root: Path, patterns: Iterable[str]) -> bool:
    """Return ``True`` when any glob in ``patterns`` matches beneath ``root``."""

    for pattern in patterns:
        if any(True for _ in root.glob(pattern)):
            return True
    return False


def detect_project_types(
    root: Path,
    table: Iterable[StackDefinition] = DEFAULT_STACKS,
) -> tuple[StackDefinition, ...]:
    """Return the stacks whose marker files exist under ``root``, in table order."""

    return tuple(stack for stack in table if stack.markers and has_marker(root, stack.markers))


__all__ = [
    "Capability",
    "CapabilityProbe",
    "CapabilityStatus",
    "ExistingConfig",
    "OperatingSystem",
    "detect_existing_config",
    "detect_hook_path",
    "detect_os",
    "detect_project_root",
    "detect_project_types",
    "has_marker",
    "hook_installed",
    "install_hints",
]
