# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Runtime settings read from ``[tool.wthooks]`` in the project's ``pyproject.toml``."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ConfigError

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "wthooks"
SKIP_ENV_VAR: Final[str] = "WTHOOKS_SKIP"
DEFAULT_LARGE_FILE_LIMIT: Final[int] = 1024 * 1024


class WtHooksSettings(BaseModel):
    """Validated settings shared by the hook runtime and the setup workflow."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    emoji: bool = True
    color: bool = True
    timeout: float | None = Field(default=None, gt=0)
    skip: tuple[str, ...] = ()
    large_file_limit: int = Field(default=DEFAULT_LARGE_FILE_LIMIT, alias="large-file-limit", gt=0)

    @field_validator("skip", mode="before")
    @classmethod
    def _coerce_skip(cls, value: object) -> object:
        """Normalise ``skip`` into a tuple of stripped, non-empty check names.

        Values of any other type are passed through for pydantic to reject.
        """

        if value is None:
            return ()
        if not isinstance(value, (str, list, tuple)):
            return value
        items = value.split(",") if isinstance(value, str) else value
        return tuple(str(item).strip() for item in items if str(item).strip())

    def skips(self, check_name: str) -> bool:
        """Return ``True`` when ``check_name`` was configured to be skipped."""

        return check_name in self.skip


def _read_pyproject_section(path: Path) -> Mapping[str, Any]:
    """Return the ``[tool.wthooks]`` table from ``path`` or an empty mapping.

    Raises:
        ConfigError: If the file is unreadable or the section is not a table.
    """

    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    tool = data.get(PYPROJECT_TOOL_KEY, {})
    if not isinstance(tool, Mapping):
        raise ConfigError(f"[{PYPROJECT_TOOL_KEY}] in {path} must be a table")
    section = tool.get(PYPROJECT_SECTION_KEY, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"[{PYPROJECT_TOOL_KEY}.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
    return section


def load_settings(root: Path, *, env: Mapping[str, str] | None = None) -> WtHooksSettings:
    """Load settings for the project rooted at ``root``.

    Args:
        root: Project root containing the optional ``pyproject.toml``.
        env: Environment mapping consulted for ``WTHOOKS_SKIP``; defaults to ``os.environ``.

    Returns:
        WtHooksSettings: Validated settings with defaults applied.

    Raises:
        ConfigError: If the configuration cannot be read or fails validation.
    """

    environ = os.environ if env is None else env
    payload = dict(_read_pyproject_section(root / PYPROJECT_FILENAME))
    extra_skips = environ.get(SKIP_ENV_VAR, "")
    if extra_skips.strip():
        configured = payload.get("skip")
        if configured is None:
            configured = []
        if isinstance(configured, str):
            configured = configured.split(",")
        if isinstance(configured, (list, tuple)):
            payload["skip"] = [*configured, *extra_skips.split(",")]
    try:
        return WtHooksSettings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid [tool.{PYPROJECT_SECTION_KEY}] settings: {exc}") from exc


__all__ = ["DEFAULT_LARGE_FILE_LIMIT", "SKIP_ENV_VAR", "WtHooksSettings", "load_settings"]
