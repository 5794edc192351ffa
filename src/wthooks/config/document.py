# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Typed model and YAML encoder for the ``.pre-commit-config.yaml`` document."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Final

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ConfigError
from ..stacks import DEFAULT_STACKS, StackDefinition, stack_by_hook

CONFIG_FILENAME: Final[str] = ".pre-commit-config.yaml"
HOOK_REPOSITORY_URL: Final[str] = "https://github.com/wishtree-gmakwana/wt-pre-commit-hooks"
HOOK_REVISION: Final[str] = "v1.0.0"


class HookEntry(BaseModel):
    """Single ``{id: ...}`` record within a repository's hook list."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(min_length=1)


class RepositoryEntry(BaseModel):
    """Repository reference and the hooks enabled from it."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    repo: str
    rev: str
    hooks: tuple[HookEntry, ...] = ()


class HookConfigDocument(BaseModel):
    """Root of the hook manager config document.

    The document holds a single repository entry pointing at the fixed hook
    source and revision. Hook order is the selection order and survives a
    dump/parse round trip unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    repos: tuple[RepositoryEntry, ...]

    @field_validator("repos")
    @classmethod
    def _require_repository(cls, value: tuple[RepositoryEntry, ...]) -> tuple[RepositoryEntry, ...]:
        if not value:
            raise ValueError("config document must declare at least one repository")
        return value

    @property
    def hook_identifiers(self) -> tuple[str, ...]:
        """Return every hook identifier across all repositories, in document order."""

        return tuple(hook.id for repo in self.repos for hook in repo.hooks)

    def to_payload(self) -> dict[str, Any]:
        """Return the document as plain mappings and lists in serialisation order."""

        return {
            "repos": [
                {
                    "repo": repo.repo,
                    "rev": repo.rev,
                    "hooks": [{"id": hook.id} for hook in repo.hooks],
                }
                for repo in self.repos
            ],
        }

    def unknown_hooks(self, table: Iterable[StackDefinition] = DEFAULT_STACKS) -> tuple[str, ...]:
        """Return hook identifiers that no stack in ``table`` owns."""

        stacks = tuple(table)
        return tuple(hook for hook in self.hook_identifiers if stack_by_hook(hook, stacks) is None)


class _IndentedDumper(yaml.SafeDumper):
    """Safe dumper that indents block sequences under their parent key."""

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        del indentless
        return super().increase_indent(flow, False)


def build_document(
    hook_identifiers: Sequence[str],
    *,
    repository: str = HOOK_REPOSITORY_URL,
    revision: str = HOOK_REVISION,
) -> HookConfigDocument:
    """Return a document enabling ``hook_identifiers`` from the hook repository."""

    entry = RepositoryEntry(
        repo=repository,
        rev=revision,
        hooks=tuple(HookEntry(id=identifier) for identifier in hook_identifiers),
    )
    return HookConfigDocument(repos=(entry,))


def dump_document(document: HookConfigDocument) -> str:
    """Serialise ``document`` to YAML text, preserving key and hook order."""

    return yaml.dump(
        document.to_payload(),
        Dumper=_IndentedDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        indent=2,
    )


def parse_document(text: str, *, source: str = CONFIG_FILENAME) -> HookConfigDocument:
    """Parse YAML ``text`` into a :class:`HookConfigDocument`.

    Args:
        text: Raw YAML document.
        source: Label used in error messages.

    Returns:
        HookConfigDocument: Validated document.

    Raises:
        ConfigError: If the text is not valid YAML or does not match the schema.
    """

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"{source} is not valid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"{source} must contain a mapping at the top level")
    try:
        return HookConfigDocument.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"{source} does not match the expected layout: {exc}") from exc


def load_document(path: Path) -> HookConfigDocument:
    """Read and parse the document stored at ``path``.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    return parse_document(text, source=str(path))


__all__ = [
    "CONFIG_FILENAME",
    "HOOK_REPOSITORY_URL",
    "HOOK_REVISION",
    "HookConfigDocument",
    "HookEntry",
    "RepositoryEntry",
    "build_document",
    "dump_document",
    "load_document",
    "parse_document",
]
