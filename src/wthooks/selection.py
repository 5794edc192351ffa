# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Parse comma-separated menu input into an ordered stack selection."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

from .errors import NoValidSelectionError
from .stacks import DEFAULT_STACKS, StackDefinition

WarningCallback = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class Selection:
    """Ordered, duplicate-free set of stacks chosen in one setup run."""

    stacks: tuple[StackDefinition, ...]
    rejected: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.stacks)

    def __iter__(self) -> Iterator[StackDefinition]:
        return iter(self.stacks)

    def __bool__(self) -> bool:
        return bool(self.stacks)

    @property
    def hook_identifiers(self) -> tuple[str, ...]:
        """Return the hook identifiers of the selected stacks in selection order."""

        return tuple(stack.hook_identifier for stack in self.stacks)

    @property
    def display_names(self) -> tuple[str, ...]:
        """Return the display names of the selected stacks in selection order."""

        return tuple(stack.display_name for stack in self.stacks)


def parse_selection(
    raw_input: str,
    table: Sequence[StackDefinition] = DEFAULT_STACKS,
    *,
    on_warning: WarningCallback | None = None,
) -> Selection:
    """Return the stacks named by ``raw_input`` in first-seen order.

    Each comma-separated token is trimmed and parsed as a numeric stack id.
    Tokens that are not integers, or name no stack in ``table``, are dropped
    with a warning that quotes the literal token; repeated ids are dropped the
    same way. Partial failure is tolerated, total failure is not.

    Args:
        raw_input: Free-form text entered at the selection prompt.
        table: Stack table the ids are resolved against.
        on_warning: Callback receiving one message per dropped token.

    Returns:
        Selection: Non-empty ordered selection.

    Raises:
        NoValidSelectionError: When no token resolves to a stack.
    """

    if not raw_input.strip():
        raise NoValidSelectionError("No language selected. Exiting.")

    by_id = {stack.id: stack for stack in table}
    chosen: list[StackDefinition] = []
    rejected: list[str] = []
    for raw_token in raw_input.split(","):
        token = raw_token.strip()
        stack = _resolve_token(token, by_id)
        if stack is None:
            rejected.append(token)
            _emit(on_warning, f"Invalid selection: '{token}' (skipped)")
            continue
        if stack in chosen:
            rejected.append(token)
            _emit(on_warning, f"Duplicate selection: '{token}' (skipped)")
            continue
        chosen.append(stack)

    if not chosen:
        raise NoValidSelectionError("No valid languages selected. Exiting.")
    return Selection(stacks=tuple(chosen), rejected=tuple(rejected))


def _resolve_token(token: str, by_id: dict[int, StackDefinition]) -> StackDefinition | None:
    if not (token.isascii() and token.isdigit()):
        return None
    return by_id.get(int(token))


def _emit(callback: WarningCallback | None, message: str) -> None:
    if callback is not None:
        callback(message)


__all__ = ["Selection", "WarningCallback", "parse_selection"]
