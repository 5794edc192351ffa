# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Interactive prompts used by the setup workflow."""

from __future__ import annotations

from typing import Protocol

from rich.console import Console
from rich.prompt import Confirm, Prompt

from ..errors import UserDeclinedError


class Prompter(Protocol):
    """Source of answers for the interactive setup questions."""

    def confirm(self, question: str) -> bool:
        """Return ``True`` when the user answers yes to ``question``."""

    def ask(self, question: str) -> str:
        """Return the free-form answer to ``question``."""


class RichPrompter:
    """Prompter backed by :mod:`rich.prompt`; closed input aborts setup."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question defaulting to ``no``.

        Raises:
            UserDeclinedError: If standard input is closed.
        """

        try:
            return Confirm.ask(f"[yellow]  {question}[/]", console=self._console, default=False)
        except EOFError as exc:
            raise UserDeclinedError("No answer received (input closed). Exiting.") from exc

    def ask(self, question: str) -> str:
        """Ask a free-form question; an empty answer is returned as ``""``.

        Raises:
            UserDeclinedError: If standard input is closed.
        """

        try:
            return Prompt.ask(f"[yellow]  {question}[/]", console=self._console, default="", show_default=False)
        except EOFError as exc:
            raise UserDeclinedError("No answer received (input closed). Exiting.") from exc


__all__ = ["Prompter", "RichPrompter"]
