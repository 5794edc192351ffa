# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Rich renderables printed by the setup workflow."""

from __future__ import annotations

from collections.abc import Iterable

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..stacks import StackDefinition

USEFUL_COMMANDS: tuple[tuple[str, str], ...] = (
    ("pre-commit run --all-files", "Run hooks on all files"),
    ("pre-commit autoupdate", "Update hook versions"),
    ("git commit --no-verify", "Skip hooks (use sparingly)"),
)


def banner() -> Panel:
    """Return the opening banner."""

    return Panel(Text("wt-pre-commit-hooks Setup", style="bold"), box=box.DOUBLE, style="cyan", expand=False)


def stack_menu(table: Iterable[StackDefinition], detected: Iterable[StackDefinition] = ()) -> Group:
    """Return the numbered stack menu, flagging stacks detected in the working tree."""

    detected_ids = {stack.id for stack in detected}
    menu = Table(title="Available language hooks", box=box.SIMPLE, show_header=True, expand=False)
    menu.add_column("#", justify="right", style="cyan", no_wrap=True)
    menu.add_column("Stack", no_wrap=True)
    menu.add_column("Checks")
    menu.add_column("Detected", justify="center", no_wrap=True)
    for stack in table:
        menu.add_row(f"{stack.id})", stack.display_name, stack.summary, "yes" if stack.id in detected_ids else "")
    hint = Text.assemble(
        ("You can select multiple languages (comma-separated).\n", "bold"),
        ("Example: 5,7 for JavaScript + Python", "bold"),
    )
    return Group(menu, hint)


def stacks_table(table: Iterable[StackDefinition]) -> Table:
    """Return the full stack table listing keys and hook identifiers."""

    listing = Table(title="Supported stacks", box=box.SIMPLE_HEAVY, expand=False)
    listing.add_column("#", justify="right", no_wrap=True)
    listing.add_column("Key", no_wrap=True)
    listing.add_column("Stack", no_wrap=True)
    listing.add_column("Hook id", no_wrap=True)
    listing.add_column("Checks")
    for stack in table:
        listing.add_row(str(stack.id), stack.key, stack.display_name, stack.hook_identifier, stack.summary)
    return listing


def config_panel(content: str, *, title: str) -> Panel:
    """Return ``content`` framed as a panel, printed without markup."""

    return Panel(Text(content.rstrip("\n")), title=title, title_align="left", box=box.SQUARE, expand=False)


def requirements_panel(stacks: Iterable[StackDefinition]) -> Panel:
    """Return the per-stack tool requirements for ``stacks``."""

    body = Text()
    for index, stack in enumerate(stacks):
        if index:
            body.append("\n")
        body.append(f"{stack.display_name}:\n", style="bold")
        for requirement in stack.requirements:
            body.append(f"  - {requirement}\n")
    return Panel(
        body if body.plain else Text("No stacks selected."),
        title="Language-specific tool requirements",
        title_align="left",
        expand=False,
    )


def summary_panel() -> Panel:
    """Return the closing summary with follow-up commands."""

    body = Text()
    body.append("What happens next:\n", style="bold")
    body.append("  Every time you run 'git commit', the pre-commit hooks\n")
    body.append("  will automatically check your staged files.\n\n")
    body.append("Useful commands:\n", style="bold")
    width = max(len(command) for command, _ in USEFUL_COMMANDS)
    for command, description in USEFUL_COMMANDS:
        body.append(f"  {command.ljust(width)}  # {description}\n")
    return Panel(body, title="Setup Complete!", box=box.DOUBLE, border_style="green", expand=False)


__all__ = [
    "USEFUL_COMMANDS",
    "banner",
    "config_panel",
    "requirements_panel",
    "stack_menu",
    "stacks_table",
    "summary_panel",
]
