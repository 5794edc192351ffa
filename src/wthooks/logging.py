# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from rich.console import Console, RenderableType
from rich.rule import Rule
from rich.text import Text

from .console import detect_tty, get_console_manager


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
    stderr: bool = False,
    console: Console | None = None,
) -> None:
    """Render ``msg`` to the console using shared styling helpers.

    Args:
        msg: Message text to print to the console.
        style: Rich style name to apply when colour output is active.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
        stderr: Route the message to standard error instead of stdout.
        console: Optional console overriding the shared console manager.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    target = console or get_console_manager().get(color=color_enabled, emoji=use_emoji, stderr=stderr)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    target.print(text)


def section(title: str, *, use_color: bool, console: Console | None = None) -> None:
    """Render a section header to delineate console output blocks.

    Args:
        title: Section title displayed to the user.
        use_color: Flag indicating whether ANSI colour support is desired.
        console: Optional console overriding the shared console manager.
    """

    target = console or get_console_manager().get(color=use_color, emoji=True)
    if use_color:
        target.print()
        target.print(Rule(title))
    else:
        target.print(f"\n--- {title} ---")


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None, console: Console | None = None) -> None:
    """Emit an informational message."""

    prefix = emoji("ℹ️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color, console=console)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None, console: Console | None = None) -> None:
    """Emit a success message."""

    prefix = emoji("✅ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="green", use_emoji=use_emoji, use_color=use_color, console=console)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None, console: Console | None = None) -> None:
    """Emit a warning message."""

    prefix = emoji("⚠️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color, console=console)


def fail(
    msg: str,
    *,
    use_emoji: bool,
    use_color: bool | None = None,
    stderr: bool = False,
    console: Console | None = None,
) -> None:
    """Emit an error message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
        stderr: Route the message to standard error.
        console: Optional console overriding the shared console manager.
    """

    prefix = emoji("❌ ", use_emoji)
    _print_line(
        f"{prefix}{msg}",
        style="red",
        use_emoji=use_emoji,
        use_color=use_color,
        stderr=stderr,
        console=console,
    )


@dataclass(slots=True)
class CLILogger:
    """Adapter around the logging helpers bound to one set of output preferences.

    ``console`` and ``err_console`` default to the shared console manager; tests
    pass consoles writing to in-memory buffers.
    """

    use_emoji: bool = True
    use_color: bool | None = None
    console: Console | None = None
    err_console: Console | None = None
    debug_enabled: bool = False

    def info(self, message: str) -> None:
        """Log an informational message."""

        info(message, use_emoji=self.use_emoji, use_color=self.use_color, console=self.console)

    def ok(self, message: str) -> None:
        """Log a success message."""

        ok(message, use_emoji=self.use_emoji, use_color=self.use_color, console=self.console)

    def warn(self, message: str) -> None:
        """Log a warning message."""

        warn(message, use_emoji=self.use_emoji, use_color=self.use_color, console=self.console)

    def fail(self, message: str) -> None:
        """Log a failure message on the regular output stream."""

        fail(message, use_emoji=self.use_emoji, use_color=self.use_color, console=self.console)

    def error(self, message: str, remediation: Sequence[str] = ()) -> None:
        """Log a fatal error and its remediation lines on standard error.

        Args:
            message: Text describing the failure.
            remediation: Optional lines suggesting how to resolve it.
        """

        fail(message, use_emoji=self.use_emoji, use_color=self.use_color, stderr=True, console=self.err_console)
        for line in remediation:
            self.stderr_console().print(f"  {line}", highlight=False, markup=False)

    def section(self, title: str) -> None:
        """Render a section header."""

        color = detect_tty() if self.use_color is None else self.use_color
        section(title, use_color=color, console=self.console)

    def echo(self, message: str = "") -> None:
        """Write ``message`` verbatim to the regular output stream."""

        self.stdout_console().print(message, highlight=False, markup=False)

    def render(self, renderable: RenderableType) -> None:
        """Print a Rich renderable such as a table or panel."""

        self.stdout_console().print(renderable)

    def debug(self, message: str) -> None:
        """Emit a dimmed debug line when debug output is enabled."""

        if self.debug_enabled:
            self.stdout_console().print(Text(f"[debug] {message}", style="dim"))

    def stdout_console(self) -> Console:
        """Return the console used for regular output."""

        if self.console is not None:
            return self.console
        color = detect_tty() if self.use_color is None else self.use_color
        return get_console_manager().get(color=color, emoji=self.use_emoji)

    def stderr_console(self) -> Console:
        """Return the console used for fatal errors."""

        if self.err_console is not None:
            return self.err_console
        color = detect_tty() if self.use_color is None else self.use_color
        return get_console_manager().get(color=color, emoji=self.use_emoji, stderr=True)


def build_cli_logger(*, emoji: bool = True, color: bool | None = None, debug: bool = False) -> CLILogger:
    """Return a ``CLILogger`` bound to the shared console manager.

    Args:
        emoji: Whether log output may include emoji glyphs.
        color: Explicit colour preference; ``None`` follows TTY detection.
        debug: Whether debug logging should be enabled.

    Returns:
        CLILogger: Logger honouring the given preferences.
    """

    return CLILogger(use_emoji=emoji, use_color=color, debug_enabled=debug)


__all__ = ["CLILogger", "build_cli_logger", "emoji", "fail", "info", "ok", "section", "warn"]
