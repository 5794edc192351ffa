# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""State machine driving the interactive pre-commit setup."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from ..config.document import CONFIG_FILENAME, dump_document, parse_document
from ..config.generator import generate
from ..environment import (
    detect_existing_config,
    detect_hook_path,
    detect_os,
    detect_project_root,
    detect_project_types,
    hook_installed,
    install_hints,
)
from ..errors import ConfigError, FatalEnvironmentError, HookInstallError, UserDeclinedError, WtHooksError
from ..selection import Selection, parse_selection
from . import render
from .context import SetupContext

HOOK_MANAGER: Final[str] = "pre-commit"


class SetupState(str, Enum):
    """Steps of the setup workflow, in execution order."""

    START = "start"
    DETECT_OS = "detect-os"
    VERIFY_GIT_REPO = "verify-git-repo"
    VERIFY_SCRIPT_RUNTIME = "verify-script-runtime"
    VERIFY_OR_INSTALL_HOOK_MANAGER = "verify-or-install-hook-manager"
    CHECK_EXISTING_CONFIG = "check-existing-config"
    SELECT_STACKS = "select-stacks"
    GENERATE_CONFIG = "generate-config"
    INSTALL_HOOK = "install-hook"
    OPTIONAL_FULL_RUN = "optional-full-run"
    PRINT_REQUIREMENTS = "print-requirements"
    DONE = "done"


class SetupOutcome(str, Enum):
    """Terminal results of a setup run."""

    COMPLETED = "completed"
    UNCHANGED = "unchanged"
    KEPT_CONFIG = "kept-config"
    HALTED = "halted"


@dataclass(frozen=True, slots=True)
class SetupResult:
    """Summary of a finished setup run."""

    outcome: SetupOutcome
    exit_code: int
    history: tuple[SetupState, ...]
    selection: Selection | None = None
    error: WtHooksError | None = None


StepResult = SetupState | SetupOutcome
Step = Callable[[SetupContext], StepResult]


def _tool_version(ctx: SetupContext, args: Sequence[str]) -> str:
    """Return the first line printed by a ``--version`` invocation."""

    try:
        completed = ctx.runner(list(args), cwd=ctx.root, check=False, capture_output=True)
    except FileNotFoundError:
        return "unknown version"
    output = f"{completed.stdout or ''}\n{completed.stderr or ''}".strip()
    return output.splitlines()[0] if output else "unknown version"


def _start(ctx: SetupContext) -> StepResult:
    ctx.logger.render(render.banner())
    return SetupState.DETECT_OS


def _detect_os(ctx: SetupContext) -> StepResult:
    ctx.os_name = detect_os(ctx.system)
    ctx.logger.info(f"Detected OS: {ctx.os_name.value}")
    return SetupState.VERIFY_GIT_REPO


def _verify_git_repo(ctx: SetupContext) -> StepResult:
    ctx.probe.require(
        "git",
        message="git is not installed. Please install git first.",
        remediation=install_hints("git", ctx.os_name),
    )
    ctx.logger.ok("git is installed.")
    ctx.root = detect_project_root(ctx.cwd, runner=ctx.runner)
    ctx.logger.ok(f"Git repository found at: {ctx.root}")
    return SetupState.VERIFY_SCRIPT_RUNTIME


def _verify_script_runtime(ctx: SetupContext) -> StepResult:
    capability = ctx.probe.first_present(("python3", "python"))
    if capability is None:
        raise FatalEnvironmentError(
            "Python is not installed. Python is required to install pre-commit.",
            remediation=install_hints("python", ctx.os_name),
        )
    ctx.python = capability.name
    ctx.logger.ok(f"Python found: {_tool_version(ctx, [capability.name, '--version'])}")
    return SetupState.VERIFY_OR_INSTALL_HOOK_MANAGER


def _verify_or_install_hook_manager(ctx: SetupContext) -> StepResult:
    if ctx.probe.check_required_tool(HOOK_MANAGER):
        ctx.logger.ok(f"pre-commit is already installed: {_tool_version(ctx, [HOOK_MANAGER, '--version'])}")
        return SetupState.CHECK_EXISTING_CONFIG

    ctx.logger.warn("pre-commit is not installed.")
    if not ctx.prompter.confirm("Do you want to install pre-commit now?"):
        raise UserDeclinedError("pre-commit is required. Exiting.")

    ctx.logger.info("Installing pre-commit...")
    pip = ctx.probe.first_present(("pip3", "pip"))
    if pip is None:
        raise FatalEnvironmentError(
            "pip is not installed. Cannot install pre-commit automatically.",
            remediation=install_hints("pip", ctx.os_name, python=ctx.python or "python3"),
        )
    try:
        ctx.runner([pip.name, "install", HOOK_MANAGER], cwd=ctx.root, check=False, capture_output=False)
    except FileNotFoundError as exc:
        raise FatalEnvironmentError(f"Unable to run {pip.name}: {exc}") from exc
    if not ctx.probe.refresh(HOOK_MANAGER).present:
        raise FatalEnvironmentError(
            "pre-commit installation failed. Please install it manually:",
            remediation=("pip install pre-commit",),
        )
    ctx.logger.ok(f"pre-commit installed successfully: {_tool_version(ctx, [HOOK_MANAGER, '--version'])}")
    return SetupState.CHECK_EXISTING_CONFIG


def _warn_on_unparseable(ctx: SetupContext, content: str | None) -> None:
    if content is None:
        ctx.logger.warn(f"Existing {CONFIG_FILENAME} could not be read.")
        return
    try:
        document = parse_document(content)
    except ConfigError as exc:
        ctx.logger.warn(f"Existing {CONFIG_FILENAME} is not a valid hook config: {exc}")
        return
    unknown = document.unknown_hooks(ctx.table)
    if unknown:
        ctx.logger.info(f"Existing config also declares hooks from other sources: {', '.join(unknown)}")


def _check_existing_config(ctx: SetupContext) -> StepResult:
    root = ctx.project_root
    ctx.existing = detect_existing_config(ctx.config_path)
    ctx.hook_path = detect_hook_path(root, runner=ctx.runner)
    ctx.hook_present = hook_installed(ctx.hook_path)

    if not ctx.existing.present:
        return SetupState.SELECT_STACKS

    if ctx.hook_present:
        ctx.logger.ok("Pre-commit hook is already set up!")
        ctx.logger.info(f"Current {CONFIG_FILENAME}:")
        ctx.logger.render(render.config_panel(ctx.existing.content or "", title=CONFIG_FILENAME))
        _warn_on_unparseable(ctx, ctx.existing.content)
        if not ctx.prompter.confirm("Do you want to reconfigure?"):
            ctx.logger.ok("Setup complete. No changes made.")
            return SetupOutcome.UNCHANGED
        return SetupState.SELECT_STACKS

    ctx.logger.warn(f"{CONFIG_FILENAME} exists but hook is not installed.")
    _warn_on_unparseable(ctx, ctx.existing.content)
    if not ctx.prompter.confirm("Do you want to reconfigure the config file?"):
        ctx.logger.info("Keeping existing config. Installing the hook...")
        _install_hook(ctx)
        return SetupOutcome.KEPT_CONFIG
    return SetupState.SELECT_STACKS


def _select_stacks(ctx: SetupContext) -> StepResult:
    ctx.detected = detect_project_types(ctx.project_root, ctx.table)
    ctx.logger.render(render.stack_menu(ctx.table, ctx.detected))
    raw = ctx.prompter.ask("Enter your choice(s)")
    ctx.selection = parse_selection(raw, ctx.table, on_warning=ctx.logger.warn)
    ctx.logger.info("You selected:")
    for name in ctx.selection.display_names:
        ctx.logger.echo(f"    - {name}")
    return SetupState.GENERATE_CONFIG


def _record_backup(ctx: SetupContext) -> Callable[[Path], None]:
    def _on_backup(path: Path) -> None:
        ctx.backup = path
        ctx.logger.warn(f"Existing config backed up to: {path.name}")

    return _on_backup


def _generate_config(ctx: SetupContext) -> StepResult:
    if ctx.selection is None:
        raise WtHooksError("No stacks were selected before generating the config.")
    ctx.logger.info(f"Generating {CONFIG_FILENAME}...")
    ctx.document = generate(ctx.selection, ctx.config_path, clock=ctx.clock, on_backup=_record_backup(ctx))
    ctx.logger.ok(f"Config file created at: {ctx.config_path}")
    ctx.logger.render(render.config_panel(dump_document(ctx.document), title=CONFIG_FILENAME))
    return SetupState.INSTALL_HOOK


def _install_hook(ctx: SetupContext) -> None:
    """Run ``pre-commit install`` in the repository root.

    Raises:
        HookInstallError: If the install step cannot run or exits non-zero;
            its output is attached verbatim as remediation lines.
    """

    ctx.logger.info("Installing pre-commit hook into .git/hooks...")
    try:
        completed = ctx.runner([HOOK_MANAGER, "install"], cwd=ctx.project_root, check=False, capture_output=True)
    except FileNotFoundError as exc:
        raise HookInstallError(f"Failed to install pre-commit hook: {exc}") from exc
    if completed.returncode != 0:
        output = f"{completed.stdout or ''}\n{completed.stderr or ''}".strip()
        raise HookInstallError("Failed to install pre-commit hook.", remediation=tuple(output.splitlines()))
    ctx.logger.ok("Pre-commit hook installed successfully!")


def _install_hook_step(ctx: SetupContext) -> StepResult:
    _install_hook(ctx)
    return SetupState.OPTIONAL_FULL_RUN


def _optional_full_run(ctx: SetupContext) -> StepResult:
    if not ctx.prompter.confirm("Run pre-commit on all existing files now?"):
        return SetupState.PRINT_REQUIREMENTS
    ctx.logger.info("Running pre-commit on all files (this may take a while)...")
    try:
        completed = ctx.runner(
            [HOOK_MANAGER, "run", "--all-files"],
            cwd=ctx.project_root,
            check=False,
            capture_output=False,
        )
    except FileNotFoundError as exc:
        ctx.full_run_passed = False
        ctx.logger.warn(f"Could not run pre-commit on all files: {exc}")
        return SetupState.PRINT_REQUIREMENTS
    ctx.full_run_passed = completed.returncode == 0
    if ctx.full_run_passed:
        ctx.logger.ok("All hooks passed on existing files.")
    else:
        ctx.logger.warn("Some hooks reported issues on existing files. Fix them before your next commit.")
    return SetupState.PRINT_REQUIREMENTS


def _print_requirements(ctx: SetupContext) -> StepResult:
    ctx.logger.render(render.requirements_panel(ctx.selection or ()))
    ctx.logger.render(render.summary_panel())
    return SetupState.DONE


STEPS: Final[dict[SetupState, Step]] = {
    SetupState.START: _start,
    SetupState.DETECT_OS: _detect_os,
    SetupState.VERIFY_GIT_REPO: _verify_git_repo,
    SetupState.VERIFY_SCRIPT_RUNTIME: _verify_script_runtime,
    SetupState.VERIFY_OR_INSTALL_HOOK_MANAGER: _verify_or_install_hook_manager,
    SetupState.CHECK_EXISTING_CONFIG: _check_existing_config,
    SetupState.SELECT_STACKS: _select_stacks,
    SetupState.GENERATE_CONFIG: _generate_config,
    SetupState.INSTALL_HOOK: _install_hook_step,
    SetupState.OPTIONAL_FULL_RUN: _optional_full_run,
    SetupState.PRINT_REQUIREMENTS: _print_requirements,
}


def run_setup(ctx: SetupContext) -> SetupResult:
    """Drive the setup workflow from ``START`` to a terminal outcome.

    Each step returns the next state or a terminal :class:`SetupOutcome`. A
    :class:`WtHooksError` raised by any step halts the run; its message and
    remediation lines are written to standard error.

    Args:
        ctx: Context carrying collaborators and accumulated facts.

    Returns:
        SetupResult: Terminal outcome, exit code, and visited states.
    """

    state = SetupState.START
    outcome = SetupOutcome.COMPLETED
    try:
        while state is not SetupState.DONE:
            ctx.history.append(state)
            step = STEPS[state](ctx)
            if isinstance(step, SetupOutcome):
                outcome = step
                break
            state = step
    except WtHooksError as exc:
        ctx.logger.error(str(exc), exc.remediation)
        return SetupResult(
            outcome=SetupOutcome.HALTED,
            exit_code=exc.exit_code,
            history=tuple(ctx.history),
            selection=ctx.selection,
            error=exc,
        )
    ctx.history.append(SetupState.DONE)
    return SetupResult(outcome=outcome, exit_code=0, history=tuple(ctx.history), selection=ctx.selection)


__all__ = ["HOOK_MANAGER", "STEPS", "SetupOutcome", "SetupResult", "SetupState", "run_setup"]
