# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Tests for the interactive setup workflow."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from support import BufferedLogger, FakeRunner, ScriptedPrompter, completed

from wthooks.config.document import CONFIG_FILENAME, build_document, dump_document, parse_document
from wthooks.environment import CapabilityProbe
from wthooks.errors import HookInstallError, NoValidSelectionError, UserDeclinedError
from wthooks.setup.context import SetupContext
from wthooks.setup.orchestrator import SetupOutcome, SetupState, run_setup

FIXED = datetime(2025, 6, 1, 12, 0, 0)
EXISTING = dump_document(build_document(("custom-php-script",)))


def _runner(root: Path) -> FakeRunner:
    return (
        FakeRunner()
        .on(["git", "rev-parse", "--show-toplevel"], f"{root}\n")
        .on(["git", "rev-parse", "--git-path"], ".git/hooks/pre-commit\n")
        .on(["python3", "--version"], "Python 3.12.4\n")
        .on(["pre-commit", "--version"], "pre-commit 3.7.1\n")
    )


def _probe(installed: set[str]) -> CapabilityProbe:
    return CapabilityProbe(which=lambda name: f"/usr/bin/{name}" if name in installed else None)


def _context(
    root: Path,
    logger: BufferedLogger,
    *,
    runner: FakeRunner | None = None,
    tools: Iterable[str] = ("git", "python3", "pre-commit"),
    installed: set[str] | None = None,
    confirms: list[bool] | None = None,
    answers: list[str] | None = None,
) -> SetupContext:
    return SetupContext(
        cwd=root,
        prompter=ScriptedPrompter(confirms=confirms or [], answers=answers or []),
        logger=logger.logger,
        runner=runner or _runner(root),
        probe=_probe(installed if installed is not None else set(tools)),
        clock=lambda: FIXED,
        system="Linux",
    )


def _install_hook_file(root: Path) -> None:
    hooks = root / ".git" / "hooks"
    hooks.mkdir(parents=True)
    (hooks / "pre-commit").write_text("#!/usr/bin/env bash\n# File generated by pre-commit\n", encoding="utf-8")


def test_fresh_setup_writes_config_and_installs_hook(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    runner = _runner(tmp_path)
    ctx = _context(tmp_path, buffered_logger, runner=runner, confirms=[False], answers=["5,7"])

    result = run_setup(ctx)

    assert result.outcome is SetupOutcome.COMPLETED
    assert result.exit_code == 0
    assert result.history == (
        SetupState.START,
        SetupState.DETECT_OS,
        SetupState.VERIFY_GIT_REPO,
        SetupState.VERIFY_SCRIPT_RUNTIME,
        SetupState.VERIFY_OR_INSTALL_HOOK_MANAGER,
        SetupState.CHECK_EXISTING_CONFIG,
        SetupState.SELECT_STACKS,
        SetupState.GENERATE_CONFIG,
        SetupState.INSTALL_HOOK,
        SetupState.OPTIONAL_FULL_RUN,
        SetupState.PRINT_REQUIREMENTS,
        SetupState.DONE,
    )
    config = parse_document((tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8"))
    assert config.hook_identifiers == ("custom-js-script", "custom-python-script")
    commands = runner.commands()
    assert "pre-commit install" in commands
    assert "pre-commit run --all-files" not in commands
    assert ctx.backup is None
    output = buffered_logger.stdout
    assert "Detected OS: Linux" in output
    assert "Python found: Python 3.12.4" in output
    assert "    - JavaScript / TypeScript\n    - Python" in output
    assert "Pre-commit hook installed successfully!" in output
    assert "Setup Complete!" in output
    assert buffered_logger.stderr == ""


def test_declining_reconfigure_leaves_everything_untouched(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(EXISTING, encoding="utf-8")
    _install_hook_file(tmp_path)
    runner = _runner(tmp_path)
    ctx = _context(tmp_path, buffered_logger, runner=runner, confirms=[False])

    result = run_setup(ctx)

    assert result.outcome is SetupOutcome.UNCHANGED
    assert result.exit_code == 0
    assert result.history[-2:] == (SetupState.CHECK_EXISTING_CONFIG, SetupState.DONE)
    assert (tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8") == EXISTING
    assert "pre-commit install" not in runner.commands()
    assert "Setup complete. No changes made." in buffered_logger.stdout
    assert sorted(path.name for path in tmp_path.iterdir()) == [".git", CONFIG_FILENAME]


def test_keeping_config_without_hook_installs_hook_only(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(EXISTING, encoding="utf-8")
    runner = _runner(tmp_path)
    ctx = _context(tmp_path, buffered_logger, runner=runner, confirms=[False])

    result = run_setup(ctx)

    assert result.outcome is SetupOutcome.KEPT_CONFIG
    assert result.exit_code == 0
    assert "pre-commit install" in runner.commands()
    assert (tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8") == EXISTING
    assert "exists but hook is not installed" in buffered_logger.stdout
    assert "Keeping existing config. Installing the hook..." in buffered_logger.stdout


def test_reconfigure_backs_up_previous_document(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(EXISTING, encoding="utf-8")
    _install_hook_file(tmp_path)
    ctx = _context(tmp_path, buffered_logger, confirms=[True, False], answers=["7"])

    result = run_setup(ctx)

    backup = tmp_path / f"{CONFIG_FILENAME}.backup.20250601_120000"
    assert result.outcome is SetupOutcome.COMPLETED
    assert ctx.backup == backup
    assert backup.read_text(encoding="utf-8") == EXISTING
    assert parse_document((tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8")).hook_identifiers == (
        "custom-python-script",
    )
    assert f"Existing config backed up to: {backup.name}" in buffered_logger.stdout


def test_foreign_hooks_in_existing_config_are_reported(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(
        "repos:\n- repo: https://github.com/psf/black\n  rev: 24.4.2\n  hooks:\n  - id: black\n",
        encoding="utf-8",
    )
    _install_hook_file(tmp_path)

    run_setup(_context(tmp_path, buffered_logger, confirms=[False]))

    assert "Existing config also declares hooks from other sources: black" in buffered_logger.stdout


def test_declining_hook_manager_install_halts(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    ctx = _context(tmp_path, buffered_logger, tools=("git", "python3"), confirms=[False])

    result = run_setup(ctx)

    assert result.outcome is SetupOutcome.HALTED
    assert result.exit_code == 1
    assert isinstance(result.error, UserDeclinedError)
    assert result.history[-1] is SetupState.VERIFY_OR_INSTALL_HOOK_MANAGER
    assert "pre-commit is required. Exiting." in buffered_logger.stderr
    assert not (tmp_path / CONFIG_FILENAME).exists()


def test_hook_manager_is_installed_with_pip(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    installed = {"git", "python3", "pip3"}

    def pip_install(command: list[str], kwargs: dict[str, Any]) -> Any:
        installed.add("pre-commit")
        return completed(command)

    runner = _runner(tmp_path).on(["pip3", "install", "pre-commit"], pip_install)
    ctx = _context(tmp_path, buffered_logger, runner=runner, installed=installed, confirms=[True, False], answers=["7"])

    result = run_setup(ctx)

    assert result.outcome is SetupOutcome.COMPLETED
    assert "pip3 install pre-commit" in runner.commands()
    assert "pre-commit installed successfully: pre-commit 3.7.1" in buffered_logger.stdout


def test_failed_pip_install_halts_with_manual_hint(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    runner = _runner(tmp_path).on(["pip3", "install"], 1)
    ctx = _context(tmp_path, buffered_logger, runner=runner, tools=("git", "python3", "pip3"), confirms=[True])

    result = run_setup(ctx)

    assert result.outcome is SetupOutcome.HALTED
    assert "pre-commit installation failed. Please install it manually:" in buffered_logger.stderr
    assert "  pip install pre-commit" in buffered_logger.stderr


def test_missing_pip_halts(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    ctx = _context(tmp_path, buffered_logger, tools=("git", "python3"), confirms=[True])

    result = run_setup(ctx)

    assert result.outcome is SetupOutcome.HALTED
    assert "pip is not installed. Cannot install pre-commit automatically." in buffered_logger.stderr


def test_missing_git_prints_platform_hints(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    result = run_setup(_context(tmp_path, buffered_logger, tools=("python3",)))

    assert result.outcome is SetupOutcome.HALTED
    assert result.history[-1] is SetupState.VERIFY_GIT_REPO
    assert "git is not installed. Please install git first." in buffered_logger.stderr
    assert "sudo apt install git" in buffered_logger.stderr


def test_missing_python_halts(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    result = run_setup(_context(tmp_path, buffered_logger, tools=("git",)))

    assert result.outcome is SetupOutcome.HALTED
    assert "Python is not installed. Python is required to install pre-commit." in buffered_logger.stderr


def test_outside_repository_halts(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    runner = FakeRunner().on(["git", "rev-parse"], 128)

    result = run_setup(_context(tmp_path, buffered_logger, runner=runner))

    assert result.outcome is SetupOutcome.HALTED
    assert "Not inside a git repository!" in buffered_logger.stderr


@pytest.mark.parametrize("answer", ["", "99,abc"])
def test_invalid_selection_writes_nothing(tmp_path: Path, buffered_logger: BufferedLogger, answer: str) -> None:
    runner = _runner(tmp_path)
    ctx = _context(tmp_path, buffered_logger, runner=runner, answers=[answer])

    result = run_setup(ctx)

    assert result.outcome is SetupOutcome.HALTED
    assert result.exit_code == 1
    assert isinstance(result.error, NoValidSelectionError)
    assert result.history[-1] is SetupState.SELECT_STACKS
    assert list(tmp_path.iterdir()) == []
    assert "pre-commit install" not in runner.commands()
    assert "Exiting." in buffered_logger.stderr


def test_partial_selection_warns_and_continues(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    ctx = _context(tmp_path, buffered_logger, confirms=[False], answers=["7,abc,7"])

    result = run_setup(ctx)

    assert result.outcome is SetupOutcome.COMPLETED
    assert result.selection is not None
    assert result.selection.hook_identifiers == ("custom-python-script",)
    assert "Invalid selection: 'abc' (skipped)" in buffered_logger.stdout
    assert "Duplicate selection: '7' (skipped)" in buffered_logger.stdout


def test_hook_install_failure_reports_tool_output(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    def refuse(command: list[str], kwargs: dict[str, Any]) -> Any:
        return completed(command, 1, stderr="[ERROR] Cowardly refusing to install hooks with `core.hooksPath` set.")

    runner = _runner(tmp_path).on(["pre-commit", "install"], refuse)
    ctx = _context(tmp_path, buffered_logger, runner=runner, answers=["1"])

    result = run_setup(ctx)

    assert result.outcome is SetupOutcome.HALTED
    assert isinstance(result.error, HookInstallError)
    assert result.history[-1] is SetupState.INSTALL_HOOK
    assert (tmp_path / CONFIG_FILENAME).is_file()
    assert "Failed to install pre-commit hook." in buffered_logger.stderr
    assert "Cowardly refusing to install hooks" in buffered_logger.stderr


def test_full_run_failure_is_not_fatal(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    runner = _runner(tmp_path).on(["pre-commit", "run", "--all-files"], 1)
    ctx = _context(tmp_path, buffered_logger, runner=runner, confirms=[True], answers=["2"])

    result = run_setup(ctx)

    assert result.outcome is SetupOutcome.COMPLETED
    assert result.exit_code == 0
    assert ctx.full_run_passed is False
    assert "Some hooks reported issues on existing files." in buffered_logger.stdout
