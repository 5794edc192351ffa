# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Tests for the per-stack check sequences and the stack registry."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from support import BufferedLogger, FakeRunner, make_probe

from wthooks.config.settings import WtHooksSettings
from wthooks.errors import FatalEnvironmentError, WtHooksError
from wthooks.hooks.context import CheckContext
from wthooks.hooks.models import CheckSpec, StackHook
from wthooks.hooks.registry import available_hooks, hook_for, missing_hooks, run_stack
from wthooks.hooks.stacks.dotnet import DOTNET_HOOK, discover_build_target, sdk_major_version
from wthooks.hooks.stacks.flutter import FLUTTER_HOOK
from wthooks.hooks.stacks.php import detect_frameworks, lint_syntax
from wthooks.hooks.stacks.python import (
    PYTHON_HOOK,
    find_conflict_markers,
    fix_whitespace,
    normalise_whitespace,
    related_tests,
    syntax_check,
)
from wthooks.hooks.stacks.ror import bundled, check_gitignore, check_migrations, find_hardcoded_secrets
from wthooks.logging import CLILogger
from wthooks.severity import CheckSeverity
from wthooks.stacks import DEFAULT_STACKS


def _write(root: Path, relative: str, content: str | bytes = "") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


def _context(
    root: Path,
    runner: FakeRunner | None = None,
    *,
    staged: tuple[str, ...] = (),
    tools: tuple[str, ...] = (),
) -> CheckContext:
    return CheckContext(
        root=root,
        staged=tuple(Path(name) for name in staged),
        settings=WtHooksSettings(),
        probe=make_probe(tools),
        runner=runner or FakeRunner(),
        logger=CLILogger(use_emoji=False, use_color=False),
    )


def _check(checks: tuple[CheckSpec, ...], name: str) -> CheckSpec:
    return next(check for check in checks if check.name == name)


# registry


def test_every_stack_has_a_hook() -> None:
    assert [hook.key for hook in available_hooks()] == [stack.key for stack in DEFAULT_STACKS]
    assert missing_hooks() == ()


@pytest.mark.parametrize("hook", available_hooks(), ids=lambda hook: hook.key)
def test_check_names_are_unique(hook: StackHook) -> None:
    names = hook.check_names()
    assert names
    assert len(names) == len(set(names))


def test_hook_lookup_normalises_key() -> None:
    assert hook_for(" PHP ").key == "php"


def test_unknown_stack_is_a_usage_error() -> None:
    with pytest.raises(WtHooksError, match="Unknown stack 'cobol'") as excinfo:
        hook_for("cobol")
    assert excinfo.value.exit_code == 2


# python


def test_conflict_markers_are_detected(tmp_path: Path) -> None:
    _write(tmp_path, "clean.py", "value = '======='\n")
    _write(tmp_path, "merged.py", "<<<<<<< HEAD\na = 1\n=======\na = 2\n>>>>>>> feature\n")
    files = (Path("clean.py"), Path("merged.py"))

    result = find_conflict_markers(_context(tmp_path), files)

    assert not result.passed
    assert result.details == ("merged.py",)
    assert find_conflict_markers(_context(tmp_path), files[:1]).passed


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("a = 1   \nb = 2\t\n", "a = 1\nb = 2\n"),
        ("no newline", "no newline\n"),
        ("", ""),
        ("clean\n", "clean\n"),
    ],
)
def test_normalise_whitespace(text: str, expected: str) -> None:
    assert normalise_whitespace(text) == expected


def test_fix_whitespace_rewrites_only_text_files_that_change(tmp_path: Path) -> None:
    _write(tmp_path, "dirty.py", "x = 1  \n")
    _write(tmp_path, "clean.py", "y = 2\n")
    _write(tmp_path, "logo.png", b"\x89PNG\0\0  ")

    result = fix_whitespace(_context(tmp_path), (Path("dirty.py"), Path("clean.py"), Path("logo.png")))

    assert result.passed
    assert result.modified == (Path("dirty.py"),)
    assert (tmp_path / "dirty.py").read_text(encoding="utf-8") == "x = 1\n"
    assert (tmp_path / "logo.png").read_bytes() == b"\x89PNG\0\0  "


def test_syntax_check_collects_parse_errors(tmp_path: Path) -> None:
    def load(path: Path) -> None:
        json.loads(path.read_text(encoding="utf-8"))

    _write(tmp_path, "good.json", '{"a": 1}')
    _write(tmp_path, "bad.json", '{"a": ')

    result = syntax_check("JSON", load)(_context(tmp_path), (Path("good.json"), Path("bad.json")))

    assert not result.passed
    assert result.message == "JSON validation failed!"
    assert len(result.details) == 1
    assert result.details[0].startswith("bad.json:")


def test_yaml_check_rejects_broken_yaml(tmp_path: Path) -> None:
    _write(tmp_path, "ok.yaml", "---\na: 1\n---\nb: 2\n")
    _write(tmp_path, "broken.yml", "a: [1, 2\n")
    check = _check(PYTHON_HOOK.checks, "yaml-syntax")

    result = check.internal(_context(tmp_path), (Path("ok.yaml"), Path("broken.yml")))

    assert not result.passed
    assert result.details[0].startswith("broken.yml:")


def test_related_tests_finds_conventional_locations(tmp_path: Path) -> None:
    _write(tmp_path, "pkg/models.py")
    _write(tmp_path, "pkg/views.py")
    _write(tmp_path, "pkg/utils.py")
    _write(tmp_path, "pkg/test_models.py")
    _write(tmp_path, "tests/pkg/test_views.py")
    _write(tmp_path, "tests/test_api.py")
    staged = ("pkg/models.py", "pkg/views.py", "pkg/utils.py", "tests/test_api.py")

    found = related_tests(_context(tmp_path, staged=staged))

    assert found == (Path("pkg/test_models.py"), Path("tests/pkg/test_views.py"), Path("tests/test_api.py"))


def test_python_stack_end_to_end(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    _write(tmp_path, "app.py", "x = 1   \n")
    _write(tmp_path, "config.yaml", "a: 1\n")
    runner = (
        FakeRunner()
        .on(["git", "rev-parse", "--show-toplevel"], f"{tmp_path}\n")
        .on(["git", "diff", "--cached"], "app.py\nconfig.yaml\n")
    )

    report = run_stack(
        "python",
        cwd=tmp_path,
        logger=buffered_logger.logger,
        runner=runner,
        probe=make_probe(()),
        settings=WtHooksSettings(),
    )

    assert report.exit_code == 0
    assert (tmp_path / "app.py").read_text(encoding="utf-8") == "x = 1\n"
    assert ["git", "add", "--", "app.py"] in runner.calls
    outcomes = {outcome.name: outcome for outcome in report.outcomes}
    assert outcomes["whitespace"].restaged == (Path("app.py"),)
    assert outcomes["json-syntax"].skipped
    assert outcomes["black"].severity is CheckSeverity.WARNING
    assert outcomes["detect-secrets"].message == "No .secrets.baseline found, skipping secret detection"
    assert "All pre-commit checks passed!" in buffered_logger.stdout


def test_python_stack_halts_on_conflict_markers(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    _write(tmp_path, "app.py", "<<<<<<< HEAD\nx = 1   \n=======\nx = 2\n>>>>>>> other\n")
    runner = (
        FakeRunner()
        .on(["git", "rev-parse", "--show-toplevel"], f"{tmp_path}\n")
        .on(["git", "diff", "--cached"], "app.py\n")
    )

    report = run_stack(
        "python",
        cwd=tmp_path,
        logger=buffered_logger.logger,
        runner=runner,
        probe=make_probe(()),
        settings=WtHooksSettings(),
    )

    assert report.exit_code == 1
    assert report.halted_at == "merge-conflicts"
    assert [outcome.name for outcome in report.outcomes] == ["merge-conflicts"]
    assert "x = 1   \n" in (tmp_path / "app.py").read_text(encoding="utf-8")
    assert not any(call[:2] == ["git", "add"] for call in runner.calls)


def test_stack_precondition_failure_is_fatal(tmp_path: Path, buffered_logger: BufferedLogger) -> None:
    runner = (
        FakeRunner()
        .on(["git", "rev-parse", "--show-toplevel"], f"{tmp_path}\n")
        .on(["git", "diff", "--cached"], "")
    )

    with pytest.raises(FatalEnvironmentError, match="Gradle wrapper not found"):
        run_stack("android", cwd=tmp_path, logger=buffered_logger.logger, runner=runner, settings=WtHooksSettings())


# dotnet


def test_build_target_prefers_solution(tmp_path: Path) -> None:
    assert discover_build_target(tmp_path) == "."

    _write(tmp_path, "src/Api/Api.csproj")
    _write(tmp_path, "Lib/Lib.csproj")
    assert discover_build_target(tmp_path) == "Lib/Lib.csproj"

    _write(tmp_path, "App.sln")
    assert discover_build_target(tmp_path) == "App.sln"


@pytest.mark.parametrize(
    ("version", "expected_mode"),
    [("8.0.100\n", "--verify-no-changes"), ("5.0.408\n", "--check")],
)
def test_format_mode_follows_sdk_version(tmp_path: Path, version: str, expected_mode: str) -> None:
    runner = FakeRunner().on(["dotnet", "--version"], version)
    ctx = _context(tmp_path, runner, tools=("dotnet",))

    args = _check(DOTNET_HOOK.checks, "format").args_factory(ctx)

    assert sdk_major_version(ctx) == int(version.split(".")[0])
    assert args == ["format", ".", expected_mode, "--verbosity", "quiet"]


# php


def test_php_lint_reports_each_broken_file(tmp_path: Path) -> None:
    _write(tmp_path, "index.php", "<?php echo 1;")
    _write(tmp_path, "src/Broken.php", "<?php echo ;")
    _write(tmp_path, "vendor/lib/Ignored.php", "<?php")
    runner = FakeRunner().on(["php", "-l", "src/Broken.php"], 255)

    result = lint_syntax(_context(tmp_path, runner), ())

    assert not result.passed
    assert result.details == ("Syntax error in: src/Broken.php",)
    assert runner.commands() == ["php -l index.php", "php -l src/Broken.php"]


def test_laravel_project_is_detected(tmp_path: Path) -> None:
    _write(tmp_path, "artisan", "#!/usr/bin/env php")
    _write(tmp_path, "app/Http/Kernel.php", "<?php")
    _write(tmp_path, "app/Models/User.php", "<?php DB::table('users');")

    result = detect_frameworks(_context(tmp_path), ())

    assert result.message == "Laravel project detected"
    assert result.details == ("Found DB facade usage. Consider using Eloquent models or Query Builder",)
    assert detect_frameworks(_context(tmp_path / "plain"), ()).passed


# ror


def test_bundled_command_prefers_bundle_exec(tmp_path: Path) -> None:
    factory = bundled("rubocop", "rubocop", "--autocorrect")

    in_bundle = _context(tmp_path, FakeRunner().on(["bundle", "show", "rubocop"], 0))
    assert factory(in_bundle) == ["bundle", "exec", "rubocop", "--autocorrect"]

    global_only = _context(tmp_path, FakeRunner().on(["bundle", "show"], 1), tools=("rubocop",))
    assert factory(global_only) == ["rubocop", "--autocorrect"]

    absent = _context(tmp_path, FakeRunner().on(["bundle", "show"], 1))
    assert factory(absent) is None


def test_gitignore_lists_missing_entries(tmp_path: Path) -> None:
    assert check_gitignore(_context(tmp_path), ()).passed

    _write(tmp_path, ".gitignore", "*.log\n/tmp\n/log\n")
    result = check_gitignore(_context(tmp_path), ())

    assert not result.passed
    assert result.message == "Consider adding to .gitignore: master.key .env"


def test_schema_committed_without_migration_is_flagged(tmp_path: Path) -> None:
    schema = _write(tmp_path, "db/schema.rb", "ActiveRecord::Schema.define {}")
    migration = _write(tmp_path, "db/migrate/20250101000000_create_users.rb", "class CreateUsers; end")
    stamp = schema.stat().st_mtime
    os.utime(migration, (stamp - 60, stamp - 60))

    result = check_migrations(_context(tmp_path, staged=("db/schema.rb",)), ())

    assert not result.passed
    assert result.details == ("schema.rb is being committed without migration files. Make sure this is intentional",)

    os.utime(migration, (stamp + 60, stamp + 60))
    pending = check_migrations(_context(tmp_path, staged=("db/schema.rb", migration.relative_to(tmp_path).as_posix())), ())
    assert pending.details == ("Potential pending migrations detected. Run 'rails db:migrate' to apply migrations",)


def test_hardcoded_secrets_ignore_specs(tmp_path: Path) -> None:
    _write(tmp_path, "spec/client_spec.rb", "api_key = 'abc123'")
    assert find_hardcoded_secrets(_context(tmp_path), ()).passed

    _write(tmp_path, "app/services/client.rb", "password = \"hunter2\"")
    assert not find_hardcoded_secrets(_context(tmp_path), ()).passed


# flutter


def test_dart_format_targets_existing_directories(tmp_path: Path) -> None:
    check = _check(FLUTTER_HOOK.checks, "dart-format")
    assert check.args_factory(_context(tmp_path)) == ["format", "--set-exit-if-changed", "lib/"]

    (tmp_path / "lib").mkdir()
    (tmp_path / "test").mkdir()
    assert check.args_factory(_context(tmp_path)) == ["format", "--set-exit-if-changed", "lib/", "test/"]
