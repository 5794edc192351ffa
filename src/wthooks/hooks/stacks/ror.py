# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Ruby on Rails checks: gems, style, syntax, security, tests, and advisories."""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from ...severity import CheckSeverity
from ..context import CheckContext
from ..models import CheckSpec, CommandFactory, InternalResult, Precondition, StackHook
from ..scans import (
    file_matches,
    iter_project_files,
    large_file_advisory,
    pattern_advisory,
    sensitive_file_advisory,
)

GITIGNORE_ENTRIES = ("*.log", "/tmp", "/log", "master.key", ".env")
LARGE_FILE_EXCLUDES = ("vendor", "node_modules", "tmp", "log", "public/assets", "public/packs")
_SECRET_ASSIGNMENT = re.compile(r"""(api_key|api_secret|password|secret_key|private_key)\s*=\s*['"][^'"]+['"]""")


def is_rails(ctx: CheckContext) -> bool:
    """Return ``True`` for a Rails application rather than a plain Ruby project."""

    return ctx.exists("Gemfile") and ctx.exists("config/application.rb")


def gem_bundled(ctx: CheckContext, gem: str) -> bool:
    """Return ``True`` when ``gem`` is part of the bundle."""

    return ctx.succeeds(["bundle", "show", gem])


def bundled(gem: str, executable: str, *args: str, global_fallback: bool = True) -> CommandFactory:
    """Return a command factory preferring ``bundle exec`` over a global executable."""

    def _command(ctx: CheckContext) -> Sequence[str] | None:
        if gem_bundled(ctx, gem):
            return ["bundle", "exec", executable, *args]
        if global_fallback and ctx.probe.check_required_tool(executable):
            return [executable, *args]
        return None

    return _command


def ensure_gems(ctx: CheckContext, _files: tuple[Path, ...]) -> InternalResult:
    """Install gems when the lockfile is missing or the bundle is incomplete."""

    needs_install = not ctx.exists("Gemfile.lock") or not ctx.succeeds(["bundle", "check", "--dry-run"])
    if needs_install and ctx.run(["bundle", "install", "--quiet"], capture=False).returncode != 0:
        return InternalResult(passed=False, message="Failed to install gems")
    return InternalResult(passed=True, message="Gem dependencies satisfied")


def check_ruby_syntax(ctx: CheckContext, files: tuple[Path, ...]) -> InternalResult:
    """Run ``ruby -c`` on each staged Ruby file."""

    broken = tuple(
        f"Syntax error in: {relative.as_posix()}"
        for relative in files
        if ctx.run(["ruby", "-c", relative.as_posix()]).returncode != 0
    )
    if broken:
        return InternalResult(
            passed=False,
            message="Ruby syntax errors found. Please fix them before committing.",
            details=broken,
        )
    return InternalResult(passed=True, message="Ruby syntax check passed")


def _test_command(ctx: CheckContext) -> Sequence[str] | None:
    rails = is_rails(ctx)
    if ctx.exists("spec") and gem_bundled(ctx, "rspec-rails" if rails else "rspec"):
        return ["bundle", "exec", "rspec", "--fail-fast", "--format", "progress"]
    if ctx.exists("test"):
        return ["bundle", "exec", "rails", "test"] if rails else ["bundle", "exec", "rake", "test"]
    return None


def check_migrations(ctx: CheckContext, _files: tuple[Path, ...]) -> InternalResult:
    """Flag migrations newer than the schema and schema changes without migrations."""

    notes: list[str] = []
    schema = ctx.root / "db" / "schema.rb"
    migrations = ctx.root / "db" / "migrate"
    if migrations.is_dir() and schema.is_file():
        schema_mtime = schema.stat().st_mtime
        if any(path.stat().st_mtime > schema_mtime for path in migrations.glob("*.rb")):
            notes.append("Potential pending migrations detected. Run 'rails db:migrate' to apply migrations")
    staged = [path.as_posix() for path in ctx.staged]
    if "db/schema.rb" in staged and not any(name.startswith("db/migrate") for name in staged):
        notes.append("schema.rb is being committed without migration files. Make sure this is intentional")
    if notes:
        return InternalResult(passed=False, message="Database migration checks raised warnings", details=tuple(notes))
    return InternalResult(passed=True, message="Database checks completed")


def find_hardcoded_secrets(ctx: CheckContext, _files: tuple[Path, ...]) -> InternalResult:
    """Flag secret-looking assignments in Ruby files outside tests."""

    for relative in iter_project_files(ctx.root, suffixes=(".rb",), exclude=("vendor",)):
        if relative.name.endswith(("_test.rb", "_spec.rb")):
            continue
        if file_matches(ctx.root / relative, _SECRET_ASSIGNMENT):
            return InternalResult(
                passed=False,
                message="Potential hardcoded secrets found. Please use Rails credentials or environment variables",
            )
    return InternalResult(passed=True, message="No hardcoded secrets found")


def check_gitignore(ctx: CheckContext, _files: tuple[Path, ...]) -> InternalResult:
    """Report common Rails entries missing from ``.gitignore``."""

    path = ctx.root / ".gitignore"
    if not path.is_file():
        return InternalResult(passed=True, message="No .gitignore to inspect")
    content = path.read_text(encoding="utf-8", errors="ignore")
    missing = [entry for entry in GITIGNORE_ENTRIES if entry not in content]
    if missing:
        return InternalResult(passed=False, message=f"Consider adding to .gitignore: {' '.join(missing)}")
    return InternalResult(passed=True, message=".gitignore covers common Rails entries")


_RAILS_ONLY = "Not a Rails project, skipping"

ROR_HOOK = StackHook(
    key="ror",
    title="Running Ruby on Rails pre-commit checks...",
    preconditions=(
        Precondition(
            message="Ruby is not installed or not in PATH",
            tool="ruby",
            remediation=("Please install Ruby from https://www.ruby-lang.org/en/downloads/",),
        ),
        Precondition(
            message="Bundler is not installed",
            tool="bundle",
            remediation=("Please install with: gem install bundler",),
        ),
        Precondition(message="Not a Ruby/Rails project (no Gemfile found)", markers=("Gemfile",)),
    ),
    checks=(
        CheckSpec(
            name="gems",
            severity=CheckSeverity.BLOCKING,
            description="Checking gem dependencies...",
            internal=ensure_gems,
        ),
        CheckSpec(
            name="rubocop",
            severity=CheckSeverity.BLOCKING,
            description="Running RuboCop (code style and linting)...",
            command=bundled("rubocop", "rubocop", "--force-exclusion"),
            suffixes=(".rb",),
            append_files=True,
            remediation="RuboCop found issues. Run 'bundle exec rubocop -a' to auto-fix some issues.",
            passed_message="RuboCop check passed",
            install_hint="Install with: gem 'rubocop' in Gemfile",
            tool_label="RuboCop",
        ),
        CheckSpec(
            name="ruby-syntax",
            severity=CheckSeverity.BLOCKING,
            description="Checking Ruby syntax...",
            suffixes=(".rb",),
            internal=check_ruby_syntax,
        ),
        CheckSpec(
            name="erb-lint",
            severity=CheckSeverity.BLOCKING,
            description="Checking ERB templates...",
            command=bundled("erb_lint", "erblint", global_fallback=False),
            suffixes=(".erb",),
            append_files=True,
            remediation="ERB lint found issues.",
            passed_message="ERB lint check passed",
            install_hint="Install with: gem 'erb_lint' in Gemfile",
            tool_label="erb_lint",
        ),
        CheckSpec(
            name="brakeman",
            severity=CheckSeverity.BLOCKING,
            description="Running security analysis (Brakeman)...",
            command=bundled("brakeman", "brakeman", "--quiet", "--no-pager", "--no-exit-on-warn", "--exit-on-error"),
            when=is_rails,
            skip_reason=f"{_RAILS_ONLY} Brakeman",
            remediation="Brakeman found security vulnerabilities! Run 'bundle exec brakeman' for a detailed report.",
            passed_message="Security analysis passed",
            install_hint="Install with: gem 'brakeman' in Gemfile",
            tool_label="Brakeman",
        ),
        CheckSpec(
            name="bundle-audit-update",
            severity=CheckSeverity.INFO,
            description="Updating the vulnerability advisory database...",
            command=bundled("bundler-audit", "bundle-audit", "update", "--quiet"),
            remediation="Could not update the advisory database; using the cached copy",
            passed_message="Advisory database updated",
            tool_label="bundler-audit",
        ),
        CheckSpec(
            name="bundle-audit",
            severity=CheckSeverity.BLOCKING,
            description="Checking for vulnerable dependencies...",
            command=bundled("bundler-audit", "bundle-audit", "check", "--quiet"),
            remediation="Vulnerable gems found! Update vulnerable gems before committing.",
            passed_message="Dependency security check passed",
            install_hint="Install with: gem 'bundler-audit' in Gemfile",
            tool_label="bundler-audit",
        ),
        CheckSpec(
            name="rails-best-practices",
            severity=CheckSeverity.WARNING,
            description="Running Rails Best Practices...",
            command=bundled(
                "rails_best_practices",
                "rails_best_practices",
                "--silent",
                "--without-color",
                ".",
                global_fallback=False,
            ),
            when=is_rails,
            skip_reason=f"{_RAILS_ONLY} Rails Best Practices",
            remediation="Rails Best Practices found suggestions (non-blocking)",
            passed_message="Rails Best Practices check passed",
            install_hint="Consider adding it for code quality insights",
            tool_label="rails_best_practices",
        ),
        CheckSpec(
            name="tests",
            severity=CheckSeverity.BLOCKING,
            description="Running tests...",
            command=_test_command,
            when=lambda ctx: ctx.exists("spec", "test"),
            skip_reason="No test directory found, skipping test execution",
            remediation="Tests failed. Please fix failing tests before committing.",
            passed_message="Tests passed",
            install_hint="Install with: gem 'rspec' in Gemfile",
            tool_label="RSpec",
        ),
        CheckSpec(
            name="migrations",
            severity=CheckSeverity.WARNING,
            description="Checking database migrations...",
            internal=check_migrations,
            when=is_rails,
            skip_reason=f"{_RAILS_ONLY} database checks",
        ),
        CheckSpec(
            name="debugger-statements",
            severity=CheckSeverity.WARNING,
            internal=pattern_advisory(
                r"binding\.pry|byebug|debugger|binding\.irb",
                "Debugger statements found (binding.pry, byebug). Consider removing them before committing",
                suffixes=(".rb",),
                exclude=("vendor",),
                show_paths=True,
            ),
            passed_message="No debugger statements found",
        ),
        CheckSpec(
            name="puts-statements",
            severity=CheckSeverity.WARNING,
            internal=pattern_advisory(
                r"^\s*(puts|p|pp) ",
                "Found puts/p statements in app/ or lib/. Consider using Rails.logger instead",
                suffixes=(".rb",),
                under=("app", "lib"),
            ),
            passed_message="No puts/p statements found",
        ),
        CheckSpec(
            name="hardcoded-secrets",
            severity=CheckSeverity.WARNING,
            internal=find_hardcoded_secrets,
        ),
        CheckSpec(
            name="todo-comments",
            severity=CheckSeverity.INFO,
            internal=pattern_advisory(
                r"(TODO|FIXME|HACK|XXX):",
                "Found TODO/FIXME/HACK comments in code",
                suffixes=(".rb",),
                exclude=("vendor",),
            ),
            passed_message="No TODO/FIXME/HACK comments found",
        ),
        CheckSpec(
            name="large-files",
            severity=CheckSeverity.WARNING,
            internal=large_file_advisory(exclude=LARGE_FILE_EXCLUDES),
        ),
        CheckSpec(
            name="sensitive-files",
            severity=CheckSeverity.WARNING,
            internal=sensitive_file_advisory(
                ("*.pem", "*.key", "master.key", ".env.production"),
                "Potentially sensitive files found. Ensure these are in .gitignore and not being committed",
            ),
        ),
        CheckSpec(
            name="gitignore",
            severity=CheckSeverity.WARNING,
            internal=check_gitignore,
        ),
    ),
)

__all__ = [
    "ROR_HOOK",
    "bundled",
    "check_gitignore",
    "check_migrations",
    "check_ruby_syntax",
    "ensure_gems",
    "gem_bundled",
    "is_rails",
]
