# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""PHP checks: Composer, syntax, style, static analysis, tests, and advisories."""

from __future__ import annotations

import re
from pathlib import Path

from ...severity import CheckSeverity
from ..context import CheckContext
from ..models import CheckSpec, InternalResult, Precondition, StackHook
from ..scans import (
    find_named,
    find_pattern,
    iter_project_files,
    large_file_advisory,
    pattern_advisory,
    sensitive_file_advisory,
)

DEPENDENCY_DIRS = ("vendor", "node_modules")
PHPUNIT_CONFIGS = ("vendor/bin/phpunit", "phpunit.xml", "phpunit.xml.dist")


def lint_syntax(ctx: CheckContext, _files: tuple[Path, ...]) -> InternalResult:
    """Run ``php -l`` on every PHP source outside dependency directories."""

    broken: list[str] = []
    for relative in iter_project_files(ctx.root, suffixes=(".php",), exclude=DEPENDENCY_DIRS):
        completed = ctx.run(["php", "-l", relative.as_posix()])
        if completed.returncode != 0:
            broken.append(f"Syntax error in: {relative.as_posix()}")
    if broken:
        return InternalResult(
            passed=False,
            message="PHP syntax errors found. Please fix them before committing.",
            details=tuple(broken),
        )
    return InternalResult(passed=True, message="PHP syntax check passed")


def phpunit_configured(ctx: CheckContext) -> bool:
    """Return ``True`` when PHPUnit is vendored or configured."""

    return ctx.exists(*PHPUNIT_CONFIGS)


def _unconfigured_tests(ctx: CheckContext, _files: tuple[Path, ...]) -> InternalResult:
    if phpunit_configured(ctx):
        return InternalResult(passed=True, message="PHPUnit configuration present")
    tests = find_named(ctx.root, ("*Test.php",), exclude=("vendor",), limit=1)
    if tests:
        return InternalResult(
            passed=False,
            message="Test files found but no PHPUnit configuration. Consider setting up PHPUnit with phpunit.xml",
        )
    return InternalResult(passed=True, message="No PHPUnit tests found")


def detect_frameworks(ctx: CheckContext, _files: tuple[Path, ...]) -> InternalResult:
    """Report Laravel and Symfony specific hints."""

    notes: list[str] = []
    frameworks: list[str] = []
    if (ctx.root / "artisan").is_file() and (ctx.root / "app/Http/Kernel.php").is_file():
        frameworks.append("Laravel")
        if find_pattern(ctx.root, re.compile(r"DB::"), suffixes=(".php",), under=("app",), limit=1):
            notes.append("Found DB facade usage. Consider using Eloquent models or Query Builder")
        if (ctx.root / "bootstrap/cache/routes.php").is_file():
            notes.append("Routes are cached. Run 'php artisan route:clear' if you've modified routes")
    if (ctx.root / "bin/console").is_file() and (ctx.root / "src/Controller").is_dir():
        frameworks.append("Symfony")
        notes.append("Consider running 'php bin/console lint:yaml config/' and 'php bin/console lint:twig templates/'")
    if not frameworks:
        return InternalResult(passed=True, message="No framework-specific checks apply")
    return InternalResult(passed=False, message=f"{' and '.join(frameworks)} project detected", details=tuple(notes))


def _tool(name: str, label: str, *, args: tuple[str, ...], remediation: str, install: str, passed: str) -> CheckSpec:
    return CheckSpec(
        name=name,
        severity=CheckSeverity.BLOCKING,
        description=f"Running {label}...",
        executables=(f"vendor/bin/{name}", name),
        args=args,
        remediation=remediation,
        passed_message=passed,
        install_hint=f"Install with: composer require --dev {install}",
        tool_label=label,
    )


PHP_HOOK = StackHook(
    key="php",
    title="Running PHP pre-commit checks...",
    preconditions=(
        Precondition(message="PHP is not installed or not in PATH", tool="php"),
        Precondition(
            message="Not a PHP project (no composer.json, index.php, or .php files found)",
            markers=("composer.json", "index.php", "*.php", "*/*.php"),
        ),
    ),
    checks=(
        CheckSpec(
            name="composer-install",
            severity=CheckSeverity.BLOCKING,
            description="Installing/Updating Composer dependencies...",
            executables=("composer",),
            args=("install", "--no-interaction", "--prefer-dist", "--optimize-autoloader"),
            when=lambda ctx: ctx.exists("composer.json"),
            skip_reason="No composer.json found, skipping Composer dependency check",
            remediation="Failed to install Composer dependencies. Please check composer.json.",
            passed_message="Composer dependencies updated",
            install_hint="Please install Composer from https://getcomposer.org/",
            tool_label="Composer",
        ),
        CheckSpec(
            name="php-lint",
            severity=CheckSeverity.BLOCKING,
            description="Checking PHP syntax...",
            internal=lint_syntax,
        ),
        _tool(
            "php-cs-fixer",
            "PHP CS Fixer",
            args=("fix", "--dry-run", "--diff", "--verbose"),
            remediation="Code formatting issues found. Run 'php-cs-fixer fix' to fix them.",
            install="friendsofphp/php-cs-fixer",
            passed="Code formatting check passed",
        ),
        _tool(
            "phpstan",
            "PHPStan",
            args=("analyse",),
            remediation="PHPStan found issues. Please fix them before committing.",
            install="phpstan/phpstan",
            passed="PHPStan analysis passed",
        ),
        _tool(
            "phpcs",
            "PHP CodeSniffer",
            args=(),
            remediation="PHPCS found coding standard violations. Run 'phpcbf' to fix them.",
            install="squizlabs/php_codesniffer",
            passed="PHPCS check passed",
        ),
        CheckSpec(
            name="phpunit",
            severity=CheckSeverity.BLOCKING,
            description="Running PHPUnit tests...",
            executables=("vendor/bin/phpunit", "phpunit"),
            args=("--stop-on-failure",),
            when=phpunit_configured,
            skip_reason="No PHPUnit configuration found, skipping test execution",
            remediation="PHPUnit tests failed. Please fix failing tests before committing.",
            passed_message="PHPUnit tests passed",
            install_hint="Install with: composer require --dev phpunit/phpunit",
            tool_label="PHPUnit",
        ),
        CheckSpec(
            name="phpunit-config",
            severity=CheckSeverity.INFO,
            internal=_unconfigured_tests,
        ),
        _tool(
            "psalm",
            "Psalm",
            args=("--show-info=false",),
            remediation="Psalm found issues. Please fix them before committing.",
            install="vimeo/psalm",
            passed="Psalm analysis passed",
        ),
        CheckSpec(
            name="debug-functions",
            severity=CheckSeverity.WARNING,
            internal=pattern_advisory(
                r"var_dump|print_r|die\(|exit\(",
                "Found debugging functions (var_dump, print_r, die, exit) in code. Please remove them before committing",
                suffixes=(".php",),
                exclude=("vendor", "tests", "test"),
            ),
            passed_message="No debugging functions found",
        ),
        CheckSpec(
            name="dangerous-functions",
            severity=CheckSeverity.WARNING,
            internal=pattern_advisory(
                r"eval\(|exec\(|system\(|shell_exec|passthru|file_get_contents.*http|curl_exec.*http",
                "Potential security-sensitive functions found. Please review usage of eval(), exec(), system(), "
                "and file_get_contents() with URLs",
                suffixes=(".php",),
                exclude=("vendor",),
            ),
            passed_message="No security-sensitive functions found",
        ),
        CheckSpec(
            name="hardcoded-credentials",
            severity=CheckSeverity.WARNING,
            internal=pattern_advisory(
                r"""password.*=.*['"].|api.*key.*=.*['"].|secret.*=.*['"].|token.*=.*['"].""",
                "Potential hardcoded credentials found. Keep sensitive data in environment variables or config files",
                suffixes=(".php",),
                exclude=("vendor",),
                flags=re.IGNORECASE,
            ),
            passed_message="No hardcoded credentials found",
        ),
        CheckSpec(
            name="todo-comments",
            severity=CheckSeverity.INFO,
            internal=pattern_advisory(
                r"TODO|FIXME|HACK",
                "Found TODO/FIXME/HACK comments in code",
                suffixes=(".php",),
                exclude=("vendor",),
            ),
            passed_message="No TODO/FIXME/HACK comments found",
        ),
        CheckSpec(
            name="large-files",
            severity=CheckSeverity.WARNING,
            internal=large_file_advisory(exclude=DEPENDENCY_DIRS),
        ),
        CheckSpec(
            name="sensitive-configs",
            severity=CheckSeverity.WARNING,
            internal=sensitive_file_advisory(
                (".env", "config.php", "database.php"),
                "Potentially sensitive configuration files found. Consider using .env.example instead of .env",
                exclude=("vendor",),
            ),
        ),
        CheckSpec(
            name="framework",
            severity=CheckSeverity.INFO,
            internal=detect_frameworks,
        ),
    ),
)

__all__ = ["PHP_HOOK", "detect_frameworks", "lint_syntax", "phpunit_configured"]
