# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors
"""Built-in table of supported technology stacks."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StackDefinition(BaseModel):
    """Immutable description of one supported technology stack.

    Attributes:
        id: Numeric identifier shown in the selection menu.
        key: Short stack key accepted by ``wthooks run``.
        display_name: Human-readable stack name.
        hook_identifier: Identifier written to the hook manager config document.
        summary: One-line description of the checks the stack runs.
        requirements: Ordered tool requirements printed after setup.
        markers: Glob patterns whose presence indicates the stack applies.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    key: str
    display_name: str
    hook_identifier: str
    summary: str = ""
    requirements: tuple[str, ...] = ()
    markers: tuple[str, ...] = ()

    @field_validator("requirements", "markers", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Sequence[str] | str | None) -> tuple[str, ...]:
        """Normalise string sequences into tuples.

        Args:
            value: Raw value supplied for the field.

        Returns:
            tuple[str, ...]: Normalised tuple of strings.

        Raises:
            TypeError: If ``value`` is not string data.
        """

        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        if isinstance(value, (list, tuple)):
            return tuple(str(item) for item in value)
        raise TypeError("expected a sequence of strings")


DEFAULT_STACKS: Final[tuple[StackDefinition, ...]] = (
    StackDefinition(
        id=1,
        key="android",
        display_name="Android (Java/Kotlin)",
        hook_identifier="custom-android-script",
        summary="Spotless formatting",
        requirements=("Gradle wrapper (gradlew) in project root", "Spotless Gradle plugin configured"),
        markers=("gradlew", "build.gradle", "build.gradle.kts", "settings.gradle", "settings.gradle.kts"),
    ),
    StackDefinition(
        id=2,
        key="dotnet",
        display_name=".NET (C#)",
        hook_identifier="custom-dot-net-script",
        summary="Format, build, test, security",
        requirements=(".NET SDK 6+ (for built-in dotnet format)",),
        markers=("*.sln", "*.csproj", "*/*.csproj", "*.fsproj", "*.vbproj"),
    ),
    StackDefinition(
        id=3,
        key="flutter",
        display_name="Flutter (Dart)",
        hook_identifier="custom-flutter-script",
        summary="Format, analyze, test",
        requirements=("Flutter SDK installed", "pubspec.yaml in project root"),
        markers=("pubspec.yaml",),
    ),
    StackDefinition(
        id=4,
        key="ios",
        display_name="iOS (Swift)",
        hook_identifier="custom-ios-script",
        summary="SwiftLint, SwiftFormat",
        requirements=(
            "Mint package manager: brew install mint",
            "mint install realm/SwiftLint",
            "mint install nicklockwood/SwiftFormat",
        ),
        markers=("*.xcodeproj", "*.xcworkspace", "Package.swift", "Podfile", "Mintfile"),
    ),
    StackDefinition(
        id=5,
        key="js",
        display_name="JavaScript / TypeScript",
        hook_identifier="custom-js-script",
        summary="Prettier, ESLint",
        requirements=("Node.js and npm", "npm install --save-dev prettier eslint"),
        markers=("package.json", "tsconfig.json"),
    ),
    StackDefinition(
        id=6,
        key="php",
        display_name="PHP",
        hook_identifier="custom-php-script",
        summary="CS Fixer, PHPStan, PHPUnit",
        requirements=(
            "PHP 7.4+ and Composer",
            "composer require --dev friendsofphp/php-cs-fixer phpstan/phpstan "
            "squizlabs/php_codesniffer phpunit/phpunit vimeo/psalm",
        ),
        markers=("composer.json", "index.php", "artisan"),
    ),
    StackDefinition(
        id=7,
        key="python",
        display_name="Python",
        hook_identifier="custom-python-script",
        summary="Black, Flake8, Bandit, pytest",
        requirements=("Python 3.x", "pip install black isort flake8 mypy bandit detect-secrets pytest"),
        markers=("pyproject.toml", "setup.py", "setup.cfg", "requirements.txt", "Pipfile"),
    ),
    StackDefinition(
        id=8,
        key="ror",
        display_name="Ruby on Rails",
        hook_identifier="custom-ror-script",
        summary="RuboCop, Brakeman, RSpec",
        requirements=("Ruby 2.5+ and Bundler", "Add rubocop, brakeman, bundler-audit, erb_lint to Gemfile"),
        markers=("Gemfile", "config/application.rb"),
    ),
)


def validate_table(table: Iterable[StackDefinition]) -> tuple[StackDefinition, ...]:
    """Return ``table`` as a tuple after checking identifiers are unique.

    Raises:
        ValueError: If two stacks share an id, key or hook identifier.
    """

    stacks = tuple(table)
    for attribute in ("id", "key", "hook_identifier"):
        values = [getattr(stack, attribute) for stack in stacks]
        duplicates = sorted({str(value) for value in values if values.count(value) > 1})
        if duplicates:
            raise ValueError(f"duplicate stack {attribute}: {', '.join(duplicates)}")
    return stacks


def stack_by_hook(hook_identifier: str, table: Iterable[StackDefinition] = DEFAULT_STACKS) -> StackDefinition | None:
    """Return the stack owning ``hook_identifier``, or ``None``."""

    return next((stack for stack in table if stack.hook_identifier == hook_identifier), None)


validate_table(DEFAULT_STACKS)

__all__ = [
    "DEFAULT_STACKS",
    "StackDefinition",
    "stack_by_hook",
    "validate_table",
]
