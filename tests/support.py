# SPDX-License-Identifier: MIT
# Copyright (c) 2025 The wt-pre-commit-hooks Authors

"""Test doubles shared by the test modules."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from io import StringIO
from typing import Any

from wthooks.environment import CapabilityProbe
from wthooks.logging import CLILogger

Responder = Callable[[list[str], dict[str, Any]], subprocess.CompletedProcess[str]]


def completed(
    args: Sequence[str],
    returncode: int = 0,
    stdout: str = "",
    stderr: str = "",
) -> subprocess.CompletedProcess[str]:
    """Return a ``CompletedProcess`` for fake runner responses."""

    return subprocess.CompletedProcess(list(args), returncode, stdout=stdout, stderr=stderr)


@dataclass
class FakeRunner:
    """Command runner double matching responses by command prefix."""

    responses: dict[tuple[str, ...], int | str | Responder] = field(default_factory=dict)
    missing: set[str] = field(default_factory=set)
    calls: list[list[str]] = field(default_factory=list)
    kwargs: list[dict[str, Any]] = field(default_factory=list)

    def on(self, prefix: Sequence[str], response: int | str | Responder) -> FakeRunner:
        """Register ``response`` for commands starting with ``prefix``."""

        self.responses[tuple(prefix)] = response
        return self

    def __call__(self, args: Sequence[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        command = list(args)
        self.calls.append(command)
        self.kwargs.append(kwargs)
        if command and command[0] in self.missing:
            raise FileNotFoundError(f"Executable '{command[0]}' was not found on PATH")
        match = max(
            (prefix for prefix in self.responses if tuple(command[: len(prefix)]) == prefix),
            key=len,
            default=None,
        )
        if match is None:
            return completed(command)
        response = self.responses[match]
        if callable(response):
            return response(command, kwargs)
        if isinstance(response, str):
            return completed(command, stdout=response)
        return completed(command, returncode=response)

    def commands(self) -> list[str]:
        """Return every recorded command joined by spaces."""

        return [" ".join(call) for call in self.calls]


@dataclass
class ScriptedPrompter:
    """Prompter double answering from pre-recorded queues."""

    confirms: list[bool] = field(default_factory=list)
    answers: list[str] = field(default_factory=list)
    questions: list[str] = field(default_factory=list)

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        if not self.confirms:
            raise AssertionError(f"unexpected confirmation prompt: {question}")
        return self.confirms.pop(0)

    def ask(self, question: str) -> str:
        self.questions.append(question)
        if not self.answers:
            raise AssertionError(f"unexpected prompt: {question}")
        return self.answers.pop(0)


@dataclass
class BufferedLogger:
    """CLILogger bound to in-memory consoles."""

    logger: CLILogger
    out: StringIO
    err: StringIO

    @property
    def stdout(self) -> str:
        return self.out.getvalue()

    @property
    def stderr(self) -> str:
        return self.err.getvalue()


def make_probe(present: Iterable[str]) -> CapabilityProbe:
    """Return a probe reporting only ``present`` executables."""

    available = set(present)
    return CapabilityProbe(which=lambda name: f"/usr/bin/{name}" if name in available else None)


