# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Pytest fixtures for droidvm tests.

Nothing here touches the real system: HOME points at a temp directory and
external commands go through FakeRunner, which answers from scripted rules
and records every call.
"""

import os
import tempfile
from pathlib import Path

import pytest

# Module-level loggers configure logging on import; keep that out of ~/droidvm
os.environ.setdefault(
    "DROIDVM_LOG_FILE", str(Path(tempfile.mkdtemp(prefix="droidvm-test-")) / "setup.log")
)

from droidvm.config import SetupConfig, reset_config  # noqa: E402
from droidvm.state import SetupState  # noqa: E402
from droidvm.steps.base import RunOptions, SetupContext  # noqa: E402
from droidvm.utils.exceptions import CommandError  # noqa: E402
from droidvm.utils.logging import configure_logging, reset_logging  # noqa: E402
from droidvm.utils.prompts import Prompter  # noqa: E402
from droidvm.utils.shell import CommandResult, CommandRunner  # noqa: E402


class _Rule:
    def __init__(self, prefix, returncode, outputs):
        self.prefix = tuple(prefix)
        self.returncode = returncode
        self.outputs = list(outputs)

    def matches(self, argv):
        return tuple(argv[: len(self.prefix)]) == self.prefix

    def next_output(self):
        # Consume scripted outputs in order; the last one repeats
        if len(self.outputs) > 1:
            return self.outputs.pop(0)
        return self.outputs[0] if self.outputs else ""


class FakeRunner(CommandRunner):
    """CommandRunner that never executes anything.

    Unmatched commands succeed with empty output. Later rules win.
    """

    def __init__(self, log_file: Path):
        super().__init__(log_file=log_file)
        self.rules = []
        self.calls = []
        self.executables = set()

    def on(self, *prefix, returncode=0, stdout="", outputs=None):
        self.rules.insert(0, _Rule(prefix, returncode, outputs or [stdout]))
        return self

    def fail(self, *prefix, returncode=1, stdout=""):
        return self.on(*prefix, returncode=returncode, stdout=stdout)

    def which(self, name):
        return f"/usr/bin/{name}" if name in self.executables else None

    def _respond(self, mode, argv, input=None):
        argv = list(argv)
        self.calls.append((mode, argv, input))
        for rule in self.rules:
            if rule.matches(argv):
                return CommandResult(argv=argv, returncode=rule.returncode, stdout=rule.next_output())
        return CommandResult(argv=argv, returncode=0, stdout="")

    def run(self, argv, check=True, input=None, timeout=None):
        result = self._respond("run", argv, input)
        if check and not result.ok:
            raise CommandError(result.argv, result.returncode)
        return CommandResult(argv=result.argv, returncode=result.returncode)

    def capture(self, argv, check=False, timeout=30.0, merge_stderr=False):
        result = self._respond("capture", argv)
        if check and not result.ok:
            raise CommandError(result.argv, result.returncode, result.stdout)
        return result

    def interactive(self, argv, check=True):
        result = self._respond("interactive", argv)
        if check and not result.ok:
            raise CommandError(result.argv, result.returncode)
        return CommandResult(argv=result.argv, returncode=result.returncode)

    def commands(self, mode=None):
        """argv lists of recorded calls, optionally filtered by mode."""
        return [argv for m, argv, _ in self.calls if mode is None or m == mode]

    def ran(self, *prefix):
        return any(tuple(argv[: len(prefix)]) == prefix for argv in self.commands())


class FakePrompter(Prompter):
    """Answers prompts from queues and records every question."""

    def __init__(self, confirms=None, texts=None, assume_yes=False):
        super().__init__(assume_yes=assume_yes)
        self.confirms = list(confirms or [])
        self.texts = list(texts or [])
        self.asked = []

    def confirm(self, message, default=False):
        self.asked.append(message)
        if self.assume_yes or not self.confirms:
            return default
        return self.confirms.pop(0)

    def text(self, message, default=None, validate=None):
        self.asked.append(message)
        if self.assume_yes:
            return super().text(message, default=default, validate=validate)
        answer = self.texts.pop(0) if self.texts else default
        if validate is not None and not validate(answer):
            raise AssertionError(f"Scripted answer {answer!r} rejected for {message!r}")
        return answer

    def pause(self, message="Press ENTER to continue..."):
        self.asked.append(message)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME and all droidvm paths at a temp directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("DROIDVM_HOME", raising=False)
    monkeypatch.delenv("DROIDVM_DEBUG", raising=False)
    monkeypatch.setenv("DROIDVM_LOG_FILE", str(tmp_path / "setup.log"))

    reset_config()
    reset_logging()
    configure_logging()

    yield home

    reset_config()
    reset_logging()


@pytest.fixture
def log_file(tmp_path):
    return tmp_path / "setup.log"


@pytest.fixture
def runner(log_file):
    return FakeRunner(log_file)


@pytest.fixture
def prompter():
    return FakePrompter()


@pytest.fixture
def config(isolated_home):
    return SetupConfig(isolated_home / ".config" / "droidvm" / "config.yml")


@pytest.fixture
def state(isolated_home):
    return SetupState(isolated_home / "droidvm" / "state.json")


@pytest.fixture
def make_context(config, runner, prompter, state):
    """Factory for SetupContext; keyword args become RunOptions."""

    def _make(prompter_override=None, **options):
        return SetupContext(
            config=config,
            runner=runner,
            prompter=prompter_override or prompter,
            state=state,
            options=RunOptions(**options),
        )

    return _make


@pytest.fixture
def ctx(make_context):
    return make_context()
