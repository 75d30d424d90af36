# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Running external commands.

Every shell-out goes through a CommandRunner so the provisioning steps can
be exercised against a fake runner in tests. Three modes:

- run(): output is appended to setup.log, the console stays quiet
- capture(): stdout is returned for parsing
- interactive(): the command inherits the terminal (passwd, browser logins)
"""

import shlex
import shutil
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from droidvm.utils.exceptions import CommandError
from droidvm.utils.logging import get_log_file, get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Outcome of one external command."""

    argv: List[str]
    returncode: int
    stdout: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def format_command(argv: Sequence[str]) -> str:
    """Render argv the way a user would type it."""
    return " ".join(shlex.quote(part) for part in argv)


class CommandRunner:
    """Runs external commands, logging their output to setup.log."""

    def __init__(self, log_file: Optional[Path] = None):
        self.log_file = log_file or get_log_file()

    def which(self, name: str) -> Optional[str]:
        """Locate an executable on PATH."""
        return shutil.which(name)

    def _append_log(self, line: str) -> None:
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, "a", encoding="utf-8") as handle:
                handle.write(line)
        except OSError:
            pass

    def run(
        self,
        argv: Sequence[str],
        check: bool = True,
        input: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """Run a command with its output appended to the log file.

        Raises:
            CommandError: If check is set and the command fails or is missing
        """
        argv = list(argv)
        logger.debug(f"Running: {format_command(argv)}")
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        self._append_log(f"[{stamp}] $ {format_command(argv)}\n")

        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, "a", encoding="utf-8") as handle:
                completed = subprocess.run(
                    argv,
                    stdout=handle,
                    stderr=subprocess.STDOUT,
                    input=input,
                    text=True,
                    timeout=timeout,
                )
        except FileNotFoundError as exc:
            raise CommandError(argv, 127, str(exc), hint=f"Is {argv[0]} installed?") from exc
        except subprocess.TimeoutExpired as exc:
            raise CommandError(argv, -1, f"timed out after {timeout}s") from exc

        result = CommandResult(argv=argv, returncode=completed.returncode)
        if check and not result.ok:
            raise CommandError(argv, result.returncode, hint=f"See {self.log_file}")
        return result

    def capture(
        self,
        argv: Sequence[str],
        check: bool = False,
        timeout: Optional[float] = 30.0,
        merge_stderr: bool = False,
    ) -> CommandResult:
        """Run a command and return its stdout.

        A missing executable is reported as returncode 127 unless check is set.
        With merge_stderr, stderr is folded into the returned stdout.
        """
        argv = list(argv)
        logger.debug(f"Capturing: {format_command(argv)}")
        try:
            completed = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError as exc:
            if check:
                raise CommandError(argv, 127, str(exc), hint=f"Is {argv[0]} installed?") from exc
            return CommandResult(argv=argv, returncode=127)
        except subprocess.TimeoutExpired as exc:
            if check:
                raise CommandError(argv, -1, f"timed out after {timeout}s") from exc
            return CommandResult(argv=argv, returncode=-1)

        if completed.stderr:
            self._append_log(completed.stderr)
        result = CommandResult(argv=argv, returncode=completed.returncode, stdout=completed.stdout)
        if check and not result.ok:
            raise CommandError(argv, result.returncode, completed.stdout + (completed.stderr or ""))
        return result

    def interactive(self, argv: Sequence[str], check: bool = True) -> CommandResult:
        """Run a command attached to the user's terminal."""
        argv = list(argv)
        logger.debug(f"Interactive: {format_command(argv)}")
        try:
            completed = subprocess.run(argv)
        except FileNotFoundError as exc:
            raise CommandError(argv, 127, str(exc), hint=f"Is {argv[0]} installed?") from exc

        result = CommandResult(argv=argv, returncode=completed.returncode)
        if check and not result.ok:
            raise CommandError(argv, result.returncode)
        return result
