# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""OpenSSH server management inside Termux."""

from pathlib import Path

from droidvm.utils.logging import get_logger
from droidvm.utils.shell import CommandRunner

logger = get_logger(__name__)

AUTOSTART_MARKER = "# Auto-start SSH"
AUTOSTART_LINE = "pgrep sshd >/dev/null || sshd"


def has_autostart(bashrc: Path) -> bool:
    """True if the shell rc already starts sshd in any form."""
    if not bashrc.exists():
        return False
    try:
        return "sshd" in bashrc.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False


def ensure_autostart(bashrc: Path) -> bool:
    """Append the sshd auto-start snippet once.

    Returns:
        True if the file was modified
    """
    if has_autostart(bashrc):
        return False

    bashrc.parent.mkdir(parents=True, exist_ok=True)
    with open(bashrc, "a", encoding="utf-8") as handle:
        handle.write(f"\n{AUTOSTART_MARKER}\n{AUTOSTART_LINE}\n")
    logger.debug(f"Added sshd auto-start to {bashrc}")
    return True


class SSHServer:
    """Controls the Termux sshd daemon."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def is_running(self) -> bool:
        return self.runner.capture(["pgrep", "sshd"]).ok

    def set_password(self) -> None:
        """Run passwd on the terminal; sshd refuses logins without one."""
        self.runner.interactive(["passwd"])

    def start(self) -> None:
        self.runner.run(["sshd"])
