# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""proot-distro: Linux root filesystems inside Termux.

Every command that targets the container is wrapped as
``proot-distro login <distro> -- <argv>``; the login user is root.
"""

import re
from pathlib import Path
from typing import List, Optional, Sequence

from droidvm.paths import TermuxPaths
from droidvm.utils.logging import get_logger
from droidvm.utils.shell import CommandResult, CommandRunner, format_command

logger = get_logger(__name__)

PROOT_DISTRO = "proot-distro"


def rootfs_dir(distro: str, prefix: Optional[Path] = None) -> Path:
    """Location of an installed distro's root filesystem."""
    base = prefix or TermuxPaths.PREFIX
    return base / "var" / "lib" / "proot-distro" / "installed-rootfs" / distro


def parse_installed(listing: str, distro: str) -> bool:
    """Decide from ``proot-distro list`` output whether distro is installed.

    Handles the one-line form ("ubuntu (installed)") as well as the block
    form with "Alias: ubuntu" followed by "Installed: yes".
    """
    alias = re.escape(distro)
    if re.search(rf"(?<![\w.-]){alias}\s+\(installed\)", listing, re.IGNORECASE):
        return True

    in_block = False
    for line in listing.splitlines():
        stripped = line.strip()
        if stripped.startswith("*"):
            in_block = False
        match = re.match(r"Alias:\s*(\S+)", stripped, re.IGNORECASE)
        if match:
            in_block = match.group(1).lower() == distro.lower()
            continue
        if in_block and re.match(r"Installed:\s*yes", stripped, re.IGNORECASE):
            return True
    return False


class ProotDistro:
    """Installs and enters proot-distro containers."""

    def __init__(self, runner: CommandRunner, distro: str = "ubuntu"):
        self.runner = runner
        self.distro = distro

    def is_installed(self) -> bool:
        result = self.runner.capture([PROOT_DISTRO, "list"], merge_stderr=True)
        if result.ok and parse_installed(result.stdout, self.distro):
            return True
        return rootfs_dir(self.distro).is_dir()

    def install(self) -> None:
        logger.debug(f"Installing {self.distro} rootfs")
        self.runner.run([PROOT_DISTRO, "install", self.distro], timeout=None)

    def login_command(self, argv: Sequence[str]) -> List[str]:
        return [PROOT_DISTRO, "login", self.distro, "--", *argv]

    def run(
        self, argv: Sequence[str], check: bool = True, input: Optional[str] = None
    ) -> CommandResult:
        """Run argv inside the container, output to the log."""
        return self.runner.run(self.login_command(argv), check=check, input=input)

    def run_shell(
        self, script: str, check: bool = True, input: Optional[str] = None
    ) -> CommandResult:
        """Run a bash script inside the container, output to the log."""
        return self.run(["bash", "-c", script], check=check, input=input)

    def command_line(self, argv: Sequence[str]) -> str:
        """The login command as one shell string (for tmux)."""
        return format_command(self.login_command(argv))

    def capture(
        self,
        argv: Sequence[str],
        timeout: Optional[float] = 60.0,
        merge_stderr: bool = False,
    ) -> CommandResult:
        return self.runner.capture(
            self.login_command(argv), timeout=timeout, merge_stderr=merge_stderr
        )

    def interactive(self, argv: Sequence[str], check: bool = True) -> CommandResult:
        return self.runner.interactive(self.login_command(argv), check=check)

    def has_command(self, name: str) -> bool:
        return self.capture(["bash", "-c", f"command -v {name}"]).ok

    def apt_install(self, packages: Sequence[str]) -> None:
        """apt update + install inside the container."""
        names = " ".join(packages)
        self.run_shell(f"apt update -y && apt install -y {names}")

    def missing_packages(self, packages: Sequence[str]) -> List[str]:
        missing = []
        for name in packages:
            result = self.capture(["dpkg", "-s", name])
            if not result.ok or "install ok installed" not in result.stdout:
                missing.append(name)
        return missing
