# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Termux package manager (pkg / dpkg)."""

from typing import Iterable, List, Sequence

from droidvm.utils.logging import get_logger
from droidvm.utils.shell import CommandRunner

logger = get_logger(__name__)

# Keep locally modified config files from blocking an unattended upgrade
FORCE_CONFNEW = "Dpkg::Options::=--force-confnew"


def normalise_packages(packages: Iterable[str]) -> List[str]:
    """Strip blanks and duplicates, preserving order."""
    seen = set()
    result: List[str] = []
    for pkg in packages:
        name = pkg.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        result.append(name)
    return result


class PackageManager:
    """Wraps ``pkg`` for installs and ``dpkg`` for queries."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def update(self) -> None:
        self.runner.run(["pkg", "update", "-y"])

    def upgrade(self) -> None:
        self.runner.run(["pkg", "upgrade", "-y", "-o", FORCE_CONFNEW])

    def install(self, packages: Sequence[str]) -> None:
        names = normalise_packages(packages)
        if not names:
            return
        logger.debug(f"Installing packages: {', '.join(names)}")
        self.runner.run(["pkg", "install", "-y", *names])

    def is_installed(self, name: str) -> bool:
        result = self.runner.capture(["dpkg", "-s", name])
        if not result.ok:
            return False
        return "Status: install ok installed" in result.stdout

    def missing(self, packages: Sequence[str]) -> List[str]:
        """Return the packages that are not installed yet."""
        return [name for name in normalise_packages(packages) if not self.is_installed(name)]
