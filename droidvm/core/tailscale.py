# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Tailscale CLI wrapper."""

from typing import Optional

from droidvm.utils.exceptions import CommandError
from droidvm.utils.logging import get_logger
from droidvm.utils.shell import CommandRunner

logger = get_logger(__name__)


class TailscaleClient:
    """Joins the tailnet and reports the device address."""

    def __init__(self, runner: CommandRunner, use_sudo: bool = True):
        self.runner = runner
        self.use_sudo = use_sudo

    def ip(self) -> Optional[str]:
        """Get the Tailscale IPv4 address, if available.

        Returns:
            The Tailscale IPv4 address or None if Tailscale is not running/installed.
        """
        result = self.runner.capture(["tailscale", "ip", "-4"], timeout=2.0)
        if result.ok:
            ip = result.stdout.strip().split("\n")[0].strip()
            if ip:
                return ip
        return None

    def is_up(self) -> bool:
        return self.ip() is not None

    def up(self) -> None:
        """Run ``tailscale up``, trying sudo first (rooted devices).

        The command prints a login URL, so it runs on the terminal.
        """
        if self.use_sudo and self.runner.which("sudo"):
            try:
                self.runner.interactive(["sudo", "tailscale", "up"])
                return
            except CommandError as e:
                logger.debug(f"sudo tailscale up failed, retrying without sudo: {e}")
        self.runner.interactive(["tailscale", "up"])
