# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Local network address discovery."""

import re
from typing import Optional

from droidvm.utils.shell import CommandRunner

_INET_RE = re.compile(r"^\s*inet\s+(?:addr:)?(\d{1,3}(?:\.\d{1,3}){3})", re.MULTILINE)


def parse_inet_address(output: str) -> Optional[str]:
    """Extract the first IPv4 address from ``ifconfig`` output."""
    match = _INET_RE.search(output)
    return match.group(1) if match else None


def local_ip(runner: CommandRunner, interface: str = "wlan0") -> Optional[str]:
    """Get the IPv4 address of interface, if it is up."""
    result = runner.capture(["ifconfig", interface])
    if not result.ok:
        return None
    return parse_inet_address(result.stdout)
