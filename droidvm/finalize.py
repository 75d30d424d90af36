# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Access details shown at the end of setup (and by droidvm info)."""

import getpass
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from rich.panel import Panel

from droidvm.core.network import local_ip
from droidvm.steps.base import SetupContext
from droidvm.utils.logging import console, get_log_file


@dataclass
class AccessDetails:
    """How to reach the device once setup is done."""

    user: str
    ip: Optional[str]
    ssh_port: int
    http_port: int
    log_file: Path
    tailscale_ip: Optional[str] = None
    tunnel_url: Optional[str] = None

    @property
    def ssh_command(self) -> str:
        return f"ssh -p {self.ssh_port} {self.user}@{self.ip or '<IP_ADDRESS>'}"

    @property
    def http_url(self) -> str:
        return f"http://{self.ip or 'localhost'}:{self.http_port}"

    def rows(self) -> List[Tuple[str, str]]:
        rows = [
            ("SSH Local", self.ssh_command),
            ("HTTP Local", self.http_url),
        ]
        if self.tailscale_ip:
            rows.append(("SSH Tailscale", f"ssh -p {self.ssh_port} {self.user}@{self.tailscale_ip}"))
        if self.tunnel_url:
            rows.append(("Public URL", self.tunnel_url))
        rows.append(("Logs", str(self.log_file)))
        return rows


def access_details(ctx: SetupContext) -> AccessDetails:
    """Collect the current addresses and what setup recorded."""
    settings = ctx.config.model
    return AccessDetails(
        user=getpass.getuser(),
        ip=local_ip(ctx.runner, settings.ssh.interface),
        ssh_port=settings.ssh.port,
        http_port=settings.cloudflare.service_port,
        log_file=get_log_file(),
        tailscale_ip=ctx.tailscale.ip() or ctx.state.get_fact("tailscale_ip"),
        tunnel_url=ctx.state.get_fact("tunnel_url"),
    )


def print_access_details(details: AccessDetails) -> None:
    width = max(len(label) for label, _ in details.rows()) + 1
    console.print("[bold]Access Details:[/bold]")
    for label, value in details.rows():
        console.print(f"  → {(label + ':').ljust(width)}  {value}")


def print_summary(ctx: SetupContext) -> None:
    """Print the completion banner, access details and next steps."""
    console.print()
    console.print(
        Panel("🎉 DroidVM Setup Complete! 🎉", border_style="green", expand=False, padding=(0, 10))
    )
    print_access_details(access_details(ctx))
    console.print()
    console.print("[cyan]Next Steps:[/cyan]")
    console.print(f"  1. Build your API in:  {ctx.config.install_dir}")
    console.print("  2. Start coding!")
    console.print()
    console.print("[green]Happy Hacking![/green]")
