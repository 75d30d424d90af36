# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""cloudflared tunnel management.

cloudflared runs inside the proot container rather than in Termux, which
keeps the Termux prefix free of a binary pkg does not manage. The tunnel
routes one public hostname to a local HTTP service and answers 404 for
everything else.
"""

import re
import shlex
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml

from droidvm.core.proot import ProotDistro
from droidvm.paths import DistroPaths
from droidvm.utils.exceptions import CommandError
from droidvm.utils.logging import get_logger

logger = get_logger(__name__)

RELEASE_URL = "https://github.com/cloudflare/cloudflared/releases/latest/download"

_ARCH_MAP = {
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv8l": "arm",
    "armv7l": "arm",
    "arm": "arm",
    "x86_64": "amd64",
    "amd64": "amd64",
    "i686": "386",
    "i386": "386",
}

_UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.I)
_LABEL_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$", re.I)


@dataclass
class TunnelInfo:
    """One row of ``cloudflared tunnel list``."""

    id: str
    name: str


def cloudflared_arch(machine: str) -> str:
    """Map platform.machine() to the cloudflared release suffix.

    Unknown values fall back to arm64, the architecture of nearly every
    phone that can run Termux.
    """
    return _ARCH_MAP.get(machine.lower(), "arm64")


def download_url(arch: str) -> str:
    return f"{RELEASE_URL}/cloudflared-linux-{arch}"


def is_valid_label(label: str) -> bool:
    """True for a single DNS label (subdomain or tunnel name)."""
    return bool(_LABEL_RE.match(label))


def is_valid_domain(domain: str) -> bool:
    """True for a dotted domain name such as example.com."""
    labels = domain.rstrip(".").split(".")
    return len(labels) >= 2 and all(is_valid_label(label) for label in labels)


def parse_tunnel_list(output: str) -> List[TunnelInfo]:
    """Parse the table printed by ``cloudflared tunnel list``."""
    tunnels = []
    for line in output.splitlines():
        parts = line.split()
        if len(parts) >= 2 and _UUID_RE.match(parts[0]):
            tunnels.append(TunnelInfo(id=parts[0], name=parts[1]))
    return tunnels


def build_ingress_config(
    tunnel_id: str, hostname: str, service_url: str = "http://localhost:8000"
) -> Dict[str, Any]:
    """Build the cloudflared config.yml mapping."""
    return {
        "tunnel": tunnel_id,
        "credentials-file": DistroPaths.tunnel_credentials(tunnel_id),
        "ingress": [
            {"hostname": hostname, "service": service_url},
            {"service": "http_status:404"},
        ],
    }


def render_ingress_config(config: Dict[str, Any]) -> str:
    return yaml.safe_dump(config, sort_keys=False, default_flow_style=False)


class CloudflaredClient:
    """Drives cloudflared inside the proot container."""

    def __init__(self, distro: ProotDistro):
        self.distro = distro

    def is_installed(self) -> bool:
        return self.distro.has_command("cloudflared")

    def install(self, arch: str) -> None:
        """Download the release binary unless it is already present."""
        target = DistroPaths.CLOUDFLARED_BIN
        script = (
            "if ! command -v cloudflared >/dev/null 2>&1; then\n"
            f"    wget -q {shlex.quote(download_url(arch))} -O {target}\n"
            f"    chmod +x {target}\n"
            "fi\n"
        )
        self.distro.run_shell(script)

    def is_logged_in(self) -> bool:
        """The origin certificate is written by a successful login."""
        cert = f"{DistroPaths.CLOUDFLARED_DIR}/cert.pem"
        return self.distro.capture(["test", "-f", cert]).ok

    def login(self) -> None:
        """Prints an authorization URL and waits for the browser flow."""
        self.distro.interactive(["cloudflared", "tunnel", "login"])

    def list_tunnels(self) -> List[TunnelInfo]:
        result = self.distro.capture(["cloudflared", "tunnel", "list"])
        if not result.ok:
            return []
        return parse_tunnel_list(result.stdout)

    def tunnel_id(self, name: str) -> Optional[str]:
        for tunnel in self.list_tunnels():
            if tunnel.name == name:
                return tunnel.id
        return None

    def create_tunnel(self, name: str) -> None:
        self.distro.run(["cloudflared", "tunnel", "create", name])

    def write_config(self, tunnel_id: str, hostname: str, service_url: str) -> str:
        """Write config.yml inside the container and return its contents."""
        content = render_ingress_config(build_ingress_config(tunnel_id, hostname, service_url))
        config_path = DistroPaths.cloudflared_config()
        script = f"mkdir -p {DistroPaths.CLOUDFLARED_DIR} && cat > {config_path}"
        self.distro.run_shell(script, input=content)
        logger.debug(f"Wrote {config_path}")
        return content

    def route_dns(self, name: str, hostname: str) -> None:
        """Create the CNAME for hostname; an existing record is accepted."""
        argv = ["cloudflared", "tunnel", "route", "dns", name, hostname]
        result = self.distro.capture(argv, merge_stderr=True)
        if result.ok:
            return
        if "already exists" in result.stdout.lower():
            logger.debug(f"DNS record for {hostname} already exists")
            return
        logger.debug(f"cloudflared tunnel route dns failed:\n{result.stdout}")
        raise CommandError(
            self.distro.login_command(argv),
            result.returncode,
            result.stdout,
            hint=f"Check that {hostname} belongs to a zone in your Cloudflare account",
        )

    def run_command(self, name: str) -> str:
        """Shell command that keeps the tunnel connected (for tmux)."""
        return self.distro.command_line(["cloudflared", "tunnel", "run", name])
