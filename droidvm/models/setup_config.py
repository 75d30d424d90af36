# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Pydantic models for the setup configuration (~/.config/droidvm/config.yml)."""

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Termux/apt package names: lowercase letters, digits and + - .
VALID_PACKAGE_PATTERN = re.compile(r"^[a-z0-9][a-z0-9+.-]*$")

DEFAULT_PACKAGES = [
    "openssh",
    "tmux",
    "git",
    "wget",
    "curl",
    "python",
    "proot-distro",
    "tailscale",
]


def _validate_package_list(value: List[str]) -> List[str]:
    cleaned: List[str] = []
    for name in value:
        name = name.strip()
        if not name or name in cleaned:
            continue
        if not VALID_PACKAGE_PATTERN.match(name):
            raise ValueError(f"Invalid package name: {name!r}")
        cleaned.append(name)
    return cleaned


class SSHSettings(BaseModel):
    """SSH server settings.

    Termux's sshd listens on 8022 since unprivileged apps cannot bind 22.
    """

    port: int = Field(default=8022, ge=1024, le=65535)
    interface: str = "wlan0"
    autostart: bool = True


class TmuxSettings(BaseModel):
    """Values rendered into ~/.tmux.conf."""

    prefix: str = "C-a"
    base_index: int = Field(default=1, ge=0)
    history_limit: int = Field(default=10000, ge=0)
    status_style: str = "bg=black,fg=white"

    @field_validator("prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        if not re.match(r"^[CM]-\S$", v):
            raise ValueError(f"tmux prefix must look like C-a or M-b, got {v!r}")
        return v


class PythonSettings(BaseModel):
    """Python tooling installed with pip."""

    tools: List[str] = Field(default_factory=lambda: ["uv"])


class DistroSettings(BaseModel):
    """proot-distro container settings."""

    name: str = "ubuntu"
    packages: List[str] = Field(default_factory=lambda: ["curl", "wget"])

    @field_validator("packages")
    @classmethod
    def validate_packages(cls, v: List[str]) -> List[str]:
        return _validate_package_list(v)


class TailscaleSettings(BaseModel):
    """Tailscale client settings."""

    use_sudo: bool = True


class CloudflareSettings(BaseModel):
    """Cloudflare tunnel settings.

    Leave tunnel_name/subdomain/domain unset to be prompted for them.
    """

    service_port: int = Field(default=8000, ge=1, le=65535)
    tunnel_name: Optional[str] = None
    subdomain: Optional[str] = None
    domain: Optional[str] = None
    session_name: str = "cloudflared"


class SetupConfigModel(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="ignore")

    version: str = "1.0"
    install_dir: Optional[str] = None
    packages: List[str] = Field(default_factory=lambda: list(DEFAULT_PACKAGES))
    network_check_host: str = "google.com"
    min_free_gb: float = Field(default=1.0, ge=0)
    ssh: SSHSettings = Field(default_factory=SSHSettings)
    tmux: TmuxSettings = Field(default_factory=TmuxSettings)
    python: PythonSettings = Field(default_factory=PythonSettings)
    distro: DistroSettings = Field(default_factory=DistroSettings)
    tailscale: TailscaleSettings = Field(default_factory=TailscaleSettings)
    cloudflare: CloudflareSettings = Field(default_factory=CloudflareSettings)

    @field_validator("packages")
    @classmethod
    def validate_packages(cls, v: List[str]) -> List[str]:
        return _validate_package_list(v)
