# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Centralized path definitions for droidvm.

Paths are organized by context:

- TermuxPaths: Paths in the Termux host environment (where droidvm runs)
- DistroPaths: Paths inside the proot Ubuntu container

Usage:
    from droidvm.paths import TermuxPaths, DistroPaths

    log_file = TermuxPaths.log_file()
    cloudflared = DistroPaths.CLOUDFLARED_BIN
"""

import os
from pathlib import Path


class TermuxPaths:
    """Paths in the Termux environment.

    Everything is resolved from ``Path.home()`` at call time so tests can
    point HOME at a temporary directory.
    """

    # Termux application data directory, only present on Android
    APP_DIR = Path("/data/data/com.termux")

    # Termux installation prefix
    PREFIX = Path("/data/data/com.termux/files/usr")

    @staticmethod
    def install_dir() -> Path:
        """~/droidvm/ (override with DROIDVM_HOME)"""
        env_dir = os.getenv("DROIDVM_HOME")
        if env_dir:
            return Path(env_dir).expanduser()
        return Path.home() / "droidvm"

    @staticmethod
    def log_file() -> Path:
        """~/droidvm/setup.log"""
        return TermuxPaths.install_dir() / "setup.log"

    @staticmethod
    def config_dir() -> Path:
        """~/.config/droidvm/"""
        return Path.home() / ".config" / "droidvm"

    @staticmethod
    def config_file() -> Path:
        """~/.config/droidvm/config.yml"""
        return TermuxPaths.config_dir() / "config.yml"

    @staticmethod
    def bashrc() -> Path:
        """~/.bashrc"""
        return Path.home() / ".bashrc"

    @staticmethod
    def tmux_conf() -> Path:
        """~/.tmux.conf"""
        return Path.home() / ".tmux.conf"


class DistroPaths:
    """Paths inside the proot Ubuntu container (login user is root)."""

    CLOUDFLARED_BIN = "/usr/local/bin/cloudflared"
    CLOUDFLARED_DIR = "/root/.cloudflared"

    @staticmethod
    def cloudflared_config() -> str:
        """/root/.cloudflared/config.yml"""
        return f"{DistroPaths.CLOUDFLARED_DIR}/config.yml"

    @staticmethod
    def tunnel_credentials(tunnel_id: str) -> str:
        """/root/.cloudflared/<tunnel-id>.json"""
        return f"{DistroPaths.CLOUDFLARED_DIR}/{tunnel_id}.json"
