# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Pre-flight checks run before any provisioning step."""

import os
import shutil
from pathlib import Path
from typing import Optional

from droidvm.paths import TermuxPaths
from droidvm.steps.base import SetupContext
from droidvm.utils.exceptions import EnvironmentCheckError
from droidvm.utils.logging import get_logger
from droidvm.utils.shell import CommandRunner

logger = get_logger(__name__)

GIB = 1024**3


def check_termux(app_dir: Optional[Path] = None) -> None:
    """Refuse to run outside Termux.

    DROIDVM_SKIP_TERMUX_CHECK=1 disables the check (for trying things on a
    regular Linux box).
    """
    if os.environ.get("DROIDVM_SKIP_TERMUX_CHECK", "").lower() in ("1", "true", "yes"):
        logger.debug("Termux check disabled by DROIDVM_SKIP_TERMUX_CHECK")
        return

    app_dir = app_dir or TermuxPaths.APP_DIR
    if not app_dir.is_dir():
        raise EnvironmentCheckError(
            "This script must be run in Termux.",
            hint="Install Termux from F-Droid and run droidvm inside it",
        )


def check_network(runner: CommandRunner, host: str = "google.com") -> None:
    """Make sure we can reach the internet before downloading anything."""
    result = runner.capture(["ping", "-c", "1", host], timeout=15.0)
    if not result.ok:
        raise EnvironmentCheckError(
            "No internet connection detected.",
            hint=f"Could not ping {host}",
        )


def free_space_gb(path: Path) -> float:
    """Free space on the filesystem holding path, in GiB."""
    while not path.exists() and path != path.parent:
        path = path.parent
    return shutil.disk_usage(path).free / GIB


def check_storage(path: Path, min_free_gb: float = 1.0) -> float:
    """Report free space, warning when it is below min_free_gb."""
    available = free_space_gb(path)
    if available < min_free_gb:
        logger.warning(f"Low storage space: {available:.1f}GB available.")
    else:
        logger.success(f"Storage available: {available:.1f}GB")
    return available


def android_version(runner: CommandRunner) -> str:
    result = runner.capture(["getprop", "ro.build.version.release"])
    version = result.stdout.strip() if result.ok else ""
    return version or "Unknown"


def run_preflight(ctx: SetupContext) -> None:
    """Run all pre-flight checks.

    Raises:
        EnvironmentCheckError: If droidvm cannot run here
    """
    logger.print("\nRunning pre-flight checks...\n", style="bold")
    settings = ctx.config.model

    check_termux()
    check_network(ctx.runner, settings.network_check_host)
    check_storage(Path.home(), settings.min_free_gb)

    logger.info(f"Android version: {android_version(ctx.runner)}")

    logger.print("")
    logger.warning("Ensure battery optimization is DISABLED for Termux.")
    logger.print("  (Settings → Apps → Termux → Battery → Unrestricted)")
    logger.print("")
    ctx.prompter.pause()
