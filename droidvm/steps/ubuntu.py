# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""proot Ubuntu container."""

from droidvm.steps.base import SetupContext, Step, StepResult
from droidvm.utils.logging import get_logger

logger = get_logger(__name__)


class UbuntuStep(Step):
    """Install the distro rootfs and pre-install basic tools inside it."""

    id = "ubuntu"
    title = "Setting up Ubuntu (Proot)"

    def check(self, ctx: SetupContext) -> bool:
        if not ctx.distro.is_installed():
            return False
        return not ctx.distro.missing_packages(ctx.config.model.distro.packages)

    def run(self, ctx: SetupContext) -> StepResult:
        settings = ctx.config.model.distro

        if ctx.distro.is_installed():
            logger.info(f"{settings.name} is already installed")
        else:
            logger.print(f"Downloading and installing {settings.name} rootfs...", style="cyan")
            ctx.distro.install()
            logger.success(f"{settings.name} installed")

        if settings.packages:
            logger.debug(f"Configuring {settings.name} internal packages")
            logger.print(f"Installing {', '.join(settings.packages)} inside {settings.name}...", style="cyan")
            ctx.distro.apt_install(settings.packages)

        return self.success(settings.name, details=list(settings.packages))
