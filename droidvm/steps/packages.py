# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Base package installation."""

from droidvm.steps.base import SetupContext, Step, StepResult
from droidvm.utils.logging import get_logger

logger = get_logger(__name__)


class BasePackagesStep(Step):
    """Refresh the package index, upgrade, and install the base tools."""

    id = "packages"
    title = "Installing base packages"

    def check(self, ctx: SetupContext) -> bool:
        return not ctx.packages.missing(ctx.config.model.packages)

    def run(self, ctx: SetupContext) -> StepResult:
        packages = ctx.config.model.packages

        logger.print("Updating package lists and upgrading...", style="cyan")
        ctx.packages.update()
        ctx.packages.upgrade()

        logger.print("Installing core dependencies...", style="cyan")
        ctx.packages.install(packages)

        logger.success("Core packages installed")
        return self.success(f"{len(packages)} packages", details=list(packages))
