# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Python tooling."""

from droidvm.steps.base import SetupContext, Step, StepResult
from droidvm.utils.exceptions import CommandError
from droidvm.utils.logging import get_logger

logger = get_logger(__name__)


class PythonStep(Step):
    """Install uv (and any other configured tools) with pip.

    uv has no wheel for some Android ABIs; when pip cannot install it the
    step upgrades pip instead so plain pip workflows still work.
    """

    id = "python"
    title = "Configuring Python"

    def check(self, ctx: SetupContext) -> bool:
        return all(ctx.runner.which(tool) for tool in ctx.config.model.python.tools)

    def run(self, ctx: SetupContext) -> StepResult:
        tools = ctx.config.model.python.tools
        if not tools:
            return self.skipped("no tools configured")

        logger.print(f"Installing {', '.join(tools)} with pip...", style="cyan")
        try:
            ctx.runner.run(["pip", "install", *tools])
        except CommandError as e:
            logger.warning(f"pip install {' '.join(tools)} failed, upgrading pip instead")
            logger.debug(str(e))
            ctx.runner.run(["pip", "install", "--upgrade", "pip"])
            logger.success("Python environment ready (pip only)")
            return self.success("pip upgraded")

        logger.success("Python environment ready")
        return self.success(", ".join(tools))
