# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""tmux configuration."""

from droidvm.core.tmux import write_tmux_conf
from droidvm.paths import TermuxPaths
from droidvm.steps.base import SetupContext, Step, StepResult
from droidvm.utils.logging import get_logger

logger = get_logger(__name__)


class TmuxStep(Step):
    """Write ~/.tmux.conf, never overwriting an existing one."""

    id = "tmux"
    title = "Setting up tmux"

    def check(self, ctx: SetupContext) -> bool:
        return TermuxPaths.tmux_conf().exists()

    def run(self, ctx: SetupContext) -> StepResult:
        path = TermuxPaths.tmux_conf()
        if write_tmux_conf(path, ctx.config.model.tmux):
            logger.success("tmux configuration created")
            return self.success(str(path))

        logger.info("Existing tmux config found, skipping overwrite")
        return self.skipped("existing config kept")
