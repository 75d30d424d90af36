# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""SSH server setup."""

from droidvm.core.network import local_ip
from droidvm.core.sshd import ensure_autostart, has_autostart
from droidvm.paths import TermuxPaths
from droidvm.steps.base import SetupContext, Step, StepResult
from droidvm.utils.logging import get_logger

logger = get_logger(__name__)


class SSHStep(Step):
    """Start sshd (setting a password first) and start it from .bashrc."""

    id = "ssh"
    title = "Configuring SSH server"

    def check(self, ctx: SetupContext) -> bool:
        if not ctx.sshd.is_running():
            return False
        if ctx.config.model.ssh.autostart:
            return has_autostart(TermuxPaths.bashrc())
        return True

    def run(self, ctx: SetupContext) -> StepResult:
        settings = ctx.config.model.ssh
        started = True

        if ctx.sshd.is_running():
            logger.info("SSH is already running")
        elif not ctx.prompter.interactive:
            # passwd needs a terminal; never start sshd without a password
            logger.warning("Skipping SSH password in unattended mode, run 'passwd' then 'sshd'")
            started = False
        else:
            logger.print("Setting SSH password (required)...", style="yellow")
            ctx.sshd.set_password()
            ctx.sshd.start()
            logger.success("SSH server started")

        ip = local_ip(ctx.runner, settings.interface)
        logger.info(f"Local IP: {ip or 'Unknown'}")

        if settings.autostart and ensure_autostart(TermuxPaths.bashrc()):
            logger.success("Added SSH auto-start to .bashrc")

        if not started:
            return self.skipped("needs interactive password")
        return self.success(f"port {settings.port}")
