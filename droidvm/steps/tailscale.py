# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Tailscale VPN."""

from droidvm.steps.base import SetupContext, Step, StepResult
from droidvm.utils.logging import get_logger

logger = get_logger(__name__)


class TailscaleStep(Step):
    """Optionally bring the device onto the tailnet."""

    id = "tailscale"
    title = "Tailscale VPN"
    required = False

    def check(self, ctx: SetupContext) -> bool:
        return ctx.tailscale.is_up()

    def run(self, ctx: SetupContext) -> StepResult:
        logger.print("Tailscale allows remote access without port forwarding.", style="bold")
        logger.print("1. We installed the Tailscale CLI.")
        logger.print("2. You should also install the Android App for the VPN service slot.")

        if not ctx.prompter.confirm("Do you want to run 'tailscale up' now?", default=False):
            logger.info("Skipping 'tailscale up'")
            return self.skipped("declined")

        ctx.tailscale.up()
        ip = ctx.tailscale.ip()
        if ip:
            ctx.state.set_fact("tailscale_ip", ip)
            logger.success(f"Tailscale started ({ip})")
            return self.success(ip)

        logger.success("Tailscale started")
        return self.success("started")
