# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Cloudflare tunnel.

Publishes http://localhost:<service_port> as https://<subdomain>.<domain>
through a named tunnel. The tunnel process lives in a detached tmux session
so it survives the setup shell.
"""

import platform
from typing import Callable, Optional

from droidvm.core.cloudflared import cloudflared_arch, is_valid_domain, is_valid_label
from droidvm.steps.base import SetupContext, Step, StepResult
from droidvm.utils.exceptions import StepError
from droidvm.utils.logging import get_logger

logger = get_logger(__name__)


def _resolve_value(
    ctx: SetupContext,
    configured: Optional[str],
    message: str,
    validate: Callable[[str], bool],
    default: Optional[str] = None,
) -> str:
    """Use the configured value if there is one, otherwise ask."""
    if configured:
        if not validate(configured):
            raise StepError(f"Invalid value in config: {configured!r}")
        return configured
    return ctx.prompter.text(message, default=default, validate=validate)


class CloudflareStep(Step):
    """Optionally expose the local HTTP service through a Cloudflare tunnel."""

    id = "cloudflare"
    title = "Cloudflare Tunnel"
    required = False

    def check(self, ctx: SetupContext) -> bool:
        if not ctx.state.get_fact("tunnel_url"):
            return False
        return ctx.tmux.has_session(ctx.config.model.cloudflare.session_name)

    def run(self, ctx: SetupContext) -> StepResult:
        settings = ctx.config.model.cloudflare

        if ctx.options.skip_cloudflare:
            logger.warning("Skipping Cloudflare setup by user request.")
            return self.skipped("--skip-cloudflare")

        logger.print("This exposes your local server to the public web safely.", style="bold")
        if not ctx.prompter.confirm("Do you have a Cloudflare domain?", default=bool(settings.domain)):
            logger.info("Skipping Cloudflare setup.")
            return self.skipped("no domain")

        if not ctx.distro.is_installed():
            raise StepError(
                f"{ctx.distro.distro} container is not installed",
                hint="Run: droidvm setup --only ubuntu",
            )

        if ctx.cloudflared.is_installed():
            logger.info("cloudflared is already installed")
        else:
            logger.print("Installing cloudflared inside Ubuntu container...", style="cyan")
            ctx.cloudflared.install(cloudflared_arch(platform.machine()))
            logger.success("cloudflared binary installed")

        if ctx.cloudflared.is_logged_in():
            logger.info("cloudflared is already authenticated")
        elif not ctx.prompter.interactive:
            raise StepError(
                "cloudflared login needs a browser",
                hint="Run 'droidvm setup --only cloudflare' without --yes",
            )
        else:
            logger.print("\n=== Authentication ===", style="yellow")
            logger.print("Copy the URL below into your browser:")
            ctx.cloudflared.login()

        name = _resolve_value(
            ctx,
            settings.tunnel_name,
            "Enter a name for this tunnel (e.g., droidvm):",
            is_valid_label,
            default="droidvm",
        )

        tunnel_id = ctx.cloudflared.tunnel_id(name)
        if tunnel_id:
            logger.info(f"Reusing existing tunnel '{name}'")
        else:
            ctx.cloudflared.create_tunnel(name)
            tunnel_id = ctx.cloudflared.tunnel_id(name)

        subdomain = _resolve_value(
            ctx, settings.subdomain, "Enter subdomain (e.g., api):", is_valid_label
        )
        domain = _resolve_value(
            ctx, settings.domain, "Enter domain (e.g., site.com):", is_valid_domain
        )

        if not tunnel_id:
            return self.failed("Failed to retrieve Tunnel ID. Check logs.")

        hostname = f"{subdomain}.{domain}".lower()
        service_url = f"http://localhost:{settings.service_port}"
        ctx.cloudflared.write_config(tunnel_id, hostname, service_url)
        ctx.cloudflared.route_dns(name, hostname)

        session = settings.session_name
        if ctx.tmux.has_session(session):
            logger.info(f"Tunnel already running in tmux session '{session}'")
        else:
            ctx.tmux.new_detached(session, ctx.cloudflared.run_command(name))

        url = f"https://{hostname}"
        ctx.state.set_fact("tunnel_name", name)
        ctx.state.set_fact("tunnel_url", url)
        logger.success(f"Tunnel active at {url}")
        return self.success(url)
