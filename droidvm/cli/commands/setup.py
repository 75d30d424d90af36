# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""The setup command: pre-flight checks, then every provisioning step."""

import sys

import click

from droidvm.cli import cli
from droidvm.cli.helpers import (
    build_context,
    console,
    handle_errors,
    print_banner,
    show_error_panel,
)
from droidvm.finalize import print_summary
from droidvm.preflight import run_preflight
from droidvm.steps import RunOptions, select_steps, step_ids
from droidvm.steps.runner import StepRunner
from droidvm.utils.logging import get_log_file, get_logger

logger = get_logger(__name__)

STEP_CHOICE = click.Choice(step_ids())


@cli.command("setup")
@click.option("--skip-cloudflare", is_flag=True, help="Do not offer the Cloudflare tunnel")
@click.option(
    "--yes", "-y", "assume_yes", is_flag=True, help="Never prompt; take the default answers"
)
@click.option("--force", is_flag=True, help="Re-run steps that are already satisfied")
@click.option("--only", multiple=True, type=STEP_CHOICE, help="Run only this step (repeatable)")
@click.option(
    "--skip", "skip_steps", multiple=True, type=STEP_CHOICE, help="Skip this step (repeatable)"
)
@click.option("--no-preflight", is_flag=True, help="Skip the pre-flight checks")
@handle_errors
def setup(
    skip_cloudflare: bool,
    assume_yes: bool,
    force: bool,
    only: tuple,
    skip_steps: tuple,
    no_preflight: bool,
):
    """Provision this device: packages, SSH, tmux, Python, Ubuntu, VPN, tunnel."""
    options = RunOptions(skip_cloudflare=skip_cloudflare, assume_yes=assume_yes, force=force)
    ctx = build_context(options)
    steps = select_steps(only=only, skip=skip_steps)

    logger.debug(f"Setup started: steps={[s.id for s in steps]} options={options}")
    print_banner()

    if not no_preflight:
        run_preflight(ctx)

    runner = StepRunner(ctx, steps)
    runner.run_all()

    console.print()
    console.print(runner.summary_table())

    if not runner.ok:
        show_error_panel(
            "Setup Failed",
            "A required step failed; later steps were not run.",
            hint=f"Details in {get_log_file()}. Fix the problem and run 'droidvm setup' again.",
        )
        sys.exit(1)

    print_summary(ctx)
