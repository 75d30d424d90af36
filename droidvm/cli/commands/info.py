# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Informational commands (info, doctor)."""

from droidvm.cli import cli
from droidvm.cli.helpers import build_context, handle_errors
from droidvm.finalize import access_details, print_access_details
from droidvm.preflight import run_preflight
from droidvm.steps import RunOptions
from droidvm.utils.logging import get_logger

logger = get_logger(__name__)


@cli.command("info")
@handle_errors
def info():
    """Show how to reach this device (SSH, HTTP, tunnel)."""
    ctx = build_context()
    print_access_details(access_details(ctx))


@cli.command("doctor")
@handle_errors
def doctor():
    """Run the pre-flight checks without changing anything."""
    ctx = build_context(RunOptions(assume_yes=True))
    run_preflight(ctx)
    logger.success("Pre-flight checks passed")
