# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Step status commands (status, steps, reset)."""

from typing import Optional

import click
from rich.table import Table

from droidvm.cli import cli
from droidvm.cli.helpers import build_context, console, handle_errors
from droidvm.steps import get_all_steps, step_ids
from droidvm.utils.exceptions import DroidVMError
from droidvm.utils.logging import get_logger

logger = get_logger(__name__)


@cli.command("steps")
def steps():
    """List the provisioning steps in run order."""
    table = Table(box=None)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Description")
    table.add_column("Kind", style="dim")

    for index, step in enumerate(get_all_steps(), start=1):
        table.add_row(str(index), step.id, step.title, "required" if step.required else "optional")

    console.print(table)


@cli.command("status")
@handle_errors
def status():
    """Show which steps are satisfied and when they last ran."""
    ctx = build_context()

    table = Table(title="Provisioning Status", box=None, title_style="bold")
    table.add_column("Step", style="cyan")
    table.add_column("State")
    table.add_column("Last run", style="dim")

    for step in get_all_steps():
        try:
            satisfied = step.check(ctx)
            state = "[green]✓ satisfied[/green]" if satisfied else "[yellow]pending[/yellow]"
        except DroidVMError as e:
            logger.debug(f"Check for {step.id} failed: {e}")
            state = "[red]unknown[/red]"
        table.add_row(step.title, state, ctx.state.last_run(step.id) or "never")

    console.print(table)

    sessions = ctx.tmux.list_sessions()
    if sessions:
        console.print()
        console.print("[bold]tmux sessions:[/bold]")
        for session in sessions:
            attached = " [green](attached)[/green]" if session["attached"] else ""
            console.print(f"  {session['name']}: {session['windows']} window(s){attached}")


@cli.command("reset")
@click.argument("step_id", required=False, type=click.Choice(step_ids()))
@handle_errors
def reset(step_id: Optional[str]):
    """Forget recorded runs (one STEP_ID, or everything).

    This only clears droidvm's own record; nothing is uninstalled.
    """
    ctx = build_context()
    ctx.state.reset(step_id)
    if step_id:
        logger.success(f"Forgot step '{step_id}'")
    else:
        logger.success("Forgot all recorded steps")
