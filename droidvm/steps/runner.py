# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Runs provisioning steps in order."""

from typing import List, Sequence

from rich.table import Table

from droidvm.steps.base import SetupContext, Step, StepResult, StepStatus
from droidvm.utils.exceptions import DroidVMError
from droidvm.utils.logging import console, get_logger

logger = get_logger(__name__)

RULE = "━" * 42

STATUS_STYLES = {
    StepStatus.SUCCESS: "[green]✓ done[/green]",
    StepStatus.SKIPPED: "[cyan]- skipped[/cyan]",
    StepStatus.FAILED: "[red]✗ failed[/red]",
}


def print_step_header(index: int, total: int, title: str) -> None:
    console.print(f"\n[blue][{index}/{total}][/blue] [bold]{title}[/bold]")
    console.print(RULE)


class StepRunner:
    """Checks and runs provisioning steps."""

    def __init__(self, ctx: SetupContext, steps: Sequence[Step]):
        self.ctx = ctx
        self.steps = list(steps)
        self.results: List[StepResult] = []

    def run_all(self) -> List[StepResult]:
        """Run every step in order.

        Stops at the first failed required step. Optional steps may fail
        without stopping the run.
        """
        self.results = []
        total = len(self.steps)

        for index, step in enumerate(self.steps, start=1):
            print_step_header(index, total, step.title)
            result = self.run_step(step)
            self.results.append(result)

            if result.failed and step.required:
                logger.error(f"Required step '{step.id}' failed, stopping")
                break
            if result.failed:
                logger.warning(f"Optional step '{step.id}' failed, continuing")

        return self.results

    def run_step(self, step: Step) -> StepResult:
        """Run one step unless it is already satisfied (or --force)."""
        ctx = self.ctx

        if not ctx.options.force:
            try:
                satisfied = step.check(ctx)
            except DroidVMError as e:
                logger.debug(f"Check for {step.id} failed, running step: {e}")
                satisfied = False
            if satisfied:
                logger.info("Already satisfied, nothing to do")
                if not ctx.state.is_done(step.id):
                    ctx.state.mark_done(step.id)
                return step.skipped("already satisfied")

        logger.debug(f"Running step {step.id}")
        try:
            result = step.run(ctx)
        except DroidVMError as e:
            result = step.failed(str(e), error=e.hint)

        if result.status is StepStatus.SUCCESS:
            ctx.state.mark_done(step.id)
        elif result.failed:
            logger.error(result.message)
            if result.error:
                logger.print(f"  {result.error}", style="dim")
        logger.debug(f"Step {step.id} finished: {result.status.value} ({result.message})")
        return result

    @property
    def ok(self) -> bool:
        """True if no required step failed."""
        required = {step.id for step in self.steps if step.required}
        return not any(r.failed and r.step_id in required for r in self.results)

    def summary_table(self) -> Table:
        """Render a table of every step and what happened to it."""
        table = Table(title="Setup Summary", box=None, title_style="bold")
        table.add_column("Step", style="cyan")
        table.add_column("Status")
        table.add_column("Details", style="dim")

        by_id = {r.step_id: r for r in self.results}
        for step in self.steps:
            result = by_id.get(step.id)
            if result is None:
                table.add_row(step.title, "[dim]not run[/dim]", "")
            else:
                table.add_row(step.title, STATUS_STYLES[result.status], result.message)
        return table
