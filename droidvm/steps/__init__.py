# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Provisioning step registry.

Steps run in registration order. To add a step:
1. Create a Step subclass in this package
2. Add it to STEP_CLASSES at the position it should run
"""

from typing import Iterable, List, Optional

from droidvm.steps.base import RunOptions, SetupContext, Step, StepResult, StepStatus
from droidvm.steps.cloudflare import CloudflareStep
from droidvm.steps.packages import BasePackagesStep
from droidvm.steps.python_env import PythonStep
from droidvm.steps.ssh import SSHStep
from droidvm.steps.tailscale import TailscaleStep
from droidvm.steps.tmux import TmuxStep
from droidvm.steps.ubuntu import UbuntuStep
from droidvm.utils.exceptions import StepError

STEP_CLASSES = [
    BasePackagesStep,
    SSHStep,
    TmuxStep,
    PythonStep,
    UbuntuStep,
    TailscaleStep,
    CloudflareStep,
]


def get_all_steps() -> List[Step]:
    """Get fresh instances of every step, in run order."""
    return [cls() for cls in STEP_CLASSES]


def get_step(step_id: str) -> Optional[Step]:
    """Get a step by id."""
    for step in get_all_steps():
        if step.id == step_id:
            return step
    return None


def step_ids() -> List[str]:
    return [step.id for step in get_all_steps()]


def select_steps(
    only: Optional[Iterable[str]] = None,
    skip: Optional[Iterable[str]] = None,
) -> List[Step]:
    """Filter the registry, keeping run order.

    Raises:
        StepError: If an id is not a known step
    """
    only = list(only or [])
    skip = list(skip or [])
    known = step_ids()

    unknown = [s for s in only + skip if s not in known]
    if unknown:
        raise StepError(
            f"Unknown step: {', '.join(unknown)}",
            hint=f"Valid steps: {', '.join(known)}",
        )

    steps = get_all_steps()
    if only:
        steps = [s for s in steps if s.id in only]
    return [s for s in steps if s.id not in skip]


__all__ = [
    "RunOptions",
    "SetupContext",
    "Step",
    "StepResult",
    "StepStatus",
    "get_all_steps",
    "get_step",
    "select_steps",
    "step_ids",
]
