# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Base types for provisioning steps.

A step is one idempotent unit of setup. ``check()`` answers "is there
anything left to do?" without touching the system; ``run()`` does the work
and reports a StepResult.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import List, Optional

from droidvm.config import SetupConfig
from droidvm.core.cloudflared import CloudflaredClient
from droidvm.core.pkg import PackageManager
from droidvm.core.proot import ProotDistro
from droidvm.core.sshd import SSHServer
from droidvm.core.tailscale import TailscaleClient
from droidvm.core.tmux import TmuxClient
from droidvm.state import SetupState
from droidvm.utils.prompts import Prompter
from droidvm.utils.shell import CommandRunner


class StepStatus(Enum):
    """Outcome of a step."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class StepResult:
    """Result of running (or not running) a step."""

    step_id: str
    status: StepStatus
    message: str = ""
    details: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status is StepStatus.FAILED


@dataclass
class RunOptions:
    """Flags from the command line."""

    skip_cloudflare: bool = False
    assume_yes: bool = False
    force: bool = False


@dataclass
class SetupContext:
    """Everything a step needs: config, state, runner and prompts.

    The tool wrappers are created on first use from the shared runner.
    """

    config: SetupConfig
    runner: CommandRunner
    prompter: Prompter
    state: SetupState
    options: RunOptions = field(default_factory=RunOptions)

    @cached_property
    def packages(self) -> PackageManager:
        return PackageManager(self.runner)

    @cached_property
    def sshd(self) -> SSHServer:
        return SSHServer(self.runner)

    @cached_property
    def tmux(self) -> TmuxClient:
        return TmuxClient(self.runner)

    @cached_property
    def distro(self) -> ProotDistro:
        return ProotDistro(self.runner, self.config.model.distro.name)

    @cached_property
    def tailscale(self) -> TailscaleClient:
        return TailscaleClient(self.runner, use_sudo=self.config.model.tailscale.use_sudo)

    @cached_property
    def cloudflared(self) -> CloudflaredClient:
        return CloudflaredClient(self.distro)


class Step(ABC):
    """One provisioning step."""

    id: str = ""
    title: str = ""
    # A failed required step stops the run; optional failures are reported
    required: bool = True

    @abstractmethod
    def check(self, ctx: SetupContext) -> bool:
        """Return True if the step has nothing left to do."""

    @abstractmethod
    def run(self, ctx: SetupContext) -> StepResult:
        """Perform the step."""

    def success(self, message: str, details: Optional[List[str]] = None) -> StepResult:
        return StepResult(self.id, StepStatus.SUCCESS, message, details or [])

    def skipped(self, message: str) -> StepResult:
        return StepResult(self.id, StepStatus.SKIPPED, message)

    def failed(self, message: str, error: Optional[str] = None) -> StepResult:
        return StepResult(self.id, StepStatus.FAILED, message, error=error)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"
