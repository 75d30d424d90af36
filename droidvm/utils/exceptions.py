# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Exception hierarchy for droidvm."""

from typing import List, Optional, Sequence


class DroidVMError(Exception):
    """Base class for all droidvm errors.

    Carries an optional hint that handle_errors shows below the message.
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class CommandError(DroidVMError):
    """Raised when an external command exits non-zero or cannot be started."""

    def __init__(
        self,
        argv: Sequence[str],
        returncode: int,
        output: str = "",
        hint: Optional[str] = None,
    ):
        self.argv: List[str] = list(argv)
        self.returncode = returncode
        self.output = output
        message = f"Command failed ({returncode}): {' '.join(self.argv)}"
        super().__init__(message, hint=hint)


class EnvironmentCheckError(DroidVMError):
    """Raised when a pre-flight check fails."""


class StepError(DroidVMError):
    """Raised by a provisioning step that cannot continue."""
