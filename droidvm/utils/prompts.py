# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""User prompts.

Steps never call questionary directly; they go through a Prompter so an
unattended run (--yes) never blocks and tests can script the answers.
"""

from typing import Callable, Optional

import questionary

from droidvm.utils.exceptions import StepError
from droidvm.utils.logging import console


class Prompter:
    """Asks the user questions on the terminal."""

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    @property
    def interactive(self) -> bool:
        return not self.assume_yes

    def confirm(self, message: str, default: bool = False) -> bool:
        """Yes/no question. Unattended runs take the default."""
        if self.assume_yes:
            return default
        return bool(questionary.confirm(message, default=default).unsafe_ask())

    def text(
        self,
        message: str,
        default: Optional[str] = None,
        validate: Optional[Callable[[str], bool]] = None,
    ) -> str:
        """Free-form answer. Unattended runs need a default."""
        if self.assume_yes:
            if default is None:
                raise StepError(
                    f"No answer for '{message}' in unattended mode",
                    hint="Set the value in ~/.config/droidvm/config.yml or run without --yes",
                )
            return default

        while True:
            answer = questionary.text(message, default=default or "").unsafe_ask().strip()
            if not answer and default:
                answer = default
            if answer and (validate is None or validate(answer)):
                return answer
            console.print("[yellow]Invalid value, try again.[/yellow]")

    def pause(self, message: str = "Press ENTER to continue...") -> None:
        if self.assume_yes:
            return
        console.input(message)
