# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Utility functions for CLI helpers."""

import functools
import sys
from typing import Callable, Optional

from rich.console import Console
from rich.panel import Panel

from droidvm.config import get_config
from droidvm.state import SetupState
from droidvm.steps.base import RunOptions, SetupContext
from droidvm.utils.exceptions import DroidVMError
from droidvm.utils.prompts import Prompter
from droidvm.utils.shell import CommandRunner

_console = Console()


def build_context(options: Optional[RunOptions] = None) -> SetupContext:
    """Assemble the shared context for a command.

    Args:
        options: Flags from the command line. Defaults to an interactive run.
    """
    options = options or RunOptions()
    config = get_config()
    return SetupContext(
        config=config,
        runner=CommandRunner(),
        prompter=Prompter(assume_yes=options.assume_yes),
        state=SetupState(config.state_file),
        options=options,
    )


def show_error_panel(title: str, message: str, hint: str = None) -> None:
    """Display a formatted error panel.

    Args:
        title: Panel title (shown in red)
        message: Main error message
        hint: Optional hint text (shown with blue "Hint:" prefix)
    """
    content = message
    if hint:
        content += f"\n\n[blue]Hint:[/blue] {hint}"
    _console.print(Panel(content, title=f"[red]{title}[/red]", border_style="red"))


def handle_errors(func: Callable) -> Callable:
    """Decorator that wraps CLI commands with standard error handling.

    Catches exceptions, prints error with nice formatting, and exits with code 1.
    Special handling for:
    - KeyboardInterrupt: "Setup interrupted." and exit 1
    - DroidVMError: panel with the error's hint if it has one
    - ClickException: left to Click
    - Other exceptions: generic error panel

    Usage:
        @cli.command()
        @handle_errors
        def my_command():
            ...
    """
    import click

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SystemExit:
            raise
        except KeyboardInterrupt:
            _console.print("\n[red]⚠ Setup interrupted.[/red]")
            sys.exit(1)
        except click.ClickException:
            raise
        except DroidVMError as exc:
            show_error_panel("Error", str(exc), exc.hint)
            sys.exit(1)
        except Exception as exc:
            show_error_panel("Error", str(exc))
            sys.exit(1)

    return wrapper
