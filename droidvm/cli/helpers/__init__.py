# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Shared helpers for the droidvm CLI."""

from rich.console import Console
from rich.panel import Panel

from droidvm import __version__

BANNER = (
    "[bold white]DroidVM Setup v{version}[/bold white]\n"
    "Turn your phone into a cloud server"
)

console = Console()


def print_banner() -> None:
    console.clear()
    console.print(
        Panel(
            BANNER.format(version=__version__),
            border_style="cyan",
            expand=False,
            padding=(1, 12),
        )
    )


from droidvm.cli.helpers.utils import (  # noqa: E402
    build_context,
    handle_errors,
    show_error_panel,
)

__all__ = [
    "BANNER",
    "console",
    "print_banner",
    "build_context",
    "handle_errors",
    "show_error_panel",
]
