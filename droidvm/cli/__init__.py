# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""droidvm CLI package."""

import os
from pathlib import Path

import click

from droidvm import __version__
from droidvm.config import get_config
from droidvm.utils.logging import configure_logging, log_startup_info


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="droidvm")
@click.option("--debug", is_flag=True, help="Verbose output (also DROIDVM_DEBUG=1)")
@click.pass_context
def cli(ctx, debug: bool):
    """droidvm - Turn your Android phone into a cloud server."""
    log_file = None
    if not os.environ.get("DROIDVM_LOG_FILE"):
        log_file = Path(get_config().install_dir) / "setup.log"
    configure_logging(debug=debug, log_file=log_file, force=True)
    log_startup_info()

    if ctx.invoked_subcommand is None:
        click.echo("Usage: droidvm [OPTIONS] COMMAND [ARGS]...\n")

        def _print_table(title: str, rows: list[tuple[str, str]], width: int) -> None:
            click.echo(f"{title}:")
            for name, desc in rows:
                click.echo(f"  {name.ljust(width)}  {desc}")
            click.echo("")

        groups = [
            (
                "Provisioning",
                [
                    ("setup", "Run the provisioning steps"),
                    ("doctor", "Run the pre-flight checks only"),
                    ("reset", "Forget which steps already ran"),
                ],
            ),
            (
                "Information",
                [
                    ("status", "Show which steps are satisfied"),
                    ("steps", "List the provisioning steps"),
                    ("info", "Show SSH/HTTP access details"),
                ],
            ),
        ]

        width = max(len(name) for _, rows in groups for name, _ in rows)
        for title, rows in groups:
            _print_table(title, rows, width)
        click.echo("Use --help for full command details.")


def main():
    """Main entry point."""
    cli()


from droidvm.cli.commands import info  # noqa: E402,F401
from droidvm.cli.commands import setup  # noqa: E402,F401
from droidvm.cli.commands import status  # noqa: E402,F401
