# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""tmux configuration and session helpers.

The config written here is meant for phones: C-a is reachable on most
on-screen keyboards, and windows/panes start at 1 to match the number row.
"""

from pathlib import Path
from typing import Dict, List, Optional

from droidvm.models.setup_config import TmuxSettings
from droidvm.utils.logging import get_logger
from droidvm.utils.shell import CommandRunner

logger = get_logger(__name__)

CONFIG_HEADER = "# DroidVM Config"


def sanitize_tmux_name(name: str) -> str:
    """Sanitize a name for use as tmux session name.

    Returns:
        Sanitized name safe for tmux (alphanumeric, hyphens, underscores only)
    """
    cleaned = "".join(ch if ch.isalnum() or ch in ("-", "_") else "-" for ch in name)
    return cleaned.strip("-") or "droidvm"


def render_tmux_conf(settings: Optional[TmuxSettings] = None) -> str:
    """Build the ~/.tmux.conf contents."""
    settings = settings or TmuxSettings()
    lines = [
        CONFIG_HEADER,
        f"set -g prefix {settings.prefix}",
    ]
    # Only release the stock prefix when we replaced it
    if settings.prefix != "C-b":
        lines.append("unbind C-b")
    lines.extend(
        [
            f"bind {settings.prefix} send-prefix",
            f"set -g base-index {settings.base_index}",
            f"setw -g pane-base-index {settings.base_index}",
            f"set -g status-style {settings.status_style}",
            f"set -g history-limit {settings.history_limit}",
        ]
    )
    return "\n".join(lines) + "\n"


def write_tmux_conf(path: Path, settings: Optional[TmuxSettings] = None) -> bool:
    """Write the tmux config unless the user already has one.

    Returns:
        True if the file was created
    """
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_tmux_conf(settings), encoding="utf-8")
    logger.debug(f"Wrote tmux config to {path}")
    return True


class TmuxClient:
    """Runs tmux on the Termux side."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def has_session(self, name: str) -> bool:
        # "=name" forces an exact match instead of prefix matching
        return self.runner.capture(
            ["tmux", "has-session", "-t", f"={sanitize_tmux_name(name)}"]
        ).ok

    def new_detached(self, name: str, command: str) -> None:
        """Start command in a new detached session."""
        self.runner.run(["tmux", "new-session", "-d", "-s", sanitize_tmux_name(name), command])

    def list_sessions(self) -> List[Dict]:
        """List sessions as dicts with keys: name, windows, attached, created."""
        fmt = "#{session_name}\t#{session_windows}\t#{session_attached}\t#{session_created_string}"
        result = self.runner.capture(["tmux", "list-sessions", "-F", fmt])
        if not result.ok:
            # "no server running" is the normal state before the first session
            return []

        sessions = []
        for line in result.stdout.splitlines():
            parts = line.split("\t", 3)
            if len(parts) == 3:
                parts.append("")
            if len(parts) != 4:
                continue

            name, windows, attached, created = parts
            sessions.append(
                {
                    "name": name,
                    "windows": windows,
                    "attached": attached == "1",
                    "created": created,
                }
            )
        return sessions
