# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Persisted record of which provisioning steps already completed.

Stored as JSON next to setup.log:

    {
      "version": "1.1.0",
      "steps": {"ssh": "2025-01-01T12:00:00"},
      "facts": {"tunnel_url": "https://api.example.com"}
    }

Facts are values discovered during setup that later commands report
(droidvm info) without re-running the step.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from droidvm import __version__
from droidvm.utils.logging import get_logger

logger = get_logger(__name__)


class SetupState:
    """Tracks the last successful run of each step."""

    def __init__(self, path: Path):
        self.path = path
        self.steps: Dict[str, str] = {}
        self.facts: Dict[str, str] = {}
        self.load()

    def load(self) -> None:
        """Read the state file; a missing or corrupt file means nothing ran."""
        self.steps = {}
        self.facts = {}
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable state file {self.path}: {e}")
            return

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed state file {self.path}")
            return

        steps = data.get("steps")
        if isinstance(steps, dict):
            self.steps = {str(k): str(v) for k, v in steps.items()}
        facts = data.get("facts")
        if isinstance(facts, dict):
            self.facts = {str(k): str(v) for k, v in facts.items()}

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"version": __version__, "steps": self.steps, "facts": self.facts}
        self.path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")

    def is_done(self, step_id: str) -> bool:
        return step_id in self.steps

    def last_run(self, step_id: str) -> Optional[str]:
        return self.steps.get(step_id)

    def mark_done(self, step_id: str, when: Optional[datetime] = None) -> None:
        self.steps[step_id] = (when or datetime.now()).isoformat(timespec="seconds")
        self.save()

    def get_fact(self, key: str) -> Optional[str]:
        return self.facts.get(key)

    def set_fact(self, key: str, value: str) -> None:
        self.facts[key] = value
        self.save()

    def reset(self, step_id: Optional[str] = None) -> None:
        """Forget one step, or every step and fact when step_id is None."""
        if step_id is None:
            self.steps = {}
            self.facts = {}
        else:
            self.steps.pop(step_id, None)
        self.save()
