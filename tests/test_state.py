# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Tests for the persisted step record."""

import json
from datetime import datetime

from droidvm import __version__
from droidvm.state import SetupState


def test_new_state_is_empty(state):
    assert state.steps == {}
    assert state.facts == {}
    assert not state.path.exists(), "nothing is written until something changes"


def test_mark_done_persists(state):
    state.mark_done("ssh", when=datetime(2025, 1, 2, 3, 4, 5, 678))

    assert state.is_done("ssh")
    assert state.last_run("ssh") == "2025-01-02T03:04:05"

    data = json.loads(state.path.read_text())
    assert data["version"] == __version__
    assert data["steps"] == {"ssh": "2025-01-02T03:04:05"}

    reloaded = SetupState(state.path)
    assert reloaded.is_done("ssh")


def test_facts_persist(state):
    state.set_fact("tunnel_url", "https://api.example.com")

    reloaded = SetupState(state.path)
    assert reloaded.get_fact("tunnel_url") == "https://api.example.com"
    assert reloaded.get_fact("missing") is None


def test_reset_single_step(state):
    state.mark_done("ssh")
    state.mark_done("tmux")
    state.set_fact("tailscale_ip", "100.64.0.1")

    state.reset("ssh")

    reloaded = SetupState(state.path)
    assert not reloaded.is_done("ssh")
    assert reloaded.is_done("tmux")
    assert reloaded.get_fact("tailscale_ip") == "100.64.0.1"


def test_reset_everything(state):
    state.mark_done("ssh")
    state.set_fact("tunnel_url", "https://x.example.com")

    state.reset()

    reloaded = SetupState(state.path)
    assert reloaded.steps == {}
    assert reloaded.facts == {}


def test_corrupt_file_ignored(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json")

    state = SetupState(path)

    assert state.steps == {}
    state.mark_done("packages")
    assert SetupState(path).is_done("packages"), "corrupt file is replaced on save"


def test_non_mapping_file_ignored(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("[1, 2, 3]")

    assert SetupState(path).steps == {}
