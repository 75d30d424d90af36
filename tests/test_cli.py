# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Tests for the droidvm command line."""

import json

import pytest
from click.testing import CliRunner

from droidvm import __version__
from droidvm.cli import cli
from droidvm.paths import TermuxPaths


@pytest.fixture
def cli_runner(runner, monkeypatch):
    """Click runner whose commands see the fake CommandRunner."""
    monkeypatch.setattr("droidvm.cli.helpers.utils.CommandRunner", lambda: runner)
    monkeypatch.setattr("getpass.getuser", lambda: "u0_a123")
    monkeypatch.setenv("DROIDVM_SKIP_TERMUX_CHECK", "1")
    return CliRunner()


def invoke(cli_runner, *args):
    return cli_runner.invoke(cli, list(args), catch_exceptions=False)


def test_no_command_prints_groups(cli_runner):
    result = invoke(cli_runner)

    assert result.exit_code == 0
    assert "Usage: droidvm" in result.output
    assert "Provisioning:" in result.output
    assert "Information:" in result.output


def test_version(cli_runner):
    result = invoke(cli_runner, "--version")

    assert result.exit_code == 0
    assert __version__ in result.output


def test_debug_flag_prints_diagnostics(cli_runner):
    """--debug echoes the startup diagnostics that normally only reach the log file."""
    quiet = invoke(cli_runner, "steps")
    assert "[DEBUG]" not in quiet.output

    result = invoke(cli_runner, "--debug", "steps")

    assert result.exit_code == 0, result.output
    assert "[DEBUG] Python:" in result.output
    assert "[DEBUG] Debug mode: True" in result.output


def test_steps_lists_run_order(cli_runner):
    result = invoke(cli_runner, "steps")

    assert result.exit_code == 0
    lines = [line for line in result.output.splitlines() if line.strip()]
    ids = [line.split()[1] for line in lines[1:]]
    assert ids == ["packages", "ssh", "tmux", "python", "ubuntu", "tailscale", "cloudflare"]


def test_setup_single_step(cli_runner, isolated_home):
    result = invoke(cli_runner, "setup", "--yes", "--no-preflight", "--only", "tmux")

    assert result.exit_code == 0, result.output
    assert "Setting up tmux" in result.output
    assert "Setup Summary" in result.output
    assert "DroidVM Setup Complete" in result.output
    assert "ssh -p 8022 u0_a123@" in result.output
    assert TermuxPaths.tmux_conf().exists()

    state = json.loads((isolated_home / "droidvm" / "state.json").read_text())
    assert "tmux" in state["steps"]


def test_setup_second_run_is_noop(cli_runner):
    invoke(cli_runner, "setup", "--yes", "--no-preflight", "--only", "tmux")
    TermuxPaths.tmux_conf().write_text("# edited\n")

    result = invoke(cli_runner, "setup", "--yes", "--no-preflight", "--only", "tmux")

    assert result.exit_code == 0
    assert "Already satisfied" in result.output
    assert TermuxPaths.tmux_conf().read_text() == "# edited\n"


def test_setup_required_failure_exits_1(cli_runner, runner):
    runner.fail("pip")

    result = invoke(cli_runner, "setup", "--yes", "--no-preflight", "--only", "python")

    assert result.exit_code == 1
    assert "Setup Failed" in result.output
    assert "DroidVM Setup Complete" not in result.output


def test_setup_skip_cloudflare(cli_runner, runner):
    result = invoke(
        cli_runner,
        "setup",
        "--yes",
        "--no-preflight",
        "--only",
        "cloudflare",
        "--skip-cloudflare",
    )

    assert result.exit_code == 0, result.output
    assert "Skipping Cloudflare setup by user request." in result.output
    assert not runner.ran("proot-distro")


def test_setup_optional_failure_still_completes(cli_runner, runner):
    """Cloudflare without a container fails, but the run still succeeds."""
    config_file = TermuxPaths.config_file()
    config_file.parent.mkdir(parents=True)
    config_file.write_text("cloudflare:\n  domain: example.com\n")
    runner.fail("tailscale", "ip")

    result = invoke(
        cli_runner, "setup", "--no-preflight", "--only", "tmux", "--only", "cloudflare", "--yes"
    )

    assert result.exit_code == 0, result.output
    assert "container is not installed" in result.output
    assert "DroidVM Setup Complete" in result.output


def test_setup_preflight_failure(cli_runner, runner):
    runner.fail("ping")

    result = invoke(cli_runner, "setup", "--yes")

    assert result.exit_code == 1
    assert "No internet connection detected." in result.output
    assert not runner.ran("pkg")


def test_setup_interrupted(cli_runner, monkeypatch):
    def interrupt(ctx):
        raise KeyboardInterrupt

    monkeypatch.setattr("droidvm.cli.commands.setup.run_preflight", interrupt)

    result = invoke(cli_runner, "setup", "--yes")

    assert result.exit_code == 1
    assert "Setup interrupted." in result.output


def test_setup_unknown_step(cli_runner):
    result = cli_runner.invoke(cli, ["setup", "--only", "docker"])

    assert result.exit_code == 2
    assert "docker" in result.output


def test_status(cli_runner):
    invoke(cli_runner, "setup", "--yes", "--no-preflight", "--only", "tmux")

    result = invoke(cli_runner, "status")

    assert result.exit_code == 0
    assert "Provisioning Status" in result.output
    assert "satisfied" in result.output
    assert "never" in result.output


def test_reset_one_step(cli_runner, isolated_home):
    invoke(cli_runner, "setup", "--yes", "--no-preflight", "--only", "tmux")

    result = invoke(cli_runner, "reset", "tmux")

    assert result.exit_code == 0
    assert "Forgot step 'tmux'" in result.output
    state = json.loads((isolated_home / "droidvm" / "state.json").read_text())
    assert state["steps"] == {}


def test_reset_all(cli_runner):
    result = invoke(cli_runner, "reset")

    assert result.exit_code == 0
    assert "Forgot all recorded steps" in result.output


def test_info(cli_runner, runner):
    runner.on("ifconfig", "wlan0", stdout="  inet 192.168.1.42  netmask 255.255.255.0\n")
    runner.fail("tailscale", "ip")

    result = invoke(cli_runner, "info")

    assert result.exit_code == 0
    assert "Access Details" in result.output
    assert "ssh -p 8022 u0_a123@192.168.1.42" in result.output
    assert "http://192.168.1.42:8000" in result.output


def test_doctor(cli_runner, runner):
    result = invoke(cli_runner, "doctor")

    assert result.exit_code == 0, result.output
    assert "Pre-flight checks passed" in result.output


def test_doctor_without_network(cli_runner, runner):
    runner.fail("ping")

    result = invoke(cli_runner, "doctor")

    assert result.exit_code == 1
    assert "No internet connection detected." in result.output
