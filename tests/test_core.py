# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Tests for the tool wrappers in droidvm.core."""

import pytest

from droidvm.core.network import local_ip, parse_inet_address
from droidvm.core.pkg import FORCE_CONFNEW, PackageManager, normalise_packages
from droidvm.core.proot import ProotDistro, parse_installed, rootfs_dir
from droidvm.core.sshd import (
    AUTOSTART_LINE,
    AUTOSTART_MARKER,
    SSHServer,
    ensure_autostart,
    has_autostart,
)
from droidvm.core.tailscale import TailscaleClient
from droidvm.core.tmux import (
    CONFIG_HEADER,
    TmuxClient,
    render_tmux_conf,
    sanitize_tmux_name,
    write_tmux_conf,
)
from droidvm.models import TmuxSettings
from droidvm.utils.exceptions import CommandError
from droidvm.utils.shell import format_command

INSTALLED = "Package: tmux\nStatus: install ok installed\nVersion: 3.4\n"

IFCONFIG_WLAN = """\
wlan0: flags=4163<UP,BROADCAST,RUNNING,MULTICAST>  mtu 1500
        inet 192.168.1.42  netmask 255.255.255.0  broadcast 192.168.1.255
        inet6 fe80::1234:5678:9abc:def0  prefixlen 64  scopeid 0x20<link>
"""


class TestPackageManager:
    def test_update_and_upgrade(self, runner):
        pm = PackageManager(runner)

        pm.update()
        pm.upgrade()

        assert runner.commands("run") == [
            ["pkg", "update", "-y"],
            ["pkg", "upgrade", "-y", "-o", FORCE_CONFNEW],
        ]

    def test_install_normalises_names(self, runner):
        PackageManager(runner).install(["git", " tmux", "git", ""])

        assert runner.commands("run") == [["pkg", "install", "-y", "git", "tmux"]]

    def test_install_nothing(self, runner):
        PackageManager(runner).install([])
        assert runner.calls == []

    def test_install_failure_raises(self, runner):
        runner.fail("pkg", "install", returncode=100)

        with pytest.raises(CommandError) as exc_info:
            PackageManager(runner).install(["git"])
        assert exc_info.value.returncode == 100

    def test_missing(self, runner):
        runner.fail("dpkg", "-s")
        runner.on("dpkg", "-s", "tmux", stdout=INSTALLED)
        runner.on("dpkg", "-s", "git", stdout="Package: git\nStatus: deinstall ok config-files\n")

        assert PackageManager(runner).missing(["tmux", "git", "curl"]) == ["git", "curl"]

    def test_normalise_packages(self):
        assert normalise_packages(["a", "b ", " a", "", "c"]) == ["a", "b", "c"]


class TestSSH:
    def test_autostart_appended_once(self, tmp_path):
        bashrc = tmp_path / ".bashrc"
        bashrc.write_text("export EDITOR=vim\n")

        assert ensure_autostart(bashrc) is True
        assert ensure_autostart(bashrc) is False

        content = bashrc.read_text()
        assert content.startswith("export EDITOR=vim\n")
        assert content.count(AUTOSTART_LINE) == 1
        assert f"\n{AUTOSTART_MARKER}\n{AUTOSTART_LINE}\n" in content

    def test_autostart_creates_bashrc(self, tmp_path):
        bashrc = tmp_path / ".bashrc"

        assert not has_autostart(bashrc)
        assert ensure_autostart(bashrc)
        assert has_autostart(bashrc)

    def test_existing_sshd_line_respected(self, tmp_path):
        """A hand-written sshd line counts as autostart."""
        bashrc = tmp_path / ".bashrc"
        bashrc.write_text("sshd\n")

        assert not ensure_autostart(bashrc)
        assert bashrc.read_text() == "sshd\n"

    def test_server_commands(self, runner):
        server = SSHServer(runner)
        runner.fail("pgrep", "sshd")

        assert not server.is_running()
        server.set_password()
        server.start()

        assert ["passwd"] in runner.commands("interactive")
        assert ["sshd"] in runner.commands("run")

    def test_is_running(self, runner):
        runner.on("pgrep", "sshd", stdout="1234\n")
        assert SSHServer(runner).is_running()


class TestNetwork:
    def test_parse_modern_ifconfig(self):
        assert parse_inet_address(IFCONFIG_WLAN) == "192.168.1.42"

    def test_parse_legacy_ifconfig(self):
        output = "wlan0  Link encap:Ethernet\n  inet addr:10.0.0.7  Bcast:10.0.0.255\n"
        assert parse_inet_address(output) == "10.0.0.7"

    def test_parse_no_address(self):
        assert parse_inet_address("wlan0: flags=4098<BROADCAST,MULTICAST>  mtu 1500\n") is None

    def test_local_ip(self, runner):
        runner.on("ifconfig", "wlan0", stdout=IFCONFIG_WLAN)
        assert local_ip(runner) == "192.168.1.42"

    def test_local_ip_interface_down(self, runner):
        runner.fail("ifconfig")
        assert local_ip(runner, "wlan1") is None


class TestTmux:
    def test_default_conf(self):
        conf = render_tmux_conf()

        assert conf.splitlines() == [
            CONFIG_HEADER,
            "set -g prefix C-a",
            "unbind C-b",
            "bind C-a send-prefix",
            "set -g base-index 1",
            "setw -g pane-base-index 1",
            "set -g status-style bg=black,fg=white",
            "set -g history-limit 10000",
        ]
        assert conf.endswith("\n")

    def test_stock_prefix_not_unbound(self):
        conf = render_tmux_conf(TmuxSettings(prefix="C-b"))
        assert "unbind C-b" not in conf
        assert "set -g prefix C-b" in conf

    def test_write_never_overwrites(self, tmp_path):
        path = tmp_path / ".tmux.conf"

        assert write_tmux_conf(path)
        path.write_text("# mine\n")
        assert not write_tmux_conf(path)
        assert path.read_text() == "# mine\n"

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("cloudflared", "cloudflared"),
            ("my tunnel", "my-tunnel"),
            ("a.b:c", "a-b-c"),
            ("...", "droidvm"),
        ],
    )
    def test_sanitize_tmux_name(self, name, expected):
        assert sanitize_tmux_name(name) == expected

    def test_has_session_exact_match(self, runner):
        runner.fail("tmux", "has-session")
        runner.on("tmux", "has-session", "-t", "=cloudflared")
        client = TmuxClient(runner)

        assert client.has_session("cloudflared")
        assert not client.has_session("cloud")

    def test_new_detached(self, runner):
        TmuxClient(runner).new_detached("my tunnel", "cloudflared tunnel run x")

        assert runner.commands("run") == [
            ["tmux", "new-session", "-d", "-s", "my-tunnel", "cloudflared tunnel run x"]
        ]

    def test_list_sessions(self, runner):
        runner.on(
            "tmux",
            "list-sessions",
            stdout="cloudflared\t1\t0\tMon Jan  1 10:00:00 2025\nmain\t3\t1\t\n",
        )

        sessions = TmuxClient(runner).list_sessions()

        assert [s["name"] for s in sessions] == ["cloudflared", "main"]
        assert sessions[0]["attached"] is False
        assert sessions[1]["attached"] is True
        assert sessions[1]["windows"] == "3"

    def test_list_sessions_without_server(self, runner):
        runner.fail("tmux", "list-sessions", stdout="no server running")
        assert TmuxClient(runner).list_sessions() == []


class TestProot:
    def test_parse_one_line_listing(self):
        listing = "Installed:\n  ubuntu (installed)\n  debian\n"
        assert parse_installed(listing, "ubuntu")
        assert not parse_installed(listing, "debian")

    def test_parse_sibling_alias_not_matched(self):
        """Only the exact alias counts, not one that starts with it."""
        listing = "Installed:\n  ubuntu-oldlts (installed)\n  xubuntu (installed)\n"

        assert not parse_installed(listing, "ubuntu")
        assert parse_installed(listing, "ubuntu-oldlts")
        assert parse_installed("  * ubuntu (installed)\n", "ubuntu")

    def test_parse_block_listing(self):
        listing = (
            "Supported distributions:\n\n"
            "  * Debian\n\n"
            "    Alias: debian\n"
            "    Installed: no\n\n"
            "  * Ubuntu (24.04)\n\n"
            "    Alias: ubuntu\n"
            "    Installed: yes\n"
        )
        assert parse_installed(listing, "ubuntu")
        assert not parse_installed(listing, "debian")

    def test_rootfs_dir(self, tmp_path):
        assert rootfs_dir("ubuntu", tmp_path) == (
            tmp_path / "var" / "lib" / "proot-distro" / "installed-rootfs" / "ubuntu"
        )

    def test_is_installed_from_listing(self, runner):
        runner.on("proot-distro", "list", stdout="  ubuntu (installed)\n")
        assert ProotDistro(runner).is_installed()

    def test_not_installed(self, runner):
        runner.on("proot-distro", "list", stdout="  ubuntu\n")
        assert not ProotDistro(runner).is_installed()

    def test_commands_wrapped_in_login(self, runner):
        distro = ProotDistro(runner, "ubuntu")

        distro.run(["apt", "update"])
        distro.capture(["dpkg", "-s", "curl"])

        assert runner.commands() == [
            ["proot-distro", "login", "ubuntu", "--", "apt", "update"],
            ["proot-distro", "login", "ubuntu", "--", "dpkg", "-s", "curl"],
        ]

    def test_command_line_is_quoted(self, runner):
        line = ProotDistro(runner).command_line(["bash", "-c", "echo hi"])
        assert line == format_command(["proot-distro", "login", "ubuntu", "--", "bash", "-c", "echo hi"])
        assert "'echo hi'" in line

    def test_apt_install(self, runner):
        ProotDistro(runner).apt_install(["curl", "wget"])

        assert runner.commands("run") == [
            [
                "proot-distro", "login", "ubuntu", "--",
                "bash", "-c", "apt update -y && apt install -y curl wget",
            ]
        ]

    def test_missing_packages(self, runner):
        runner.fail("proot-distro", "login", "ubuntu", "--", "dpkg", "-s")
        runner.on("proot-distro", "login", "ubuntu", "--", "dpkg", "-s", "curl", stdout=INSTALLED)

        assert ProotDistro(runner).missing_packages(["curl", "wget"]) == ["wget"]


class TestTailscale:
    def test_ip(self, runner):
        runner.on("tailscale", "ip", "-4", stdout="100.101.102.103\n")
        client = TailscaleClient(runner)

        assert client.ip() == "100.101.102.103"
        assert client.is_up()

    def test_not_running(self, runner):
        runner.fail("tailscale", "ip")
        client = TailscaleClient(runner)

        assert client.ip() is None
        assert not client.is_up()

    def test_up_with_sudo(self, runner):
        runner.executables.add("sudo")

        TailscaleClient(runner).up()

        assert runner.commands("interactive") == [["sudo", "tailscale", "up"]]

    def test_up_falls_back_without_sudo(self, runner):
        runner.executables.add("sudo")
        runner.fail("sudo", "tailscale", "up")

        TailscaleClient(runner).up()

        assert runner.commands("interactive") == [
            ["sudo", "tailscale", "up"],
            ["tailscale", "up"],
        ]

    def test_up_without_sudo_binary(self, runner):
        TailscaleClient(runner).up()
        assert runner.commands("interactive") == [["tailscale", "up"]]

    def test_up_sudo_disabled(self, runner):
        runner.executables.add("sudo")
        TailscaleClient(runner, use_sudo=False).up()
        assert runner.commands("interactive") == [["tailscale", "up"]]

    def test_up_failure_raises(self, runner):
        runner.fail("tailscale", "up")
        with pytest.raises(CommandError):
            TailscaleClient(runner, use_sudo=False).up()
