# SPDX-License-Identifier: LGPL-3.0-or-later
import subprocess

import pytest
from rich.console import Console

from fakes.fake_hardware import FakeEnumerator, rtl
from fakes.fake_logger import FakeLogger
from pcie_netfix.config.settings import RebinderConfig
from pcie_netfix.status import collect_status, parse_ip_addrs, parse_ip_links, render_status

IP_LINK = """\
1: lo: <LOOPBACK,UP,LOWER_UP> mtu 65536 qdisc noqueue state UNKNOWN mode DEFAULT group default qlen 1000\\    link/loopback 00:00:00:00:00:00 brd 00:00:00:00:00:00
2: enp6s0: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 1500 qdisc pfifo_fast master vmbr0 state UP mode DEFAULT group default qlen 1000\\    link/ether aa:bb:cc:dd:ee:ff brd ff:ff:ff:ff:ff:ff
3: enp7s0: <BROADCAST,MULTICAST> mtu 1500 qdisc noop state DOWN mode DEFAULT group default qlen 1000\\    link/ether aa:bb:cc:dd:ee:00 brd ff:ff:ff:ff:ff:ff
4: vmbr0: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 1500 qdisc noqueue state UP mode DEFAULT group default qlen 1000\\    link/ether aa:bb:cc:dd:ee:ff brd ff:ff:ff:ff:ff:ff
5: tap100i0@if2: <BROADCAST,MULTICAST,UP> mtu 1500 qdisc pfifo_fast master vmbr0 state UNKNOWN\\    link/ether 11:22:33:44:55:66
"""
IP_ADDR = """\
1: lo    inet 127.0.0.1/8 scope host lo\\       valid_lft forever preferred_lft forever
4: vmbr0    inet 192.168.1.10/24 brd 192.168.1.255 scope global vmbr0\\       valid_lft forever preferred_lft forever
4: vmbr0    inet6 fe80::a8bb:ccff:fedd:eeff/64 scope link \\       valid_lft forever preferred_lft forever
"""
IP_BRIDGE = "4: vmbr0: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 1500 qdisc noqueue state UP\\    link/ether aa:bb:cc:dd:ee:ff\n"


def _runner(cmd):
    if cmd[-2:] == ["type", "bridge"]:
        return IP_BRIDGE
    if cmd[:3] == ["ip", "-o", "addr"]:
        return IP_ADDR
    return IP_LINK


@pytest.fixture
def config(tmp_path):
    p = tmp_path / "interfaces"
    p.write_text("auto vmbr0\niface vmbr0 inet static\n        bridge-ports enp3s0\n", encoding="utf-8")
    return RebinderConfig(config_path=p, backup_dir=tmp_path / "backup")


@pytest.mark.unit
class TestParsers:
    def test_links(self):
        links = {l.name: l for l in parse_ip_links(IP_LINK)}
        assert links["enp6s0"].state == "UP"
        assert links["enp6s0"].master == "vmbr0"
        assert links["enp7s0"].master is None
        assert "tap100i0" in links

    def test_addrs(self):
        assert parse_ip_addrs(IP_ADDR)["vmbr0"] == ["192.168.1.10/24", "fe80::a8bb:ccff:fedd:eeff/64"]


@pytest.mark.unit
class TestCollect:
    def test_reports_out_of_sync_config(self, config):
        st = collect_status(config, FakeEnumerator([rtl()]), FakeLogger(), run=_runner)

        assert st.target_interface == "enp6s0"
        assert st.configured_interface == "enp3s0"
        assert st.in_sync is False
        assert [l.name for l in st.links] == ["enp6s0", "enp7s0"]
        assert st.bridges == {"vmbr0": ["enp6s0", "tap100i0"]}

    def test_in_sync(self, config):
        config.config_path.write_text("        bridge-ports enp6s0\n", encoding="utf-8")
        st = collect_status(config, FakeEnumerator([rtl()]), FakeLogger(), run=_runner)
        assert st.in_sync is True
        assert st.warnings == []

    def test_problems_become_warnings(self, config):
        config.config_path.unlink()

        def failing(cmd):
            raise subprocess.CalledProcessError(1, cmd)

        st = collect_status(config, FakeEnumerator([]), FakeLogger(), run=failing)

        assert st.controllers == []
        assert st.in_sync is False
        assert len(st.warnings) == 3
        assert any(w.startswith("ip probe failed") for w in st.warnings)


@pytest.mark.unit
def test_render_status(config):
    st = collect_status(config, FakeEnumerator([rtl()]), FakeLogger(), run=_runner)
    console = Console(record=True, width=160, color_system=None)

    render_status(st, console)

    out = console.export_text()
    assert "06:00.0" in out
    assert "enp6s0" in out
    assert "out of sync" in out
    assert "vmbr0" in out


@pytest.mark.unit
def test_non_utf8_config_is_read(config):
    config.config_path.write_bytes(b"# r\xe9seau\n        bridge-ports enp6s0\n")
    st = collect_status(config, FakeEnumerator([rtl()]), FakeLogger(), run=_runner)
    assert st.configured_interface == "enp6s0"
    assert st.in_sync is True
