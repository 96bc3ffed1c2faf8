# SPDX-License-Identifier: LGPL-3.0-or-later
# pcie_netfix/status.py
"""
Network status report (`--status`).

Collects what the rebinder cares about: matching controllers and the name
they map to, the name configured on bridge-ports, and the kernel's view of
enp<N>s0 links and bridges. Probe failures are reported as warnings.
"""
from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from .config.settings import RebinderConfig
from .core.exceptions import Fatal
from .core.file_ops import read_text_verbatim
from .core.logger import Log
from .core.utils import U
from .hardware.model import ControllerRecord, HardwareEnumerator
from .rebinder import document

Runner = Callable[[List[str]], str]

# "2: enp6s0: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 1500 qdisc ... master vmbr0 state UP ..."
_LINK_RE = re.compile(r"^\d+:\s+(?P<name>[^:@\s]+)(?:@\S+)?:\s+<(?P<flags>[^>]*)>(?P<rest>.*)$")
# "3: vmbr0    inet 192.168.1.10/24 brd 192.168.1.255 scope global vmbr0\ ..."
_ADDR_RE = re.compile(r"^\d+:\s+(?P<name>\S+)\s+(?P<family>inet6?)\s+(?P<addr>\S+)")
_MANAGED_RE = re.compile(rf"^{document.IFACE_PATTERN}$")


@dataclass
class LinkInfo:
    name: str
    state: str = "UNKNOWN"
    master: Optional[str] = None
    addresses: List[str] = field(default_factory=list)


@dataclass
class NetworkStatus:
    signature: str
    config_path: str
    controllers: List[ControllerRecord] = field(default_factory=list)
    target_interface: Optional[str] = None
    configured_interface: Optional[str] = None
    links: List[LinkInfo] = field(default_factory=list)
    bridges: Dict[str, List[str]] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @property
    def in_sync(self) -> bool:
        return bool(self.target_interface) and self.target_interface == self.configured_interface


def parse_ip_links(text: str) -> List[LinkInfo]:
    out: List[LinkInfo] = []
    for line in (text or "").splitlines():
        m = _LINK_RE.match(line.strip())
        if not m:
            continue
        rest = m.group("rest").split()
        info = LinkInfo(name=m.group("name"))
        for key, val in zip(rest, rest[1:]):
            if key == "state":
                info.state = val
            elif key == "master":
                info.master = val
        out.append(info)
    return out


def parse_ip_addrs(text: str) -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for line in (text or "").splitlines():
        m = _ADDR_RE.match(line.strip())
        if m:
            out.setdefault(m.group("name"), []).append(m.group("addr"))
    return out


def command_runner(logger: logging.Logger) -> Runner:
    def _run(cmd: List[str]) -> str:
        return U.to_text(U.run_cmd(logger, cmd, capture=True, timeout=10).stdout)
    return _run


def collect_status(
    config: RebinderConfig,
    enumerator: HardwareEnumerator,
    logger: Optional[logging.Logger] = None,
    *,
    run: Optional[Runner] = None,
) -> NetworkStatus:
    logger = logger or Log.get("status")
    run = run or command_runner(logger)
    st = NetworkStatus(signature=config.device_signature, config_path=str(config.config_path))

    try:
        st.controllers = enumerator.find_matching(config.device_signature)
    except Fatal as e:
        st.warnings.append(str(e))
    if st.controllers:
        try:
            st.target_interface = st.controllers[0].interface_name
        except ValueError as e:
            st.warnings.append(str(e))
    else:
        st.warnings.append(f"No {config.device_signature} network controller found")

    try:
        text = read_text_verbatim(config.config_path)
        st.configured_interface = document.find_bridge_port_interface(text)
        if st.configured_interface is None:
            st.warnings.append("No enp*s0 interface found on a bridge-ports line")
    except OSError as e:
        st.warnings.append(f"Cannot read {config.config_path}: {e}")

    try:
        links = parse_ip_links(run(["ip", "-o", "link", "show"]))
        addrs = parse_ip_addrs(run(["ip", "-o", "addr", "show"]))
        bridge_names = [l.name for l in parse_ip_links(run(["ip", "-o", "link", "show", "type", "bridge"]))]
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
        st.warnings.append(f"ip probe failed: {e}")
        return st

    for l in links:
        l.addresses = addrs.get(l.name, [])
    st.links = [l for l in links if _MANAGED_RE.match(l.name)]
    for br in bridge_names:
        st.bridges[br] = sorted(l.name for l in links if l.master == br)
    return st


def render_status(st: NetworkStatus, console: Optional[Console] = None) -> None:
    console = console or Console()

    ctl = Table(title=f"Controllers matching {st.signature!r}")
    ctl.add_column("Bus address")
    ctl.add_column("Interface")
    ctl.add_column("Description", overflow="fold")
    for i, rec in enumerate(st.controllers):
        try:
            name = rec.interface_name
        except ValueError:
            name = "?"
        ctl.add_row(rec.bus_address, f"[bold]{name}[/bold]" if i == 0 else name, rec.description)
    console.print(ctl)

    sync = "[green]in sync[/green]" if st.in_sync else "[yellow]out of sync[/yellow]"
    console.print(
        f"Config {st.config_path}: bridge-ports -> {st.configured_interface or '-'} "
        f"(expected {st.target_interface or '-'}, {sync})"
    )

    links = Table(title="Kernel enp*s0 interfaces")
    links.add_column("Name")
    links.add_column("State")
    links.add_column("Master")
    links.add_column("Addresses")
    for l in st.links:
        links.add_row(l.name, l.state, l.master or "-", ", ".join(l.addresses) or "-")
    console.print(links)

    bridges = Table(title="Bridges")
    bridges.add_column("Bridge")
    bridges.add_column("Ports")
    for br, ports in sorted(st.bridges.items()):
        bridges.add_row(br, ", ".join(ports) or "-")
    console.print(bridges)

    for w in st.warnings:
        console.print(f"[yellow]⚠️  {w}[/yellow]")
