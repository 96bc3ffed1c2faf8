# SPDX-License-Identifier: LGPL-3.0-or-later
# pcie_netfix/hardware/lspci.py
from __future__ import annotations

import logging
import re
import subprocess
from typing import List, Optional

from ..core.exceptions import Fatal
from ..core.logger import Log
from ..core.utils import U
from .model import ControllerRecord, HardwareEnumerator

# "06:00.0 Ethernet controller: Realtek ... RTL8111/8168/8211/8411 ... (rev 15)"
_LSPCI_LINE_RE = re.compile(r"^(?P<addr>(?:[0-9a-fA-F]{4}:)?[0-9a-fA-F]{1,2}:[0-9a-fA-F]{1,2}\.[0-7])\s+(?P<desc>.+)$")


def parse_lspci_output(text: str, *, ethernet_only: bool = True) -> List[ControllerRecord]:
    """
    Parse default `lspci` output into records, keeping input order.
    Lines that don't start with a PCI address are skipped.
    """
    out: List[ControllerRecord] = []
    for raw in (text or "").splitlines():
        line = raw.strip()
        if not line:
            continue
        m = _LSPCI_LINE_RE.match(line)
        if not m:
            continue
        rec = ControllerRecord(bus_address=m.group("addr"), description=m.group("desc").strip())
        if ethernet_only and not rec.is_ethernet:
            continue
        out.append(rec)
    return out


class LspciEnumerator(HardwareEnumerator):
    """Ethernet controllers as reported by `lspci`."""

    def __init__(self, logger: Optional[logging.Logger] = None, *, lspci: str = "lspci"):
        self.logger = logger or Log.get("hardware")
        self.lspci = lspci

    def list_controllers(self) -> List[ControllerRecord]:
        if U.which(self.lspci) is None:
            raise Fatal(127, f"{self.lspci} not found (install pciutils)")
        try:
            cp = U.run_cmd(self.logger, [self.lspci], capture=True, timeout=30)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            raise Fatal(1, f"PCI enumeration failed: {e}", cause=e) from e

        records = parse_lspci_output(U.to_text(cp.stdout))
        self.logger.debug("lspci reported %d Ethernet controller(s)", len(records))
        return records
