# SPDX-License-Identifier: LGPL-3.0-or-later
# pcie_netfix/hardware/model.py
"""
PCI controller records and the bus-number -> interface-name mapping.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

# [DDDD:]BB:SS.F  (domain optional, as printed by `lspci` / `lspci -D`)
_PCI_ADDR_RE = re.compile(
    r"^(?:(?P<domain>[0-9a-fA-F]{4}):)?(?P<bus>[0-9a-fA-F]{1,2}):(?P<slot>[0-9a-fA-F]{1,2})\.(?P<func>[0-7])$"
)

ETHERNET_CLASS = "Ethernet controller"


def bus_sequence_number(bus_address: str) -> int:
    """
    Bus byte of a PCI address as an integer.

    >>> bus_sequence_number("06:00.0")
    6
    >>> bus_sequence_number("0000:0a:00.0")
    10
    """
    m = _PCI_ADDR_RE.match((bus_address or "").strip())
    if not m:
        raise ValueError(f"not a PCI bus address: {bus_address!r}")
    return int(m.group("bus"), 16)


def interface_name_for(seq: int) -> str:
    if seq < 0:
        raise ValueError(f"bus sequence number must be non-negative, got {seq}")
    return f"enp{seq}s0"


@dataclass(frozen=True)
class ControllerRecord:
    bus_address: str
    description: str

    @property
    def bus_sequence_number(self) -> int:
        return bus_sequence_number(self.bus_address)

    @property
    def interface_name(self) -> str:
        return interface_name_for(self.bus_sequence_number)

    @property
    def is_ethernet(self) -> bool:
        return ETHERNET_CLASS in self.description

    def matches(self, signature: str) -> bool:
        return bool(signature) and signature in self.description


class HardwareEnumerator(ABC):
    """Source of installed PCI controllers, in enumeration order."""

    @abstractmethod
    def list_controllers(self) -> List[ControllerRecord]:
        raise NotImplementedError

    def find_matching(self, signature: str) -> List[ControllerRecord]:
        """Ethernet controllers whose description contains `signature`, order preserved."""
        return [r for r in self.list_controllers() if r.is_ethernet and r.matches(signature)]
