# pcie_netfix/hardware/__init__.py
from .lspci import LspciEnumerator, parse_lspci_output
from .model import (
    ControllerRecord,
    HardwareEnumerator,
    bus_sequence_number,
    interface_name_for,
)

__all__ = [
    "ControllerRecord",
    "HardwareEnumerator",
    "LspciEnumerator",
    "bus_sequence_number",
    "interface_name_for",
    "parse_lspci_output",
]
