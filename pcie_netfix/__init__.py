# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# pcie_netfix/__init__.py
"""
pcie-netfix - keep /etc/network/interfaces in sync with a PCIe NIC's name

When another PCIe card is added or removed, the bus number of the onboard
NIC shifts and its predictable name (enp<bus>s0) changes, leaving the
bridge-ports line of a Proxmox/Debian bridge pointing at a missing device.

Usage as a library:

    from pcie_netfix import InterfaceRebinder, LspciEnumerator, RebinderConfig

    result = InterfaceRebinder(RebinderConfig(), LspciEnumerator()).run()
    print(result.interface, result.changed)
"""

__version__ = "0.1.0"

from .config.settings import RebinderConfig
from .hardware import ControllerRecord, HardwareEnumerator, LspciEnumerator
from .rebinder import InterfaceRebinder, RebindResult, RebindState, rebind
from .services import ServiceController, SystemctlController

__all__ = [
    "__version__",
    "RebinderConfig",
    "ControllerRecord",
    "HardwareEnumerator",
    "LspciEnumerator",
    "InterfaceRebinder",
    "RebindResult",
    "RebindState",
    "rebind",
    "ServiceController",
    "SystemctlController",
]
