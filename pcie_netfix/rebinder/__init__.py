# SPDX-License-Identifier: LGPL-3.0-or-later
# pcie_netfix/rebinder/__init__.py
"""
Interface rebinder: keep /etc/network/interfaces pointing at the NIC's
current `enp<bus>s0` name.

Main entry point:
    InterfaceRebinder - detect, back up, rewrite, verify, commit

Supporting modules:
    - model: RebindState, RebindResult, RewritePlan
    - document: line-oriented matching/substitution over the config text
"""

from .core import BACKUP_PREFIX, InterfaceRebinder, rebind
from .model import RebindResult, RebindState, RewritePlan, RewriteStrategy

__all__ = [
    "InterfaceRebinder",
    "rebind",
    "BACKUP_PREFIX",
    "RebindResult",
    "RebindState",
    "RewritePlan",
    "RewriteStrategy",
]
