# SPDX-License-Identifier: LGPL-3.0-or-later
# pcie_netfix/rebinder/document.py
"""
Line-oriented helpers over the contents of /etc/network/interfaces.

Interface names are matched as whole tokens: `enp3s0` matches in
`bridge-ports enp3s0` and `enp3s0.100`, but not inside `enp3s0f1`.
"""
from __future__ import annotations

import difflib
import re
from typing import List, Optional, Tuple

IFACE_PATTERN = r"enp[0-9]+s0"
_IFACE_RE = re.compile(rf"\b{IFACE_PATTERN}\b")
_BRIDGE_PORTS_RE = re.compile(r"^\s*bridge[-_]ports\b")


def _name_re(name: str) -> "re.Pattern[str]":
    return re.compile(rf"\b{re.escape(name)}\b")


def find_bridge_port_interface(text: str) -> Optional[str]:
    """First `enp<N>s0` named on a (non-comment) bridge-ports line."""
    for line in text.splitlines():
        if not _BRIDGE_PORTS_RE.match(line):
            continue
        m = _IFACE_RE.search(line)
        if m:
            return m.group(0)
    return None


def replace_name(text: str, old: str, new: str) -> Tuple[str, int]:
    return _name_re(old).subn(new, text)


def replace_pattern(text: str, new: str) -> Tuple[str, int]:
    return _IFACE_RE.subn(new, text)


def contains_name(text: str, name: str) -> bool:
    return _name_re(name).search(text) is not None


def managed_lines(text: str) -> List[Tuple[int, str]]:
    """(1-based line number, line) for bridge-ports lines and lines naming an enp<N>s0."""
    out: List[Tuple[int, str]] = []
    for i, line in enumerate(text.splitlines(), start=1):
        if _BRIDGE_PORTS_RE.match(line) or _IFACE_RE.search(line):
            out.append((i, line))
    return out


def unified_diff(before: str, after: str, path: str) -> str:
    return "".join(
        difflib.unified_diff(
            before.splitlines(keepends=True),
            after.splitlines(keepends=True),
            fromfile=f"{path} (current)",
            tofile=f"{path} (rebound)",
        )
    )
