# SPDX-License-Identifier: LGPL-3.0-or-later
# pcie_netfix/rebinder/model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..hardware.model import ControllerRecord


class RebindState(Enum):
    START = "start"
    ENUMERATED = "enumerated"
    BACKED_UP = "backed-up"
    REWRITTEN = "rewritten"
    NOOP_SKIPPED = "noop-skipped"
    VERIFIED = "verified"
    COMMITTED = "committed"
    # terminal failures
    NO_CONTROLLER_FOUND = "no-controller-found"
    VERIFICATION_FAILED = "verification-failed"


class RewriteStrategy(Enum):
    NOOP = "noop"  # bridge-ports already names the target
    EXACT = "exact"  # replace the name found on the bridge-ports line
    PATTERN = "pattern"  # no name on bridge-ports: replace every enp<N>s0


@dataclass
class RewritePlan:
    target: str
    current: Optional[str]
    strategy: RewriteStrategy
    original: str
    rewritten: str
    replacements: int = 0

    @property
    def changes_content(self) -> bool:
        return self.rewritten != self.original


@dataclass
class RebindResult:
    """Outcome of one rebinder run."""

    interface: str
    previous_interface: Optional[str] = None
    changed: bool = False
    state: RebindState = RebindState.START
    controller: Optional[ControllerRecord] = None
    backup_path: Optional[Path] = None
    dry_run: bool = False
    strategy: Optional[RewriteStrategy] = None
    diff: str = ""
    warnings: List[str] = field(default_factory=list)
    states: List[RebindState] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state not in (RebindState.NO_CONTROLLER_FOUND, RebindState.VERIFICATION_FAILED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "interface": self.interface,
            "previous_interface": self.previous_interface,
            "changed": self.changed,
            "state": self.state.value,
            "controller": (
                {"bus_address": self.controller.bus_address, "description": self.controller.description}
                if self.controller
                else None
            ),
            "backup_path": str(self.backup_path) if self.backup_path else None,
            "dry_run": self.dry_run,
            "strategy": self.strategy.value if self.strategy else None,
            "warnings": list(self.warnings),
        }
