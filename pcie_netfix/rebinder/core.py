# SPDX-License-Identifier: LGPL-3.0-or-later
# pcie_netfix/rebinder/core.py
"""
Interface rebinder.

Keeps the physical port named on a `bridge-ports` line in sync with the
kernel's predictable name for the target NIC (`enp<bus>s0`), which changes
whenever another PCIe card shifts bus numbering.

Pipeline:
1. Enumerate: controllers matching the device signature (none -> NotFoundError)
2. Select: first match in enumeration order
3. Derive: bus number -> target interface name
4. Backup: timestamped verbatim copy (missing file / failed copy only warn)
5. Rewrite: exact-name or generic-pattern substitution, or no-op
6. Verify: rewritten text must name the target (else VerificationError)
7. Commit: atomic replace (temp file + rename), mode preserved
"""
from __future__ import annotations

import datetime as _dt
import logging
from pathlib import Path
from typing import Callable, List, Optional

from ..config.settings import RebinderConfig
from ..core.exceptions import (
    BackupWriteError,
    ConfigMissingError,
    Fatal,
    NotFoundError,
    VerificationError,
)
from ..core.file_ops import copy_verbatim, read_text_verbatim, write_text_atomic
from ..core.logger import Log
from ..core.utils import U
from ..hardware.model import ControllerRecord, HardwareEnumerator
from . import document
from .model import RebindResult, RebindState, RewritePlan, RewriteStrategy

BACKUP_PREFIX = "interfaces_"


class InterfaceRebinder:
    """
    Rewrites the network configuration so it names the NIC's current interface.

    Collaborators are injected: `enumerator` lists PCI controllers, `notify`
    (optional) is called with the result after a successful run.
    """

    def __init__(
        self,
        config: RebinderConfig,
        enumerator: HardwareEnumerator,
        logger: Optional[logging.Logger] = None,
        *,
        dry_run: bool = False,
        clock: Optional[Callable[[], _dt.datetime]] = None,
        notify: Optional[Callable[[RebindResult], None]] = None,
    ):
        self.config = config
        self.enumerator = enumerator
        self.logger = logger or Log.get("rebinder")
        self.dry_run = dry_run
        self.clock = clock or _dt.datetime.now
        self.notify = notify
        self.state = RebindState.START
        self._states: List[RebindState] = [RebindState.START]

    def _enter(self, state: RebindState) -> None:
        self.state = state
        self._states.append(state)
        self.logger.debug("rebinder state -> %s", state.value)

    # ---------------------------
    # Steps 1-3: detection
    # ---------------------------

    def detect(self) -> ControllerRecord:
        sig = self.config.device_signature
        Log.step(self.logger, f"Detecting {sig} network controllers")

        matches = self.enumerator.find_matching(sig)
        if not matches:
            self._enter(RebindState.NO_CONTROLLER_FOUND)
            raise NotFoundError(msg=f"No {sig} network controller found").with_context(signature=sig)

        for rec in matches:
            self.logger.info("Found controller %s %s", rec.bus_address, rec.description)
        if len(matches) > 1:
            Log.warn(
                self.logger,
                f"{len(matches)} controllers match; using the first in enumeration order",
                chosen=matches[0].bus_address,
            )

        chosen = matches[0]
        try:
            seq = chosen.bus_sequence_number
        except ValueError as e:
            raise Fatal(1, f"Failed to extract PCIe bus number from {chosen.bus_address!r}", cause=e) from e

        self._enter(RebindState.ENUMERATED)
        self.logger.info("Detected PCIe bus sequence %d -> %s", seq, chosen.interface_name)
        return chosen

    # ---------------------------
    # Step 4: backup
    # ---------------------------

    def backup(self) -> Optional[Path]:
        """
        Copy the config verbatim into the backup dir. Raises the non-fatal
        ConfigMissingError / BackupWriteError; run() turns them into warnings.
        """
        src = self.config.config_path
        if not src.is_file():
            raise ConfigMissingError(msg=f"Interfaces file not found: {src}").with_context(path=str(src))

        bdir = self.config.backup_dir
        try:
            if not bdir.is_dir():
                U.ensure_dir(bdir)
                self.logger.info("Created backup directory: %s", bdir)
            dst = copy_verbatim(src, bdir / f"{BACKUP_PREFIX}{U.now_ts(self.clock())}")
        except OSError as e:
            raise BackupWriteError(msg=f"Could not back up {src} to {bdir}: {e}", cause=e) from e

        Log.ok(self.logger, f"Backed up current interfaces file to: {dst}")
        return dst

    # ---------------------------
    # Step 5: rewrite (pure)
    # ---------------------------

    def plan(self, text: str, target: str) -> RewritePlan:
        current = document.find_bridge_port_interface(text)

        if current is not None:
            self.logger.info("Current interface in config: %s", current)
            if current == target:
                return RewritePlan(target, current, RewriteStrategy.NOOP, text, text)
            new_text, n = document.replace_name(text, current, target)
            return RewritePlan(target, current, RewriteStrategy.EXACT, text, new_text, n)

        Log.warn(self.logger, "No enp*s0 interface found on a bridge-ports line; replacing every enp*s0 name")
        new_text, n = document.replace_pattern(text, target)
        return RewritePlan(target, None, RewriteStrategy.PATTERN, text, new_text, n)

    # ---------------------------
    # Step 6: verification
    # ---------------------------

    def verify(self, plan: RewritePlan) -> None:
        if not document.contains_name(plan.rewritten, plan.target):
            self._enter(RebindState.VERIFICATION_FAILED)
            raise VerificationError(
                msg=f"Failed to update interface configuration: {plan.target} not present after rewrite"
            ).with_context(path=str(self.config.config_path), strategy=plan.strategy.value)
        self._enter(RebindState.VERIFIED)

    # ---------------------------
    # Step 7: commit
    # ---------------------------

    def commit(self, plan: RewritePlan) -> None:
        path = self.config.config_path
        try:
            write_text_atomic(path, plan.rewritten)
        except OSError as e:
            raise Fatal(1, f"Failed to write {path}: {e}", cause=e) from e
        self._enter(RebindState.COMMITTED)

    # ---------------------------
    # Orchestration
    # ---------------------------

    def _read(self) -> str:
        path = self.config.config_path
        try:
            return read_text_verbatim(path)
        except OSError as e:
            raise Fatal(1, f"Cannot read {path}: {e}", cause=e) from e

    def _finish(self, result: RebindResult, state: RebindState) -> RebindResult:
        if self.state != state:
            self._enter(state)
        result.state = state
        result.states = list(self._states)
        if self.notify is not None:
            self.notify(result)
        return result

    def run(self) -> RebindResult:
        self.state = RebindState.START
        self._states = [RebindState.START]

        controller = self.detect()
        target = controller.interface_name
        result = RebindResult(interface=target, controller=controller, dry_run=self.dry_run)
        log = Log.bind(self.logger, target=target)

        if not self.config.config_path.is_file():
            missing = ConfigMissingError(msg=f"Interfaces file not found: {self.config.config_path}")
            Log.warn(self.logger, str(missing))
            result.warnings.append(str(missing))
            return self._finish(result, RebindState.NOOP_SKIPPED)

        if not self.dry_run:
            try:
                result.backup_path = self.backup()
            except (ConfigMissingError, BackupWriteError) as e:
                Log.warn(self.logger, str(e))
                result.warnings.append(str(e))
            else:
                self._enter(RebindState.BACKED_UP)

        text = self._read()
        plan = self.plan(text, target)
        result.previous_interface = plan.current
        result.strategy = plan.strategy

        # unchanged text that already names the target: nothing to do
        if not plan.changes_content and document.contains_name(text, target):
            Log.ok(self.logger, f"Interface configuration is already correct: {target}")
            return self._finish(result, RebindState.NOOP_SKIPPED)

        self._enter(RebindState.REWRITTEN)
        log.debug("rewrite strategy=%s replacements=%d", plan.strategy.value, plan.replacements)
        self.verify(plan)

        result.diff = document.unified_diff(plan.original, plan.rewritten, str(self.config.config_path))

        if self.dry_run:
            log.info("DRY RUN: would update interface %s -> %s", plan.current or "enp*s0", target)
            return self._finish(result, RebindState.VERIFIED)

        self.commit(plan)
        result.changed = True
        Log.ok(self.logger, f"Updated interface configuration to: {target}")
        return self._finish(result, RebindState.COMMITTED)


def rebind(
    config: RebinderConfig,
    enumerator: HardwareEnumerator,
    logger: Optional[logging.Logger] = None,
    **kwargs,
) -> RebindResult:
    """Convenience wrapper: one InterfaceRebinder run."""
    return InterfaceRebinder(config, enumerator, logger, **kwargs).run()


__all__ = ["InterfaceRebinder", "rebind", "BACKUP_PREFIX"]
