# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# pcie_netfix/cli/main.py
from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console
from rich.prompt import Confirm
from rich.syntax import Syntax

from ..config.settings import RebinderConfig
from ..config.systemd_template import generate_systemd_unit, infer_unit_params
from ..core.exceptions import Fatal, format_exception_for_cli
from ..core.file_ops import printable, read_text_verbatim
from ..core.logger import Log, is_tty
from ..core.utils import U
from ..hardware.lspci import LspciEnumerator
from ..hardware.model import HardwareEnumerator
from ..installer import Installer
from ..rebinder import InterfaceRebinder, RebindResult, document
from ..services.systemctl import ServiceController, SystemctlController
from ..status import collect_status, render_status
from .args import parse_args_with_config


def _ask_restart(service: str) -> bool:
    return Confirm.ask(f"Do you want to restart {service} now?", default=False)


class App:
    """
    Dispatches one CLI invocation. Collaborators default to the real
    lspci/systemctl implementations and can be replaced (tests).
    """

    def __init__(
        self,
        logger: logging.Logger,
        args: argparse.Namespace,
        *,
        enumerator: Optional[HardwareEnumerator] = None,
        services: Optional[ServiceController] = None,
        console: Optional[Console] = None,
        confirm: Callable[[str], bool] = _ask_restart,
        interactive: Optional[bool] = None,
    ):
        self.logger = logger
        self.args = args
        self.enumerator = enumerator or LspciEnumerator(logger)
        self.services = services or SystemctlController(logger)
        self.console = console or Console()
        self.confirm = confirm
        self.interactive = is_tty(sys.stdin) if interactive is None else interactive
        self.config = RebinderConfig.from_mapping(vars(args))

    # ---------------------------
    # Modes
    # ---------------------------

    def run(self) -> int:
        a = self.args
        if a.generate_systemd:
            generate_systemd_unit(a, self.logger)
            return 0
        if a.status:
            return self.cmd_status()
        if a.dry_run:
            return self.cmd_dry_run()

        U.require_root_if_needed(True)
        if a.install or a.test_only:
            return self.cmd_install(enable=not a.test_only)
        if a.uninstall:
            return self.cmd_uninstall()
        return self.cmd_fix()

    def cmd_fix(self) -> int:
        Log.banner(self.logger, "PCIe network fix")
        InterfaceRebinder(self.config, self.enumerator, self.logger, notify=self._maybe_restart).run()
        Log.ok(self.logger, "PCIe network fix completed successfully!")
        return 0

    def cmd_dry_run(self) -> int:
        self.logger.info("DRY RUN MODE - No changes will be made")
        result = InterfaceRebinder(self.config, self.enumerator, self.logger, dry_run=True).run()
        self.logger.info("New interface would be: %s", result.interface)
        self._show_managed_lines()
        if result.diff:
            self.console.print(Syntax(printable(result.diff), "diff", theme="ansi_dark"))
        else:
            self.logger.info("No changes needed")
        self.logger.info("DRY RUN completed - no changes made")
        return 0

    def cmd_status(self) -> int:
        render_status(collect_status(self.config, self.enumerator, self.logger), self.console)
        return 0

    def cmd_install(self, *, enable: bool) -> int:
        self._installer().install(enable=enable, test=True)
        return 0

    def cmd_uninstall(self) -> int:
        self._installer().uninstall()
        return 0

    # ---------------------------
    # Helpers
    # ---------------------------

    def _installer(self) -> Installer:
        return Installer(
            self.services,
            infer_unit_params(self.args),
            self.logger,
            unit_dir=Path(self.args.unit_dir),
            unit_name=self.args.unit_name,
        )

    def _show_managed_lines(self) -> None:
        path = self.config.config_path
        try:
            text = read_text_verbatim(path)
        except OSError:
            return
        lines = document.managed_lines(text)
        if not lines:
            Log.warn(self.logger, "No enp*s0 interface found in current config")
            return
        self.logger.info("Current configuration in %s:", path)
        for n, line in lines:
            self.console.print(f"{n}:{printable(line)}", markup=False, highlight=False)

    def _maybe_restart(self, result: RebindResult) -> None:
        service = self.args.network_service
        if not result.changed:
            return

        policy = self.args.restart
        if policy == "ask":
            do_restart = self.interactive and self.confirm(service)
        else:
            do_restart = policy == "always"

        if not do_restart:
            self.logger.info("Network configuration updated but not restarted")
            self.logger.info("Please restart networking with: systemctl restart %s (or reboot)", service)
            return

        Log.step(self.logger, f"Restarting {service} service...")
        if self.services.restart(service):
            Log.ok(self.logger, f"{service} service restarted successfully")
            if self.interactive:
                self.cmd_status()
        else:
            Log.warn(self.logger, f"Failed to restart {service} service automatically")
            self.logger.info("Please restart networking manually with: systemctl restart %s (or reboot)", service)


def main(argv: Optional[List[str]] = None) -> None:
    logger: Optional[logging.Logger] = None

    try:
        args, _conf, logger = parse_args_with_config(argv)
    except Fatal as e:
        print(f"💥 ERROR    {e}", file=sys.stderr)
        raise SystemExit(e.code)
    except KeyboardInterrupt:
        raise SystemExit(130)

    verbose = int(getattr(args, "verbose", 0) or 0)
    try:
        rc = App(logger, args).run()
    except Fatal as e:
        logger.error(format_exception_for_cli(e, verbose=verbose))
        rc = e.code
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (Ctrl+C).")
        rc = 130
    except Exception as e:
        logger.error("💥 UNHANDLED %s: %s", type(e).__name__, e)
        logger.debug(traceback.format_exc())
        rc = 1

    raise SystemExit(rc)
