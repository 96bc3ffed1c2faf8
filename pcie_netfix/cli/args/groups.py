# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# pcie_netfix/cli/args/groups.py
from __future__ import annotations

import argparse

from ...config.settings import (
    DEFAULT_BACKUP_DIR,
    DEFAULT_INTERFACES_FILE,
    DEFAULT_NETWORK_SERVICE,
    DEFAULT_SIGNATURE,
    DEFAULT_UNIT_NAME,
)

RESTART_CHOICES = ("ask", "always", "never")


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global config/logging (two-phase parse relies on these)
    # ------------------------------------------------------------------
    from ... import __version__

    g = p.add_argument_group("config / logging")
    g.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON config file (repeatable; later overrides earlier).",
    )
    g.add_argument("--dump-config", action="store_true", help="Print merged normalized config and exit.")
    g.add_argument("--dump-args", action="store_true", help="Print final parsed args and exit.")
    g.add_argument("--version", action="version", version=__version__)
    g.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -vv debug, -vvv trace")
    g.add_argument("-q", "--quiet", action="count", default=0, help="Less output: -q warnings, -qq errors")
    g.add_argument("--log-file", dest="log_file", default=None, help="Also write logs to this file.")
    g.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit NDJSON log lines.")


def _add_modes(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Operation mode (default: detect + fix)
    # ------------------------------------------------------------------
    g = p.add_argument_group("mode").add_mutually_exclusive_group()
    g.add_argument("-d", "--dry-run", dest="dry_run", action="store_true", help="Show what would be changed without making changes.")
    g.add_argument("-s", "--status", dest="status", action="store_true", help="Show current network configuration.")
    g.add_argument("--install", dest="install", action="store_true", help="Install and enable the boot-time systemd unit.")
    g.add_argument("-u", "--uninstall", dest="uninstall", action="store_true", help="Disable and remove the systemd unit.")
    g.add_argument(
        "-t",
        "--test-only",
        dest="test_only",
        action="store_true",
        help="Install and test the unit without enabling auto-start.",
    )
    g.add_argument("--generate-systemd", dest="generate_systemd", action="store_true", help="Print (or --output) the systemd unit.")


def _add_rebinder_knobs(p: argparse.ArgumentParser) -> None:
    g = p.add_argument_group("detection / rewrite")
    g.add_argument("--signature", default=DEFAULT_SIGNATURE, help="Controller description substring to match.")
    g.add_argument("--interfaces-file", dest="interfaces_file", default=DEFAULT_INTERFACES_FILE, help="Network config to rewrite.")
    g.add_argument("--backup-dir", dest="backup_dir", default=DEFAULT_BACKUP_DIR, help="Where timestamped backups go.")


def _add_restart_policy(p: argparse.ArgumentParser) -> None:
    g = p.add_argument_group("service")
    g.add_argument(
        "--restart",
        default="ask",
        choices=RESTART_CHOICES,
        help="Restart networking after a change: ask (TTY prompt; never without a TTY), always, never.",
    )
    g.add_argument("--network-service", dest="network_service", default=DEFAULT_NETWORK_SERVICE, help="Unit restarted after a change.")


def _add_systemd_knobs(p: argparse.ArgumentParser) -> None:
    g = p.add_argument_group("systemd unit")
    g.add_argument("--output", default=None, help="With --generate-systemd: write the unit here instead of stdout.")
    g.add_argument("--unit-dir", dest="unit_dir", default="/etc/systemd/system", help="Install directory for the unit.")
    g.add_argument("--unit-name", dest="unit_name", default=DEFAULT_UNIT_NAME, help="Unit file name.")
    g.add_argument("--python", default=None, help="Interpreter for ExecStart (default: the current one).")
