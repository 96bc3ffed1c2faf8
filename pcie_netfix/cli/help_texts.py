# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# pcie_netfix/cli/help_texts.py
from __future__ import annotations

# Pure help text used by argparse epilog rendering.

YAML_EXAMPLE = r"""# pcie-netfix configuration (YAML)
#
# Run:
# sudo pcie-netfix --config /etc/pcie-netfix.yaml
#
# Merge multiple configs (later overrides earlier):
# sudo pcie-netfix --config base.yaml --config overrides.yaml
#
signature: "RTL8111/8168/8211/8411"   # substring of the lspci description
interfaces_file: /etc/network/interfaces
backup_dir: /etc/network/backup
restart: ask                          # ask | always | never
network_service: networking
verbose: 0
# log_file: /var/log/pcie-netfix.log
# json_logs: false
"""

FEATURE_SUMMARY = """\
 • Detects the configured PCIe Ethernet controller via lspci (first match wins)
 • Derives the predictable interface name enp<bus>s0 from its PCI bus number
 • Rewrites the bridge-ports interface in /etc/network/interfaces
 • Timestamped backup before every run, verification, atomic replace
 • Idempotent: re-running with unchanged hardware is a no-op
 • Boot-time systemd oneshot unit: --install / --uninstall / --generate-systemd
"""

USAGE_EXAMPLES = """\
  sudo pcie-netfix                 # detect, fix, ask to restart networking
  pcie-netfix --dry-run            # show what would change
  pcie-netfix --status             # controllers, interfaces, bridges
  sudo pcie-netfix --install       # install + enable boot unit
  sudo pcie-netfix --uninstall
"""
