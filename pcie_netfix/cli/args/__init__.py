# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# pcie_netfix/cli/args/__init__.py
"""
Argument parsing for the pcie-netfix CLI.
"""
from __future__ import annotations

from .builder import HelpFormatter, _build_epilog
from .groups import RESTART_CHOICES
from .parser import _build_preparser, _load_merged_config, build_parser, parse_args_with_config, validate_args

__all__ = [
    "HelpFormatter",
    "RESTART_CHOICES",
    "_build_epilog",
    "_build_preparser",
    "_load_merged_config",
    "build_parser",
    "parse_args_with_config",
    "validate_args",
]
